"""渲染子树的最后一道防线。"""

from error_core.boundary.trap import BoundaryTrap

__all__ = ["BoundaryTrap"]
