"""领域层模型与异常。

包含：
- models: ErrorRecord、错误类别与呈现指令。
- exceptions: 业务异常类型定义（含渲染故障 RenderFault）。
"""
