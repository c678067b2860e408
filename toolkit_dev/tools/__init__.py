from .types import (
    BaseTool,
    ServerTool,
    ServerToolConfig,
    ToolFailureClass,
    ToolResult,
    create_base_tool,
)
from .executor import execute_tool
from .usage import InMemoryUsageRecorder, UsageRecorder
