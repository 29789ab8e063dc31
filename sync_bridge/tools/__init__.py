from .catalog import TOOL_NAMES, TOOL_DEFINITIONS
from .methods import BridgeMethod
from .dispatch import ToolDispatcher
from .mcp_server import build_mcp_server

__all__ = ["TOOL_DEFINITIONS", "TOOL_NAMES", "BridgeMethod", "ToolDispatcher", "build_mcp_server"]
