from src.dispatch.dispatcher import ToolDispatcher
from src.dispatch.registry import ToolName, ToolRegistry

__all__ = ["ToolDispatcher", "ToolName", "ToolRegistry"]
