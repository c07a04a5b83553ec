"""
Orchestration Layer Base Classes.

The orchestration layer wires together all components:
- Domain services for business logic
- Repositories for data access
- Formatters for presentation

Tools are the remote-invocation surface: each tool is a named function
with a JSON schema for its arguments. The registry renders the catalog in
OpenAI function-calling format and executes tools by name, always
returning a JSON string (or plain text for text tools) instead of raising.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from pydantic.alias_generators import to_snake

logger = logging.getLogger(__name__)


@dataclass
class ToolDefinition:
    """
    Definition of a tool exposed to calling agents.

    Wraps a function with metadata for registration.
    """
    name: str
    description: str
    function: Callable
    parameters: Dict[str, Any] = field(default_factory=lambda: {"type": "object", "properties": {}})
    category: str = "general"
    returns_text: bool = False

    def to_schema(self) -> Dict[str, Any]:
        """Render as an OpenAI function-calling tool entry."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class ToolRegistry:
    """
    Registry for agent tools.

    Provides a way to organize and register tools by category.
    This makes it easy to:
    - Add/remove tools for different agent configurations
    - Group related tools together
    - Document available tools
    """

    def __init__(self):
        self._tools: Dict[str, ToolDefinition] = {}
        self._categories: Dict[str, List[str]] = {}

    def register(
        self,
        name: str,
        description: str,
        function: Callable,
        parameters: Optional[Dict[str, Any]] = None,
        category: str = "general",
        returns_text: bool = False,
    ):
        """
        Register a tool.

        Args:
            name: Unique tool name
            description: Tool description for the agent
            function: The tool function, called with the arguments as keywords
                (camelCase argument names arrive as snake_case)
            parameters: JSON schema of the arguments
            category: Category for organization
            returns_text: The function returns a plain string, not a JSON-able object
        """
        self._tools[name] = ToolDefinition(
            name=name,
            description=description,
            function=function,
            parameters=parameters or {"type": "object", "properties": {}},
            category=category,
            returns_text=returns_text,
        )

        if category not in self._categories:
            self._categories[category] = []
        self._categories[category].append(name)

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self._tools.get(name)

    def get_tools(self, categories: Optional[List[str]] = None) -> List[ToolDefinition]:
        """
        Get tool definitions, optionally filtered by category.

        Args:
            categories: Optional list of categories to include

        Returns:
            List of tool definitions in registration order
        """
        if categories is None:
            return list(self._tools.values())

        tools = []
        for cat in categories:
            for name in self._categories.get(cat, []):
                if name in self._tools:
                    tools.append(self._tools[name])
        return tools

    def get_catalog(self, categories: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        """Get the tool catalog in OpenAI function-calling format."""
        return [tool.to_schema() for tool in self.get_tools(categories)]

    def get_tool_names(self) -> List[str]:
        """Get all registered tool names."""
        return list(self._tools.keys())

    def get_categories(self) -> List[str]:
        """Get all categories."""
        return list(self._categories.keys())

    def execute(self, tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """Execute a tool and return the result as a JSON string (or text)."""
        tool = self._tools.get(tool_name)
        if tool is None:
            return json.dumps({"error": f"Unknown tool: {tool_name}"})

        arguments = arguments or {}
        problem = self._check_arguments(tool, arguments)
        if problem:
            logger.warning(f"Rejected call to {tool_name}: {problem}")
            return json.dumps({"error": problem})

        try:
            result = tool.function(**{to_snake(name): value for name, value in arguments.items()})
        except Exception as e:
            logger.error(f"Error executing tool {tool_name}: {e}")
            return json.dumps({"error": str(e)})

        if tool.returns_text and isinstance(result, str):
            return result
        return json.dumps(result, indent=2, default=str)

    @staticmethod
    def _check_arguments(tool: ToolDefinition, arguments: Dict[str, Any]) -> Optional[str]:
        """Check argument names against the tool's schema."""
        if not isinstance(arguments, dict):
            return "Tool arguments must be an object"
        known = tool.parameters.get("properties", {})
        missing = [name for name in tool.parameters.get("required", []) if arguments.get(name) is None]
        if missing:
            return f"Missing required argument(s): {', '.join(missing)}"
        unexpected = [name for name in arguments if name not in known]
        if unexpected:
            return f"Unexpected argument(s): {', '.join(unexpected)}"
        return None
