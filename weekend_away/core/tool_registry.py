"""
Tool registry for the agent loop.

Tools are async callables taking the parsed argument mapping and returning
text. Dispatch is by name only, so adding a tool never touches the loop.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

ToolFunc = Callable[[Mapping[str, Any]], Awaitable[str]]


@dataclass(frozen=True)
class Tool:
    """A named capability with its required argument keys."""
    name: str
    func: ToolFunc
    required: Tuple[str, ...] = ()
    description: str = ""
    # Example arguments shown to the model in the system prompt
    example: Dict[str, Any] = field(default_factory=dict)
    returns: str = ""

    def missing_arguments(self, args: Mapping[str, Any]) -> List[str]:
        """Required keys that are absent, null or empty."""
        return [key for key in self.required if args.get(key) in (None, "")]

    async def invoke(self, args: Mapping[str, Any]) -> str:
        result = await self.func(args)
        return result if isinstance(result, str) else json.dumps(result)

    def usage(self) -> str:
        """One-line call syntax for prompts."""
        return f"Action: {self.name}: {json.dumps(self.example or {k: '...' for k in self.required})}"


class ToolRegistry:
    """Name -> Tool mapping, built once and shared read-only across runs."""

    def __init__(self, tools: Optional[List[Tool]] = None):
        self._tools: Dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> Tool:
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool
        return tool

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)
