"""
Action parsing for prompt-based tool calls.

The model requests a tool by writing ``Action: <tool>: <json object>``
(usually followed by ``PAUSE``). Anything without that directive is a
candidate final answer.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class ParsedAction:
    """A tool invocation extracted from assistant text."""
    tool_name: str
    raw_arguments: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ActionStep:
    """The text contains a well-formed tool invocation."""
    action: ParsedAction


@dataclass(frozen=True)
class MalformedAction:
    """The text names a tool but its arguments are not a valid JSON object."""
    tool_name: str
    raw_arguments: str
    error: str


@dataclass(frozen=True)
class FinalAnswer:
    """No tool invocation; the whole text is the candidate answer."""
    text: str


ParseResult = Union[ActionStep, MalformedAction, FinalAnswer]


def _match_json_object(text: str, start: int) -> Optional[int]:
    """Return the index just past the object opened at ``text[start]``.

    Braces inside string literals are ignored. Returns None when the object
    is never closed.
    """
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return None


class ActionParser:
    """Classifies assistant text as an action, a malformed action or an answer."""

    ACTION_PATTERN = re.compile(r"Action:\s*([A-Za-z0-9_]+):\s*(?=\{)")

    def find_action(self, text: str) -> Optional[Tuple[str, str]]:
        """Locate the first action directive.

        Returns:
            (tool_name, raw_json) or None when no directive is present
        """
        if not text:
            return None
        match = self.ACTION_PATTERN.search(text)
        if not match:
            return None

        start = match.end()
        end = _match_json_object(text, start)
        if end is None:
            # Unterminated object: hand back the rest of the line block so the
            # JSON error points at what the model actually wrote
            raw = text[start:].split("\nPAUSE")[0].strip()
        else:
            raw = text[start:end]
        return match.group(1), raw

    def parse(self, text: str) -> ParseResult:
        found = self.find_action(text)
        if found is None:
            return FinalAnswer(text=text or "")

        tool_name, raw = found
        try:
            arguments = json.loads(raw)
        except json.JSONDecodeError as e:
            return MalformedAction(tool_name=tool_name, raw_arguments=raw, error=str(e))

        if not isinstance(arguments, dict):
            return MalformedAction(
                tool_name=tool_name,
                raw_arguments=raw,
                error=f"expected a JSON object, got {type(arguments).__name__}",
            )
        return ActionStep(ParsedAction(tool_name=tool_name, raw_arguments=raw, arguments=arguments))


def parse_action(text: str) -> ParseResult:
    """Parse with a default ActionParser."""
    return _default_parser.parse(text)


_default_parser = ActionParser()
