"""Append-only transcript for one agent run."""

from typing import List, Tuple

from ..providers.base import Message

OBSERVATION_PREFIX = "Observation: "


class ConversationState:
    """Ordered messages sent in full to the completion service each turn.

    Observations are synthetic ``user`` messages prefixed with
    ``Observation:`` so the model reads them as input rather than its own
    words.
    """

    def __init__(self, system_prompt: str, user_task: str):
        self._messages: List[Message] = [
            Message(role="system", content=system_prompt),
            Message(role="user", content=user_task),
        ]

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def append_assistant(self, content: str) -> Message:
        message = Message(role="assistant", content=content or "")
        self._messages.append(message)
        return message

    def append_observation(self, body: str) -> Message:
        message = Message(role="user", content=f"{OBSERVATION_PREFIX}{body}")
        self._messages.append(message)
        return message

    def to_payload(self) -> List[dict]:
        """Messages as plain dicts, for logging."""
        return [m.to_dict() for m in self._messages]
