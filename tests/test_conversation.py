"""Tests for ConversationState and ResultExtractor."""

import pytest

from weekend_away.core.conversation import ConversationState
from weekend_away.core.result import ResultExtractor
from weekend_away.providers.base import Message


# ──────────────────────────────────────────────
# ConversationState
# ──────────────────────────────────────────────

class TestConversationState:

    def test_seeded_with_system_and_user(self):
        conv = ConversationState("system text", "user task")
        assert [m.role for m in conv.messages] == ["system", "user"]
        assert conv.messages[1].content == "user task"
        assert len(conv) == 2

    def test_appends_in_order(self):
        conv = ConversationState("s", "u")
        conv.append_assistant('Action: getEvents: {}')
        conv.append_observation("[]")
        conv.append_assistant("Answer: done")

        assert [m.role for m in conv.messages] == ["system", "user", "assistant", "user", "assistant"]
        assert conv.messages[3].content == "Observation: []"

    def test_messages_are_a_snapshot(self):
        conv = ConversationState("s", "u")
        snapshot = conv.messages
        conv.append_assistant("more")
        assert len(snapshot) == 2
        assert len(conv) == 3

    def test_messages_are_immutable(self):
        conv = ConversationState("s", "u")
        with pytest.raises(AttributeError):
            conv.messages[0].content = "changed"

    def test_payload(self):
        conv = ConversationState("s", "u")
        assert conv.to_payload() == [
            {"role": "system", "content": "s"},
            {"role": "user", "content": "u"},
        ]

    def test_invalid_role_rejected(self):
        with pytest.raises(ValueError):
            Message(role="tool", content="x")


# ──────────────────────────────────────────────
# ResultExtractor
# ──────────────────────────────────────────────

class TestStrictExtractor:

    @pytest.fixture
    def extractor(self):
        return ResultExtractor(strict=True)

    def test_marker_stripped(self, extractor):
        result = extractor.extract("Answer: Secret Cinema: an immersive surprise screening.")
        assert result.expected_format is True
        assert result.text == "Secret Cinema: an immersive surprise screening."

    @pytest.mark.parametrize("text", ["answer: hi", "ANSWER:hi", "  \n Answer:   hi  \n"])
    def test_marker_case_insensitive_and_trimmed(self, extractor, text):
        result = extractor.extract(text)
        assert result.expected_format is True
        assert result.text == "hi"

    def test_multiline_answer_kept(self, extractor):
        result = extractor.extract("Answer: Two picks!\n* One\n* Two\n")
        assert result.text == "Two picks!\n* One\n* Two"

    def test_marker_absent_flagged(self, extractor):
        raw = "Here are some events you might like."
        result = extractor.extract(raw)
        assert result.expected_format is False
        assert result.text == raw

    def test_marker_not_at_start(self, extractor):
        result = extractor.extract("Sure! Answer: hi")
        assert result.expected_format is False


class TestLenientExtractor:

    @pytest.fixture
    def extractor(self):
        return ResultExtractor(strict=False)

    def test_marker_stripped(self, extractor):
        result = extractor.extract("Answer: hi")
        assert result.expected_format is True
        assert result.text == "hi"

    def test_marker_absent_accepted(self, extractor):
        result = extractor.extract("  Here are some events.  ")
        assert result.expected_format is True
        assert result.text == "Here are some events."
