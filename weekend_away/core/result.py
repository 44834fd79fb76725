"""Final answer extraction."""

from dataclasses import dataclass

ANSWER_MARKER = "Answer:"


@dataclass(frozen=True)
class ExtractedAnswer:
    text: str
    expected_format: bool


class ResultExtractor:
    """Strips the answer marker from the terminal assistant message.

    In strict mode a response without the marker comes back flagged with
    ``expected_format=False`` and its raw text untouched. In lenient mode any
    text is accepted as the answer.
    """

    def __init__(self, marker: str = ANSWER_MARKER, strict: bool = True):
        self.marker = marker
        self.strict = strict

    def extract(self, text: str) -> ExtractedAnswer:
        text = text or ""
        stripped = text.lstrip()
        if stripped[:len(self.marker)].lower() == self.marker.lower():
            return ExtractedAnswer(text=stripped[len(self.marker):].strip(), expected_format=True)
        if self.strict:
            return ExtractedAnswer(text=text, expected_format=False)
        return ExtractedAnswer(text=text.strip(), expected_format=True)
