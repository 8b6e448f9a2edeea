"""Splitting of header values and parsing of media types."""

from __future__ import annotations

from collections.abc import Iterator


def _separator_positions(text: str, separator: str) -> Iterator[int]:
    start = 0
    while (position := text.find(separator, start)) != -1:
        yield position
        start = position + 1


def split(text: str, separator: str) -> list[str]:
    """Split ``text`` at every occurrence of ``separator``.

    Occurrences are searched one character apart, so overlapping
    separators each count. A text without the separator yields itself.
    """
    positions = list(_separator_positions(text, separator))
    if not positions:
        return [text]

    width = len(separator)
    tokens = [text[: positions[0]]]
    for here, following in zip(positions, positions[1:]):
        start = here + width
        tokens.append(text[start:following] if following >= start else text[start:])
    tokens.append(text[positions[-1] + width :])
    return tokens


class MIMEType:
    """A media type taken from a Content-Type header value."""

    def __init__(self, content_type: str) -> None:
        media_type = split(content_type, ";")[0]
        if not media_type:
            raise ValueError("MIMEType: invalid MIME media-type string")
        self.type = media_type
        self.parameters: list[tuple[str, str]] = []

    def __repr__(self) -> str:
        return f"MIMEType({self.type!r})"