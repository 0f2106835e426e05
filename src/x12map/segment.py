"""Fields, segments, and the line tokenizer.

A raw X12 document is a sequence of lines:

    ST*944*0001
    W17*F*20230929*4280

The first token of a line is the segment identifier; the remaining tokens are
its fields, addressed by zero-based position (``W17`` field 2 is ``4280``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

CONTROL_CHARS_RE = re.compile(r"[\n\t\r]")
# whitespace only: \x1c-\x1f separators must survive trimming
TRIM_CHARS = (
    " \t\n\v\f\r\u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)

DEFAULT_FIELD_TERMINATOR = "*"
DEFAULT_LINE_TERMINATOR = "\n"


@dataclass
class Delimiters:
    field_terminator: str = DEFAULT_FIELD_TERMINATOR
    line_terminator: str = DEFAULT_LINE_TERMINATOR


@dataclass
class Field:
    content: str

    def trim(self) -> Field:
        """Strip surrounding whitespace and drop embedded newlines, tabs, and CRs."""
        self.content = CONTROL_CHARS_RE.sub("", self.content.strip(TRIM_CHARS))
        return self

    def __len__(self) -> int:
        return len(self.content)

    def __str__(self) -> str:
        return self.content


@dataclass
class Segment:
    name: str
    fields: list[Field] = field(default_factory=list)

    def get_field(self, position: int | None) -> Field | None:
        """Field at ``position`` or None when the segment is too short."""
        if position is None or position < 0 or position >= len(self.fields):
            return None
        return self.fields[position]

    def value(self, position: int | None) -> str | None:
        found = self.get_field(position)
        return found.content if found is not None else None

    def get_fields(self) -> list[Field]:
        return self.fields

    def add_field(self, item: Field) -> Segment:
        self.fields.append(item)
        return self

    def remove_field(self, item: Field) -> Segment:
        self.fields = [f for f in self.fields if f is not item]
        return self

    def trim_fields(self) -> None:
        for item in self.fields:
            item.trim()

    def render(self, field_terminator: str = DEFAULT_FIELD_TERMINATOR) -> str:
        return field_terminator.join([self.name, *(f.content for f in self.fields)])

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "fields": [f.content for f in self.fields]}


def parse_segments(
    text: str,
    line_terminator: str = DEFAULT_LINE_TERMINATOR,
    field_terminator: str = DEFAULT_FIELD_TERMINATOR,
) -> list[Segment]:
    """Tokenize raw text into segments in source order.

    Nothing is rejected: a blank line yields a segment with an empty name.
    """
    segments: list[Segment] = []
    for line in text.split(line_terminator):
        name, *tokens = line.split(field_terminator)
        segment = Segment(name)
        for token in tokens:
            segment.add_field(Field(token).trim())
        segments.append(segment)
    return segments
