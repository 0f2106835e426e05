"""The document aggregate: parsed segments plus registered loops."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from x12map.errors import NoSuchFieldError, NoSuchSegmentError
from x12map.extract import extract
from x12map.generate import generate
from x12map.loop import Loop, repeating_identifiers, run_loop
from x12map.mapping.reviver import contains_type_keys, revive_map
from x12map.segment import Delimiters, Field, Segment, parse_segments

logger = logging.getLogger(__name__)

TRANSACTION_SET_HEADER = "ST"


def _revived(spec: Mapping[str, Any]) -> Mapping[str, Any]:
    return revive_map(spec) if contains_type_keys(spec) else spec


class Transaction:
    """One X12 document. Not safe to share between threads."""

    def __init__(self, delimiters: Delimiters | None = None) -> None:
        self.delimiters = delimiters or Delimiters()
        self.segments: list[Segment] = []
        self.loops: list[Loop] = []

    @classmethod
    def from_text(cls, text: str, delimiters: Delimiters | None = None) -> Transaction:
        transaction = cls(delimiters)
        transaction.generate_segments(text)
        return transaction

    def generate_segments(
        self,
        content: str,
        line_terminator: str | None = None,
        field_terminator: str | None = None,
    ) -> list[Segment]:
        """Tokenize ``content`` and append its segments to this document."""
        segments = parse_segments(
            content,
            line_terminator=line_terminator or self.delimiters.line_terminator,
            field_terminator=field_terminator or self.delimiters.field_terminator,
        )
        self.segments.extend(segments)
        return segments

    def get_segments(self) -> list[Segment]:
        return list(self.segments)

    def list_segment_identifiers(self) -> list[str]:
        return [seg.name for seg in self.segments]

    def remove_segment(self, segment: Segment) -> Transaction:
        self.segments = [s for s in self.segments if s is not segment]
        return self

    def get_loops(self) -> list[Loop]:
        return list(self.loops)

    def add_loop(self, loop: Loop) -> Loop:
        index = len(self.loops)
        if loop.position is None:
            loop.position = index
        elif loop.position != index:
            # LoopMap resolves loops by registry index, not by this label
            logger.warning(
                "Loop position %s registered at index %d; LoopMap(position=%s) will not find it",
                loop.position,
                index,
                loop.position,
            )
        self.loops.append(loop)
        return loop

    def run_loops(self) -> None:
        for loop in self.loops:
            run_loop(loop, self.segments)

    def infer_loops(self) -> Loop:
        """Register one loop made of every identifier that repeats, then run all loops."""
        loop = Loop(position=0).add_segment_identifiers(repeating_identifiers(self.segments))
        logger.debug("Inferred loop identifiers: %s", loop.segment_identifiers)
        self.add_loop(loop)
        self.run_loops()
        return loop

    def get_type(self) -> Field:
        """ST01 of the first ST segment."""
        header = next((s for s in self.segments if s.name == TRANSACTION_SET_HEADER), None)
        if header is None:
            raise NoSuchSegmentError(TRANSACTION_SET_HEADER)
        header.trim_fields()
        code = header.get_field(0)
        if code is None:
            raise NoSuchFieldError(TRANSACTION_SET_HEADER, 0)
        return code

    def map_segments(
        self, map_logic: Mapping[str, Any], segments: Sequence[Segment] | None = None
    ) -> dict[str, Any]:
        """Extract a nested dict from this document; see :func:`x12map.extract.extract`."""
        pool = self.segments if segments is None else segments
        return extract(_revived(map_logic), pool, self.loops)

    def to_x12(
        self,
        data: Mapping[str, Any],
        map_logic: Mapping[str, Any],
        field_terminator: str | None = None,
        line_terminator: str | None = None,
    ) -> str:
        return generate(
            data,
            _revived(map_logic),
            field_terminator=field_terminator or self.delimiters.field_terminator,
            line_terminator=line_terminator or self.delimiters.line_terminator,
        )

    def to_text(
        self, field_terminator: str | None = None, line_terminator: str | None = None
    ) -> str:
        """Re-render the parsed segments (fields as trimmed)."""
        sep = field_terminator or self.delimiters.field_terminator
        eol = line_terminator or self.delimiters.line_terminator
        return eol.join(s.render(sep) for s in self.segments)

    def to_dict(self) -> dict[str, Any]:
        return {
            "segments": [s.to_dict() for s in self.segments],
            "loops": [loop.to_dict() for loop in self.loops],
        }
