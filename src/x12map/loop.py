"""Loop definitions and the loop-boundary scan.

A loop is an ordered list of segment matchers. The first matcher is the
anchor: scanning starts at the first segment it matches, and when the anchor
is qualified (``HL`` whose field 2 is ``P``) every new group must open on a
segment that satisfies it. Groups are closed purely by count, one segment per
matcher, and segments whose identifier is not in the loop are skipped.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from x12map.segment import Segment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmentMatcher:
    segment_identifier: str
    identifier_position: int | None = None
    identifier_value: str | None = None

    @property
    def qualified(self) -> bool:
        return self.identifier_position is not None and self.identifier_value is not None

    def matches(self, segment: Segment) -> bool:
        if segment.name != self.segment_identifier:
            return False
        if not self.qualified:
            return True
        return segment.value(self.identifier_position) == self.identifier_value

    def to_dict(self) -> str | dict[str, Any]:
        if not self.qualified:
            return self.segment_identifier
        return {
            "segmentIdentifier": self.segment_identifier,
            "identifierPosition": self.identifier_position,
            "identifierValue": self.identifier_value,
        }

    @staticmethod
    def coerce(spec: MatcherLike) -> SegmentMatcher:
        if isinstance(spec, SegmentMatcher):
            return spec
        if isinstance(spec, str):
            return SegmentMatcher(spec)
        if isinstance(spec, Mapping):
            name = spec.get("segmentIdentifier", spec.get("segment_identifier"))
            if name is None:
                raise TypeError(f"Segment identifier missing from {dict(spec)!r}")
            position = spec.get("identifierPosition", spec.get("identifier_position"))
            value = spec.get("identifierValue", spec.get("identifier_value"))
            return SegmentMatcher(
                segment_identifier=str(name),
                identifier_position=int(position) if position is not None else None,
                identifier_value=str(value) if value is not None else None,
            )
        raise TypeError(f"Invalid segment identifier: {spec!r}")


MatcherLike = Union[str, SegmentMatcher, Mapping[str, Any]]


@dataclass
class Loop:
    position: int | None = None
    matchers: list[SegmentMatcher] = field(default_factory=list)
    contents: list[list[Segment]] = field(default_factory=list)

    @property
    def anchor(self) -> SegmentMatcher | None:
        return self.matchers[0] if self.matchers else None

    @property
    def segment_identifiers(self) -> list[str]:
        return [m.segment_identifier for m in self.matchers]

    @property
    def last_segment_identifier(self) -> str | None:
        return self.matchers[-1].segment_identifier if self.matchers else None

    def set_position(self, position: int) -> Loop:
        self.position = position
        return self

    def add_segment_identifier(self, spec: MatcherLike) -> Loop:
        self.matchers.append(SegmentMatcher.coerce(spec))
        return self

    def add_segment_identifiers(self, specs: Iterable[MatcherLike]) -> Loop:
        for spec in specs:
            self.add_segment_identifier(spec)
        return self

    def remove_segment_identifier(self, spec: MatcherLike) -> Loop:
        target = SegmentMatcher.coerce(spec)
        self.matchers = [m for m in self.matchers if m != target]
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "segmentIdentifiers": [m.to_dict() for m in self.matchers],
            "contents": [[s.to_dict() for s in group] for group in self.contents],
        }

    @staticmethod
    def from_mapping(payload: Mapping[str, Any]) -> Loop:
        if not isinstance(payload, Mapping):
            raise TypeError(f"Invalid loop definition: {payload!r}")
        position = payload.get("position")
        loop = Loop(position=int(position) if position is not None else None)
        return loop.add_segment_identifiers(
            payload.get("segments", payload.get("segmentIdentifiers", []))
        )


def run_loop(loop: Loop, segments: Sequence[Segment]) -> list[list[Segment]]:
    """Partition ``segments`` into the loop's groups and store them on ``loop.contents``."""
    loop.contents = []
    anchor = loop.anchor
    if anchor is None:
        return loop.contents

    start = next((i for i, seg in enumerate(segments) if anchor.matches(seg)), None)
    if start is None:
        logger.debug("Loop %s: anchor %s not found", loop.position, anchor.segment_identifier)
        return loop.contents

    names = set(loop.segment_identifiers)
    group_size = len(loop.matchers)
    pending: list[Segment] = []
    for segment in segments[start:]:
        if segment.name not in names:
            continue
        # qualification is only enforced when a new group opens
        if not pending and anchor.qualified and not anchor.matches(segment):
            continue
        pending.append(segment)
        if len(pending) == group_size:
            loop.contents.append(pending)
            pending = []

    if pending:
        logger.debug("Loop %s: dropped %d trailing segment(s)", loop.position, len(pending))
    logger.debug("Loop %s: %d group(s)", loop.position, len(loop.contents))
    return loop.contents


def repeating_identifiers(segments: Iterable[Segment]) -> list[str]:
    """Identifiers that occur more than once, in first-seen order."""
    counts = Counter(seg.name for seg in segments)
    return [name for name, count in counts.items() if count > 1]
