"""Map descriptors: the instructions inside a map specification.

A specification is a nested dict. Each value is one of:

- a plain dict, grouping more entries under a key
- ``FieldMap``: one field of one segment
- ``LoopMap``: one entry per group of a registered loop
- ``RepeatingSegmentMap``: one entry per segment with a given identifier
- a literal (str, int, float, bool), copied into extracted output as-is

Anything else is inert.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class FieldMap:
    segment_identifier: str
    value_position: int
    identifier_position: int | None = None
    identifier_value: str | None = None

    @property
    def qualified(self) -> bool:
        return self.identifier_position is not None and self.identifier_value is not None

    @property
    def max_position(self) -> int:
        if self.identifier_position is None:
            return self.value_position
        return max(self.identifier_position, self.value_position)


@dataclass(frozen=True)
class LoopMap:
    position: int
    values: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RepeatingSegmentMap:
    segment_identifier: str
    values: Mapping[str, Any] = field(default_factory=dict)
    identifier_position: int | None = None
    identifier_value: str | None = None

    @property
    def qualified(self) -> bool:
        return self.identifier_position is not None and self.identifier_value is not None


class NodeKind(Enum):
    GROUP = "group"
    FIELD = "FieldMap"
    LOOP = "LoopMap"
    REPEATING = "RepeatingSegmentMap"
    LITERAL = "literal"
    INERT = "inert"


def classify(node: object) -> NodeKind:
    if isinstance(node, Mapping):
        return NodeKind.GROUP
    if isinstance(node, FieldMap):
        return NodeKind.FIELD
    if isinstance(node, LoopMap):
        return NodeKind.LOOP
    if isinstance(node, RepeatingSegmentMap):
        return NodeKind.REPEATING
    if isinstance(node, (str, int, float, bool)):
        return NodeKind.LITERAL
    return NodeKind.INERT


def field_array_length(maps: list[FieldMap], qualifier_position: int | None = None) -> int:
    """Slots needed to hold every qualifier and value position of ``maps``."""
    highest = max((fm.max_position for fm in maps), default=-1)
    if qualifier_position is not None:
        highest = max(highest, qualifier_position)
    return highest + 1
