"""Extraction: walk a map specification over segments and build a nested dict.

Missing segments, missing fields, and qualifier mismatches never raise; the
key is left out of the result instead.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from x12map.loop import Loop
from x12map.mapping.descriptors import (
    FieldMap,
    LoopMap,
    NodeKind,
    RepeatingSegmentMap,
    classify,
)
from x12map.segment import Segment

logger = logging.getLogger(__name__)


def _locate_segment(fm: FieldMap, segments: Sequence[Segment]) -> Segment | None:
    candidates = [seg for seg in segments if seg.name == fm.segment_identifier]
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        logger.debug("Segment not found: %s", fm.segment_identifier)
        return None
    if not fm.qualified:
        logger.debug(
            "Ambiguous %s: %d candidates, no qualifier", fm.segment_identifier, len(candidates)
        )
        return None
    return next(
        (seg for seg in candidates if seg.value(fm.identifier_position) == fm.identifier_value),
        None,
    )


def extract_field(fm: FieldMap, segments: Sequence[Segment]) -> str | None:
    """Text of the field ``fm`` points at, or None."""
    segment = _locate_segment(fm, segments)
    if segment is None:
        return None
    if fm.qualified:
        actual = segment.value(fm.identifier_position)
        if actual != fm.identifier_value:
            logger.debug(
                "Qualifier mismatch on %s%02d: expected %r, found %r",
                fm.segment_identifier,
                (fm.identifier_position or 0) + 1,
                fm.identifier_value,
                actual,
            )
            return None
    value = segment.value(fm.value_position)
    if value is None:
        logger.debug("Field not found: %s position %d", fm.segment_identifier, fm.value_position)
    return value


def _extract_loop(lm: LoopMap, loops: Sequence[Loop]) -> list[dict[str, Any]] | None:
    # LoopMap.position indexes the registry in insertion order
    if not 0 <= lm.position < len(loops):
        logger.debug("No loop registered at %d", lm.position)
        return None
    return [extract(lm.values, group, loops) for group in loops[lm.position].contents]


def _extract_repeating(
    rsm: RepeatingSegmentMap, segments: Sequence[Segment], loops: Sequence[Loop]
) -> list[dict[str, Any]]:
    matches = [
        seg
        for seg in segments
        if seg.name == rsm.segment_identifier
        and (not rsm.qualified or seg.value(rsm.identifier_position) == rsm.identifier_value)
    ]
    return [extract(rsm.values, [seg], loops) for seg in matches]


def extract(
    spec: Mapping[str, Any],
    segments: Sequence[Segment],
    loops: Sequence[Loop] = (),
) -> dict[str, Any]:
    """Build the output tree for ``spec`` from the ``segments`` pool."""
    result: dict[str, Any] = {}
    for key, node in spec.items():
        kind = classify(node)
        if kind is NodeKind.GROUP:
            result[key] = extract(node, segments, loops)
        elif kind is NodeKind.FIELD:
            value = extract_field(node, segments)
            if value is not None:
                result[key] = value
        elif kind is NodeKind.LOOP:
            items = _extract_loop(node, loops)
            if items is not None:
                result[key] = items
        elif kind is NodeKind.REPEATING:
            result[key] = _extract_repeating(node, segments, loops)
        elif kind is NodeKind.LITERAL:
            result[key] = node
    return result
