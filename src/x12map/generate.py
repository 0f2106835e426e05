"""Generation: walk a map specification over a nested dict and emit X12 lines.

Each level of the specification is handled in two passes. First every
``FieldMap`` at that level is folded into one line per segment identifier,
in first-seen order. Then loops, repeating segments, and groups are expanded
in declaration order.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from x12map.mapping.descriptors import (
    FieldMap,
    NodeKind,
    RepeatingSegmentMap,
    classify,
    field_array_length,
)
from x12map.segment import DEFAULT_FIELD_TERMINATOR, DEFAULT_LINE_TERMINATOR


def _as_mapping(data: object) -> Mapping[str, Any]:
    return data if isinstance(data, Mapping) else {}


def _render(value: object) -> str:
    # JSON spelling: true/false, and 1 rather than 1.0
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _fill(fields: list[str], entries: list[tuple[str, FieldMap]], data: Mapping[str, Any]) -> None:
    for key, fm in entries:
        value = data.get(key)
        if value is None:
            continue
        if fm.qualified:
            fields[fm.identifier_position] = fm.identifier_value
        fields[fm.value_position] = _render(value)


def _field_map_lines(
    spec: Mapping[str, Any], data: Mapping[str, Any], field_terminator: str
) -> list[str]:
    by_segment: dict[str, list[tuple[str, FieldMap]]] = {}
    for key, node in spec.items():
        if classify(node) is NodeKind.FIELD:
            by_segment.setdefault(node.segment_identifier, []).append((key, node))

    lines = []
    for segment_identifier, entries in by_segment.items():
        fields = [""] * field_array_length([fm for _, fm in entries])
        _fill(fields, entries, data)
        lines.append(field_terminator.join([segment_identifier, *fields]))
    return lines


def _repeating_lines(
    rsm: RepeatingSegmentMap, items: list[Any], field_terminator: str
) -> list[str]:
    entries = [(k, v) for k, v in rsm.values.items() if classify(v) is NodeKind.FIELD]
    if not entries:
        return []
    qualifier_position = rsm.identifier_position if rsm.qualified else None
    size = field_array_length([fm for _, fm in entries], qualifier_position)
    lines = []
    for item in items:
        fields = [""] * size
        if rsm.qualified:
            fields[rsm.identifier_position] = rsm.identifier_value
        _fill(fields, entries, _as_mapping(item))
        lines.append(field_terminator.join([rsm.segment_identifier, *fields]))
    return lines


def generate_lines(
    data: Mapping[str, Any],
    spec: Mapping[str, Any],
    field_terminator: str = DEFAULT_FIELD_TERMINATOR,
) -> list[str]:
    """Segment lines for ``data`` laid out by ``spec``, without terminators."""
    data = _as_mapping(data)
    lines = _field_map_lines(spec, data, field_terminator)
    for key, node in spec.items():
        kind = classify(node)
        if kind is NodeKind.LOOP:
            items = data.get(key)
            if isinstance(items, list):
                for item in items:
                    lines.extend(generate_lines(_as_mapping(item), node.values, field_terminator))
        elif kind is NodeKind.REPEATING:
            items = data.get(key)
            if isinstance(items, list):
                lines.extend(_repeating_lines(node, items, field_terminator))
        elif kind is NodeKind.GROUP:
            lines.extend(generate_lines(_as_mapping(data.get(key)), node, field_terminator))
    return lines


def generate(
    data: Mapping[str, Any],
    spec: Mapping[str, Any],
    field_terminator: str = DEFAULT_FIELD_TERMINATOR,
    line_terminator: str = DEFAULT_LINE_TERMINATOR,
) -> str:
    """Render ``data`` as X12 text, one line per generated segment plus a trailing terminator."""
    lines = generate_lines(data, spec, field_terminator)
    return line_terminator.join(lines) + line_terminator
