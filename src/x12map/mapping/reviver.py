"""Convert map specifications between descriptors and plain ``_type``-tagged data.

Plain data is what map files hold:

    {"_type": "FieldMap", "segmentIdentifier": "W17", "valuePosition": 2}

Attribute keys use the camelCase wire names; snake_case is accepted too.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from x12map.mapping.descriptors import FieldMap, LoopMap, NodeKind, RepeatingSegmentMap, classify

logger = logging.getLogger(__name__)

TYPE_KEY = "_type"

_WIRE_NAMES = {
    "segmentIdentifier": "segment_identifier",
    "valuePosition": "value_position",
    "identifierPosition": "identifier_position",
    "identifierValue": "identifier_value",
}


def contains_type_keys(node: object) -> bool:
    """True when any dict in ``node`` carries a ``_type`` discriminator."""
    if isinstance(node, Mapping):
        if TYPE_KEY in node:
            return True
        return any(contains_type_keys(v) for v in node.values())
    if isinstance(node, list):
        return any(contains_type_keys(item) for item in node)
    return False


def _props(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {_WIRE_NAMES.get(k, k): v for k, v in payload.items() if k != TYPE_KEY}


def _optional_int(value: Any) -> int | None:
    return int(value) if value is not None else None


def _optional_str(value: Any) -> str | None:
    return str(value) if value is not None else None


def _build(kind: str, props: dict[str, Any]) -> object:
    if kind == NodeKind.FIELD.value:
        return FieldMap(
            segment_identifier=str(props["segment_identifier"]),
            value_position=int(props["value_position"]),
            identifier_position=_optional_int(props.get("identifier_position")),
            identifier_value=_optional_str(props.get("identifier_value")),
        )
    if kind == NodeKind.LOOP.value:
        return LoopMap(
            position=int(props["position"]),
            values=revive_map(props.get("values") or {}),
        )
    if kind == NodeKind.REPEATING.value:
        return RepeatingSegmentMap(
            segment_identifier=str(props["segment_identifier"]),
            values=revive_map(props.get("values") or {}),
            identifier_position=_optional_int(props.get("identifier_position")),
            identifier_value=_optional_str(props.get("identifier_value")),
        )
    logger.warning("Unknown %s: %s. Treating as a plain group.", TYPE_KEY, kind)
    return {k: revive_map(v) for k, v in props.items()}


def revive_map(node: Any) -> Any:
    """Turn ``_type``-tagged dicts into descriptors, recursively.

    Descriptors and scalars pass through, so reviving twice changes nothing.
    """
    if isinstance(node, Mapping):
        if TYPE_KEY in node:
            return _build(str(node[TYPE_KEY]), _props(node))
        return {k: revive_map(v) for k, v in node.items()}
    if isinstance(node, list):
        return [revive_map(item) for item in node]
    return node


def dump_map(node: Any) -> Any:
    """Inverse of :func:`revive_map`: descriptors become ``_type``-tagged dicts."""
    kind = classify(node)
    if kind is NodeKind.FIELD:
        payload: dict[str, Any] = {
            TYPE_KEY: kind.value,
            "segmentIdentifier": node.segment_identifier,
            "valuePosition": node.value_position,
        }
        if node.identifier_position is not None:
            payload["identifierPosition"] = node.identifier_position
        if node.identifier_value is not None:
            payload["identifierValue"] = node.identifier_value
        return payload
    if kind is NodeKind.LOOP:
        return {TYPE_KEY: kind.value, "position": node.position, "values": dump_map(node.values)}
    if kind is NodeKind.REPEATING:
        payload = {
            TYPE_KEY: kind.value,
            "segmentIdentifier": node.segment_identifier,
            "values": dump_map(node.values),
        }
        if node.identifier_position is not None:
            payload["identifierPosition"] = node.identifier_position
        if node.identifier_value is not None:
            payload["identifierValue"] = node.identifier_value
        return payload
    if kind is NodeKind.GROUP:
        return {k: dump_map(v) for k, v in node.items()}
    if isinstance(node, list):
        return [dump_map(item) for item in node]
    return node
