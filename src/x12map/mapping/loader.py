from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from x12map.loop import Loop
from x12map.mapping.reviver import revive_map
from x12map.transaction import Transaction


@dataclass
class MapFile:
    """Loop definitions plus a map specification, as stored on disk."""

    map: dict[str, Any]
    loops: list[Loop] = field(default_factory=list)
    name: str | None = None

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> MapFile:
        if not isinstance(payload, Mapping):
            raise TypeError(f"Map file must hold a mapping, got {type(payload).__name__}")
        if "map" not in payload:
            return MapFile(map=revive_map(payload))
        spec = payload["map"] or {}
        if not isinstance(spec, Mapping):
            raise TypeError(f"'map' must be a mapping, got {type(spec).__name__}")
        return MapFile(
            map=revive_map(spec),
            loops=[Loop.from_mapping(entry) for entry in payload.get("loops") or []],
            name=payload.get("name"),
        )

    def apply(self, transaction: Transaction) -> Transaction:
        """Register this file's loops on ``transaction`` and run them."""
        for loop in self.loops:
            transaction.add_loop(Loop(position=loop.position, matchers=list(loop.matchers)))
        if self.loops:
            transaction.run_loops()
        return transaction


def load_map_file(path: Path) -> MapFile:
    if path.suffix.lower() in {".yml", ".yaml"}:
        payload = yaml.safe_load(path.read_text())
    else:
        payload = json.loads(path.read_text())
    return MapFile.from_mapping(payload or {})
