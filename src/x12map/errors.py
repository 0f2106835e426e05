"""Errors raised on the strict lookup paths."""

from __future__ import annotations


class X12MapError(Exception):
    """Base class for x12map failures."""


class NoSuchSegmentError(X12MapError, LookupError):
    def __init__(self, segment_identifier: str) -> None:
        super().__init__(f"No {segment_identifier} segment found")
        self.segment_identifier = segment_identifier


class NoSuchFieldError(X12MapError, LookupError):
    def __init__(self, segment_identifier: str, position: int) -> None:
        super().__init__(f"No {segment_identifier}{position + 1:02d} field found")
        self.segment_identifier = segment_identifier
        self.position = position
