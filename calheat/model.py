# calheat/model.py
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import NamedTuple, Optional, Union

Timestamp = int
Value = Union[int, float, str, None]


class ScrollDirection(enum.Enum):
    BACKWARD = -1
    NONE = 0
    FORWARD = 1


class Position(NamedTuple):
    row: int
    col: int


@dataclass
class SubDomain:
    """One cell inside a domain bucket.

    `value` starts as None and is written in place when data is applied;
    the timestamp is the identity of the cell.
    """

    timestamp: Timestamp
    row: int
    col: int
    value: Optional[Value] = None

    def to_dict(self) -> dict:
        return {"t": self.timestamp, "x": self.col, "y": self.row, "v": self.value}


__all__ = [
    "Timestamp",
    "Value",
    "ScrollDirection",
    "Position",
    "SubDomain",
]
