"""Placement of two monitor rectangles so that they touch without overlapping."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Tuple

_INT16_MIN = -0x8000
_INT16_MAX = 0x7FFF
_UINT16_MAX = 0xFFFF


def _i16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


def _u16(value: int) -> int:
    return value & 0xFFFF


def _div_trunc(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return quotient if value >= 0 else -quotient


class MonitorsPosition(IntEnum):
    """How two monitors are arranged relative to each other."""

    LEFT_RIGHT = 0
    UP_DOWN = 1
    DIAGONAL = 2
    UNKNOWN = 3


@dataclass(frozen=True)
class Rectangle:
    """A screen rectangle with 16-bit signed position and unsigned size."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def __post_init__(self) -> None:
        for name in ("x", "y"):
            value = getattr(self, name)
            if not _INT16_MIN <= value <= _INT16_MAX:
                raise ValueError(f"{name}={value} out of int16 range")
        for name in ("width", "height"):
            value = getattr(self, name)
            if not 0 <= value <= _UINT16_MAX:
                raise ValueError(f"{name}={value} out of uint16 range")

    def corners(self) -> Tuple[Tuple[int, int], ...]:
        """Top-left, top-right, bottom-left, bottom-right."""
        right = self.x + self.width
        bottom = self.y + self.height
        return ((self.x, self.y), (right, self.y), (self.x, bottom), (right, bottom))


# Corner index pairs (self corner, other corner) allowed for each arrangement.
_ALLOWED_PAIRS = {
    MonitorsPosition.LEFT_RIGHT: {(0, 1), (1, 0), (2, 3), (3, 2)},
    MonitorsPosition.UP_DOWN: {(0, 2), (2, 0), (1, 3), (3, 1)},
    MonitorsPosition.DIAGONAL: {(1, 2), (2, 1), (0, 3), (3, 0)},
}


def _mid(origin: int, length: int) -> int:
    return _div_trunc(_i16(origin + origin + _i16(length)), 2)


def intersects(r0: Rectangle, r1: Rectangle) -> bool:
    """Whether the two rectangles overlap (touching edges do not count)."""
    ax = abs(_i16(_mid(r0.x, r0.width) - _mid(r1.x, r1.width)))
    ay = abs(_i16(_mid(r0.y, r0.height) - _mid(r1.y, r1.height)))
    max_x = _u16(r0.width + r1.width) // 2
    max_y = _u16(r0.height + r1.height) // 2
    return ax < max_x and ay < max_y


def best_move_offset(r0: Rectangle, r1: Rectangle, position) -> Tuple[int, int]:
    """Smallest corner-to-corner offset moving ``r0`` next to ``r1``.

    ``r0`` moved by minus the offset touches ``r1`` without overlapping it.
    Raises ValueError when no such offset exists.
    """
    allowed = _ALLOWED_PAIRS.get(position)
    best = None
    best_distance = None
    for i, (x0, y0) in enumerate(r0.corners()):
        for j, (x1, y1) in enumerate(r1.corners()):
            if allowed is not None and (i, j) not in allowed:
                continue
            dx, dy = x0 - x1, y0 - y1
            distance = dx * dx + dy * dy
            if best_distance is not None and distance >= best_distance:
                continue
            moved = replace(r0, x=_i16(r0.x - _i16(dx)), y=_i16(r0.y - _i16(dy)))
            if intersects(moved, r1):
                continue
            best_distance = distance
            best = (dx, dy)
    if best is None:
        raise ValueError("no offset")
    return best


def best_move_position(
    r0: Rectangle, r1: Rectangle, position
) -> Tuple[Rectangle, Rectangle]:
    """Move ``r0`` next to ``r1`` and shift both so the union starts at 0,0."""
    offset_x, offset_y = best_move_offset(r0, r1, position)
    rt0 = replace(r0, x=_i16(r0.x - _i16(offset_x)), y=_i16(r0.y - _i16(offset_y)))
    min_x = min(rt0.x, r1.x)
    min_y = min(rt0.y, r1.y)
    rt0 = replace(rt0, x=_i16(rt0.x - min_x), y=_i16(rt0.y - min_y))
    rt1 = replace(r1, x=_i16(r1.x - min_x), y=_i16(r1.y - min_y))
    return rt0, rt1