"""Axis-aligned rectangles in top-down label coordinates."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height

    @property
    def is_empty(self):
        return self.width <= 0 and self.height <= 0

    def union(self, other):
        if self.is_empty:
            return other
        if other.is_empty:
            return self
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Rect(x, y, max(self.right, other.right) - x, max(self.bottom, other.bottom) - y)

    def contains(self, pos):
        px, py = pos
        return self.x <= px <= self.right and self.y <= py <= self.bottom


EMPTY_RECT = Rect()


def union_all(rects):
    result = EMPTY_RECT
    for rect in rects:
        result = result.union(rect)
    return result
