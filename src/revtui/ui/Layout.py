# revtui/ui/Layout.py
"""Screen rectangles and the constraint-based splitter used by composites."""

from __future__ import annotations

from typing import NamedTuple


class Rect(NamedTuple):
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def inner(self, margin: int = 1) -> Rect:
        return Rect(
            self.x + margin,
            self.y + margin,
            max(0, self.width - 2 * margin),
            max(0, self.height - 2 * margin),
        )

    def centered(self, width: int, height: int) -> Rect:
        """A rectangle of at most ``width`` x ``height`` centred inside this one."""
        w, h = min(width, self.width), min(height, self.height)
        return Rect(self.x + (self.width - w) // 2, self.y + (self.height - h) // 2, w, h)


class Constraint(NamedTuple):
    kind: str
    value: int

    @classmethod
    def length(cls, n: int) -> Constraint:
        return cls("length", n)

    @classmethod
    def percentage(cls, p: int) -> Constraint:
        return cls("percentage", p)

    @classmethod
    def min(cls, n: int) -> Constraint:
        return cls("min", n)


def split(rect: Rect, constraints: list[Constraint], direction: str = "vertical") -> list[Rect]:
    """Partitions ``rect`` into consecutive chunks, one per constraint.

    Lengths and percentages are taken as requested; leftover space goes to
    the last ``min`` constraint, or to the last chunk when there is none.
    Chunks are shrunk from the end when the requests exceed the area.
    """
    if not constraints:
        return []
    total = rect.height if direction == "vertical" else rect.width

    sizes = []
    for c in constraints:
        if c.kind == "percentage":
            sizes.append(total * c.value // 100)
        else:
            sizes.append(c.value)

    leftover = total - sum(sizes)
    if leftover > 0:
        grow = [i for i, c in enumerate(constraints) if c.kind == "min"]
        sizes[grow[-1] if grow else -1] += leftover
    i = len(sizes) - 1
    while leftover < 0 and i >= 0:
        take = min(sizes[i], -leftover)
        sizes[i] -= take
        leftover += take
        i -= 1

    chunks, offset = [], 0
    for size in sizes:
        if direction == "vertical":
            chunks.append(Rect(rect.x, rect.y + offset, rect.width, size))
        else:
            chunks.append(Rect(rect.x + offset, rect.y, size, rect.height))
        offset += size
    return chunks
