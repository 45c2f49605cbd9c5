from __future__ import annotations


def move(current: int, steps: int, total: int) -> int:
    """New position after stepping forward; overshooting the last square means no move."""
    target = current + steps
    if target > total:
        target = current
    return max(1, target)


def clamp(position: int, total: int) -> int:
    return max(1, min(total, position))
