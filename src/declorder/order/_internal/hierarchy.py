"""Class hierarchy walking and ranking."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from declorder.order.models import JavaClass


def iter_ancestors(cls: JavaClass) -> Iterator[JavaClass]:
    """Yield every supertype of ``cls`` breadth-first, each once.

    The superclass of a class is visited before its interfaces.
    """
    seen: set[JavaClass] = {cls}
    queue: deque[JavaClass] = deque([cls])
    while queue:
        current = queue.popleft()
        for parent in (current.superclass, *current.interfaces):
            if parent is not None and parent not in seen:
                seen.add(parent)
                queue.append(parent)
                yield parent


def _depth(cls: JavaClass, memo: dict[JavaClass, int]) -> int:
    """Length of the longest supertype chain above ``cls``."""
    if cls in memo:
        return memo[cls]
    parents = [p for p in (cls.superclass, *cls.interfaces) if p is not None]
    depth = 1 + max(_depth(p, memo) for p in parents) if parents else 0
    memo[cls] = depth
    return depth


def rank_classes(classes: Iterable[JavaClass], *, super_first: bool = True) -> dict[JavaClass, int]:
    """Assign each distinct class a rank; ancestors rank below descendants.

    Classes are ordered by depth in the type hierarchy, so a strict ancestor
    always has a smaller depth than its descendant. Classes of equal depth
    keep the order in which they first appear in ``classes``. With
    ``super_first=False`` the ranking is reversed: descendants first.
    """
    distinct = list(dict.fromkeys(classes))
    memo: dict[JavaClass, int] = {}
    sign = 1 if super_first else -1
    ordered = sorted(range(len(distinct)), key=lambda i: (sign * _depth(distinct[i], memo), i))
    return {distinct[i]: rank for rank, i in enumerate(ordered)}
