"""Sibling order-key allocation.

Keys are plain integers. Inserting between two neighbours takes the floor of
their midpoint; when the neighbours are adjacent there is no free integer, so
the tail of the group is shifted up to open a slot. Groups are never
renumbered automatically, so keys drift outward under heavy reordering;
``renumber`` is the explicit way to compact a group.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple


@dataclass(frozen=True)
class OrderAllocation:
    """Outcome of placing one node into a sibling group.

    ``shifts`` lists ``(index, new_order)`` pairs for existing siblings, in the
    order they must be written (last sibling first).
    """

    new_order: int
    shifts: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def rebalanced(self) -> bool:
        return bool(self.shifts)


def allocate(orders: Sequence[int], insert_index: int) -> OrderAllocation:
    """Compute the order key for a node inserted at ``insert_index``.

    ``orders`` are the keys of the target group in display order, without the
    node being placed.
    """
    if not orders:
        return OrderAllocation(new_order=1)
    if insert_index <= 0:
        return OrderAllocation(new_order=orders[0] - 1)
    if insert_index >= len(orders):
        return OrderAllocation(new_order=orders[-1] + 1)

    prev = orders[insert_index - 1]
    nxt = orders[insert_index]
    candidate = (prev + nxt) // 2
    if candidate != prev:
        return OrderAllocation(new_order=candidate)

    # No integer gap: open one at prev + 1. For strictly increasing keys
    # (nxt == prev + 1) this is a +1 shift and the new node takes nxt's key.
    new_order = prev + 1
    delta = new_order + 1 - nxt
    shifts = [
        (index, orders[index] + delta)
        for index in range(len(orders) - 1, insert_index - 1, -1)
    ]
    return OrderAllocation(new_order=new_order, shifts=shifts)


def renumber(count: int, start: int = 1) -> List[int]:
    """Consecutive keys for a group of ``count`` siblings."""
    return list(range(start, start + count))


__all__ = ["OrderAllocation", "allocate", "renumber"]
