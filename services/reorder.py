"""
Ordering rules for planner entries.

Entries of one (day, slot, audience, drink) group are shown by ascending
``position`` with ``entry_id`` as tie-breaker, so gaps and duplicate positions
still give one deterministic order.

``swap_positions`` is the three-step swap used by clients that only have a
single-row "set position" call:

    1. A -> sentinel
    2. B -> A's old position
    3. A -> B's old position

The sentinel keeps positions distinct at every step in case storage enforces
uniqueness. Run against separate requests the steps are not atomic; a
failure after step 1 leaves A parked at the sentinel (shown first) until the
next successful reorder. ``PlannerService.swap_entries`` runs the same steps
inside one transaction instead.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from app.exceptions import ReorderError

logger = logging.getLogger("mealplanner.reorder")

SENTINEL_POSITION = -1

MOVE_UP = "up"
MOVE_DOWN = "down"


def entry_sort_key(entry: Any) -> Tuple[int, int]:
    return (entry.position, entry.entry_id)


def sort_entries(entries: Iterable[Any]) -> List[Any]:
    """Return entries in display order"""
    return sorted(entries, key=entry_sort_key)


def adjacent_pair(entries: Sequence[Any], entry_id: int, direction: str) -> Optional[Tuple[Any, Any]]:
    """Find the (earlier, later) pair to swap when moving ``entry_id``.

    ``entries`` must already be in display order. Returns None when the entry
    is not in the list or is already at the edge it moves towards.
    """
    if direction not in (MOVE_UP, MOVE_DOWN):
        raise ValueError(f"direction must be '{MOVE_UP}' or '{MOVE_DOWN}', got {direction!r}")

    ids = [e.entry_id for e in entries]
    if entry_id not in ids:
        return None
    idx = ids.index(entry_id)

    if direction == MOVE_UP:
        if idx == 0:
            return None
        return entries[idx - 1], entries[idx]
    if idx == len(entries) - 1:
        return None
    return entries[idx], entries[idx + 1]


def swap_positions(
    entry_a: Any,
    entry_b: Any,
    update_position: Callable[[int, int], Any],
    sentinel: int = SENTINEL_POSITION,
) -> Tuple[int, int]:
    """Swap the positions of two entries with the three-step protocol.

    ``update_position(entry_id, position)`` performs one single-row update.
    Positions are read before the first step. On failure the remaining steps
    are skipped, the applied ones are kept, and ``ReorderError`` is raised
    with the number of completed steps.

    Returns the new (a, b) positions.
    """
    pos_a = entry_a.position
    pos_b = entry_b.position

    steps = (
        (entry_a.entry_id, sentinel),
        (entry_b.entry_id, pos_a),
        (entry_a.entry_id, pos_b),
    )

    for completed, (entry_id, position) in enumerate(steps):
        try:
            update_position(entry_id, position)
        except Exception as exc:
            logger.warning(
                "reorder_step_failed entry_a=%s entry_b=%s step=%d error=%s",
                entry_a.entry_id,
                entry_b.entry_id,
                completed + 1,
                exc,
            )
            raise ReorderError(
                completed_steps=completed,
                details={"entry_a_id": entry_a.entry_id, "entry_b_id": entry_b.entry_id},
            ) from exc

    logger.debug(
        "reorder_swapped entry_a=%s pos=%d entry_b=%s pos=%d",
        entry_a.entry_id,
        pos_b,
        entry_b.entry_id,
        pos_a,
    )
    return pos_b, pos_a
