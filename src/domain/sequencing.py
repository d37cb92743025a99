"""
Ticket Sequencer
================

Ticket numbers are scoped to a ``(location, category)`` pair: the next
number is the current maximum plus one, or 1 for an empty queue.

Reading the maximum and inserting the next ticket are two separate store
operations.  ``QueueService.obtain`` closes that gap optimistically: the
insert runs in a savepoint against a unique index on
``(location_id, category_id, number)`` and is retried with a fresh
maximum when a concurrent request took the number first.
"""

from __future__ import annotations

from typing import Optional


def next_ticket_number(current_max: Optional[int]) -> int:
    if current_max is None or current_max < 1:
        return 1
    return current_max + 1
