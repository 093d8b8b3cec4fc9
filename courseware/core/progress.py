"""
Progress ledger reduction.

A student's journal is an append-ordered list of judged attempts. For
every problem the effective attempt is the last one appended, whatever
its score: a resubmission replaces the previous result.

Dependencies: None
System role: Progress derivation from the journal
"""

from dataclasses import dataclass
from typing import Iterable, Sequence
from uuid import UUID


@dataclass(frozen=True)
class JournalEntry:
    """One judged attempt as recorded in the journal."""

    pid: int
    rid: UUID
    score: float
    status: int


def effective_progress(
    journal: Iterable[JournalEntry],
    pids: Sequence[int],
) -> dict[int, JournalEntry]:
    """
    Reduce a journal to the effective entry per course problem.

    Args:
        journal: Entries in append order
        pids: The course's current problem list

    Returns:
        dict[int, JournalEntry]: Effective entry per pid, in course order.
            Problems without attempts, and attempts on problems no longer
            in the course, are absent.
    """
    wanted = set(pids)
    last: dict[int, JournalEntry] = {}
    for entry in journal:
        if entry.pid in wanted:
            last[entry.pid] = entry
    return {pid: last[pid] for pid in dict.fromkeys(pids) if pid in last}
