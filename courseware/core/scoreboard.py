"""
Scoreboard aggregation.

Pure reduction of enrolled students' journals into per-problem and total
scores over the course's current problem list.

Dependencies: courseware.core.progress
System role: Scoreboard aggregator
"""

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from courseware.core.progress import JournalEntry, effective_progress


@dataclass
class ScoreboardRow:
    """Scores of one enrolled student."""

    uid: int
    scores: dict[int, float] = field(default_factory=dict)
    total_score: float = 0


def build_scoreboard(
    journals: Iterable[tuple[int, Sequence[JournalEntry]]],
    pids: Sequence[int],
) -> list[ScoreboardRow]:
    """
    Build scoreboard rows ordered by total score.

    Args:
        journals: (uid, journal) pairs in enrollment listing order
        pids: Current course problem list; duplicates count once

    Returns:
        list[ScoreboardRow]: Rows sorted by total descending. The sort is
            stable, so equal totals keep the enrollment listing order.
    """
    problems = list(dict.fromkeys(pids))
    rows = []
    for uid, journal in journals:
        progress = effective_progress(journal, problems)
        row = ScoreboardRow(uid=uid)
        for pid in problems:
            entry = progress.get(pid)
            row.scores[pid] = entry.score if entry else 0
            row.total_score += row.scores[pid]
        rows.append(row)
    return sorted(rows, key=lambda r: r.total_score, reverse=True)
