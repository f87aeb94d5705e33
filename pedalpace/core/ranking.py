"""
Day ranking and best-day selection.

Pure helpers over (DailySummary, Score) pairs produced by the scorer.
"""

from typing import List, Optional, Sequence, Tuple

from pedalpace.core.ride_score import score
from pedalpace.models.weather import DailySummary, Score
from pedalpace.utils.log_util import app_logger

logger = app_logger(__name__)

ScoredDay = Tuple[DailySummary, Score]


def score_days(summaries: Sequence[DailySummary]) -> List[ScoredDay]:
    """Score every day, keeping input order."""
    return [(day, score(day)) for day in summaries]


def pick_best(scored: Sequence[ScoredDay]) -> Optional[ScoredDay]:
    """
    Select the day with the highest total score.

    :param scored: (DailySummary, Score) pairs
    :return: The best pair (first one on ties), or None when empty
    """
    best = None
    for entry in scored:
        if best is None or entry[1].total_score > best[1].total_score:
            best = entry

    if best is None:
        logger.debug("No scored days to pick from")
    return best


def rank_days(scored: Sequence[ScoredDay]) -> List[ScoredDay]:
    """Order days by descending total score; ties keep input order."""
    return sorted(scored, key=lambda entry: entry[1].total_score, reverse=True)
