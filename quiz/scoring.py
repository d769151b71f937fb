"""Points, streaks, stars, coins and titles."""

import math
from typing import Iterable, List, Optional, Sequence, Tuple

from quiz.models import AnswerOutcome, SessionSummary

DEFAULT_TITLE = 'Word Apprentice'

# (minimum cumulative stars, title), highest first
TITLES: Tuple[Tuple[int, str], ...] = (
    (301, 'Vocabulary Genius'),
    (201, 'Word Wizard'),
    (101, 'Language Master'),
    (51, 'Vocabulary Champion'),
    (11, 'Word Scholar'),
    (0, DEFAULT_TITLE),
)

# (response time upper bound in ms, bonus points)
SPEED_BONUSES: Tuple[Tuple[int, int], ...] = (
    (3000, 20),
    (8000, 10),
    (15000, 5),
)

STREAK_STEP = 3
STREAK_BONUS = 5


def speed_bonus(response_time_ms: int) -> int:
    for limit, bonus in SPEED_BONUSES:
        if response_time_ms < limit:
            return bonus
    return 0


def current_streak(prior_results: Sequence[bool], is_correct: bool) -> int:
    """
    Length of the consecutive-correct run ending at this answer.

    A wrong answer has a streak of 0.
    """
    if not is_correct:
        return 0
    streak = 0
    for result in reversed(prior_results):
        if not result:
            break
        streak += 1
    return streak + 1


def points_for(is_correct: bool, response_time_ms: int, tier: int, streak: int) -> int:
    """
    Points for one answer: 10 * tier, plus a speed bonus, plus 5 for
    every full 3 answers in the current streak. Wrong answers score 0.
    """
    if not is_correct:
        return 0
    points = 10 * tier
    points += speed_bonus(response_time_ms)
    points += STREAK_BONUS * (streak // STREAK_STEP)
    return points


def stars_for(accuracy: float) -> int:
    if accuracy >= 0.95:
        return 3
    elif accuracy >= 0.8:
        return 2
    elif accuracy >= 0.6:
        return 1
    return 0


def coins_for(base_coins: int, accuracy: float) -> int:
    return math.floor(base_coins * (0.5 + accuracy * 0.5))


def title_for(total_stars: int) -> str:
    for threshold, title in TITLES:
        if total_stars >= threshold:
            return title
    return DEFAULT_TITLE


def summarize(
    outcomes: Iterable[AnswerOutcome],
    level_base_coins: int,
    prior_total_stars: int = 0,
    prior_title: Optional[str] = None,
) -> SessionSummary:
    """
    Aggregate a finished level.

    Accuracy is 0 when there were no answers. The title is recomputed from
    the new cumulative star total and compared with prior_title.
    """
    outcomes: List[AnswerOutcome] = list(outcomes)
    total = len(outcomes)
    correct = sum(1 for o in outcomes if o.correct)
    accuracy = correct / total if total else 0.0
    stars = stars_for(accuracy)
    total_stars = prior_total_stars + stars
    title = title_for(total_stars)

    return SessionSummary(
        score=sum(o.points_earned for o in outcomes),
        accuracy=accuracy,
        correct_count=correct,
        total_count=total,
        stars_earned=stars,
        coins_earned=coins_for(level_base_coins, accuracy),
        total_stars=total_stars,
        title=title,
        title_changed=title != (prior_title or DEFAULT_TITLE),
    )
