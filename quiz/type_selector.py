"""Tier-scaled weighted question type selection."""

import math
import random
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from quiz.question_types import QuestionType

MIN_TIER = 1
MAX_TIER = 5
MAX_REROLLS = 20


@dataclass(frozen=True)
class TierWeights:
    """
    Probability table over question types for one difficulty tier.

    Weights must sum to 1.0; checked on construction.
    """
    tier: int
    weights: Tuple[Tuple[QuestionType, float], ...]

    def __post_init__(self):
        total = sum(w for _, w in self.weights)
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Tier {self.tier} weights sum to {total}, expected 1.0")
        if any(w <= 0 for _, w in self.weights):
            raise ValueError(f"Tier {self.tier} has a non-positive weight")

    @property
    def types(self) -> Tuple[QuestionType, ...]:
        return tuple(t for t, _ in self.weights)

    def draw(self, rng) -> QuestionType:
        """Walk the cumulative table with one uniform draw in [0, 1)."""
        r = rng.random()
        cumulative = 0.0
        for qtype, weight in self.weights:
            cumulative += weight
            if r < cumulative:
                return qtype
        # Float rounding can leave r just above the final cumulative sum
        return self.weights[-1][0]


Q = QuestionType

# Tier 1 sticks to recognition; higher tiers shift toward spelling and
# relationship questions.
TIER_WEIGHTS: Dict[int, TierWeights] = {
    1: TierWeights(1, (
        (Q.TRUE_FALSE, 0.30),
        (Q.DEFINITION, 0.35),
        (Q.FILL_BLANK, 0.35),
    )),
    2: TierWeights(2, (
        (Q.TRUE_FALSE, 0.20),
        (Q.DEFINITION, 0.25),
        (Q.FILL_BLANK, 0.25),
        (Q.REVERSE_DEFINITION, 0.20),
        (Q.SPELLING, 0.10),
    )),
    3: TierWeights(3, (
        (Q.TRUE_FALSE, 0.12),
        (Q.DEFINITION, 0.18),
        (Q.FILL_BLANK, 0.18),
        (Q.REVERSE_DEFINITION, 0.18),
        (Q.SPELLING, 0.15),
        (Q.EXAMPLE_SENTENCE, 0.14),
        (Q.SYNONYM, 0.05),
    )),
    4: TierWeights(4, (
        (Q.TRUE_FALSE, 0.08),
        (Q.DEFINITION, 0.14),
        (Q.FILL_BLANK, 0.14),
        (Q.REVERSE_DEFINITION, 0.16),
        (Q.SPELLING, 0.16),
        (Q.EXAMPLE_SENTENCE, 0.14),
        (Q.SYNONYM, 0.10),
        (Q.ANTONYM, 0.08),
    )),
    5: TierWeights(5, (
        (Q.TRUE_FALSE, 0.05),
        (Q.DEFINITION, 0.10),
        (Q.FILL_BLANK, 0.12),
        (Q.REVERSE_DEFINITION, 0.15),
        (Q.SPELLING, 0.18),
        (Q.EXAMPLE_SENTENCE, 0.15),
        (Q.SYNONYM, 0.13),
        (Q.ANTONYM, 0.12),
    )),
}


def clamp_tier(tier: Optional[int]) -> int:
    if tier is None:
        return MIN_TIER
    return max(MIN_TIER, min(MAX_TIER, int(tier)))


def weights_for_tier(tier: Optional[int]) -> TierWeights:
    return TIER_WEIGHTS[clamp_tier(tier)]


def pick_type(
    last_type: Optional[QuestionType],
    tier: int,
    rng: Optional[random.Random] = None,
) -> QuestionType:
    """
    Pick a question type for the next word.

    Draws from the tier's table, re-rolling up to MAX_REROLLS times while the
    draw equals last_type. If every roll repeats, the first type in the table
    that differs from last_type is used, else DEFINITION.
    """
    rng = rng or random
    table = weights_for_tier(tier)
    last = QuestionType(last_type) if last_type is not None else None

    for _ in range(MAX_REROLLS):
        qtype = table.draw(rng)
        if qtype != last:
            return qtype

    for qtype in table.types:
        if qtype != last:
            return qtype
    return QuestionType.DEFINITION
