"""
Round resolution: pure calculation, no room state involved.

Two rules exist and exactly one is active per server:

    sum_closest          target = sum * 0.7, nobody leaves
    average_elimination  target = average * 0.8, the player farthest
                         from the target is eliminated

Winners are every player whose distance to the target equals the minimum
distance. Distances are compared with exact float equality. Under
elimination the farthest player (first one on ties) is dropped from the
winners even when every distance is the same.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class RoundRule(str, Enum):
    SUM_CLOSEST = "sum_closest"
    AVERAGE_ELIMINATION = "average_elimination"

    @property
    def eliminates(self) -> bool:
        return self is RoundRule.AVERAGE_ELIMINATION


SUM_FACTOR = 0.7
AVERAGE_FACTOR = 0.8


@dataclass(frozen=True)
class RoundResult:
    rule: RoundRule
    player_ids: tuple[str, ...]
    numbers: tuple[int, ...]
    sum: int
    average: float
    target: float
    min_diff: float
    winner_indices: tuple[int, ...]
    eliminated_index: int | None = None

    @property
    def winner_ids(self) -> list[str]:
        return [self.player_ids[i] for i in self.winner_indices]

    @property
    def eliminated_id(self) -> str | None:
        if self.eliminated_index is None:
            return None
        return self.player_ids[self.eliminated_index]

    def to_message(self) -> dict:
        # target stays unrounded; clients format it for display
        return {
            "rule": self.rule.value,
            "playerIds": list(self.player_ids),
            "numbers": list(self.numbers),
            "sum": self.sum,
            "average": self.average,
            "target": self.target,
            "minDiff": self.min_diff,
            "winnerIndices": list(self.winner_indices),
            "winnerPlayerIds": self.winner_ids,
            "eliminatedIndex": self.eliminated_index,
            "eliminatedPlayerId": self.eliminated_id,
        }


def compute_target(numbers: Sequence[int], rule: RoundRule) -> float:
    total = sum(numbers)
    if rule is RoundRule.SUM_CLOSEST:
        return total * SUM_FACTOR
    return (total / len(numbers)) * AVERAGE_FACTOR


def closest_indices(diffs: Sequence[float]) -> tuple[float, list[int]]:
    min_diff = diffs[0]
    indices = [0]
    for i in range(1, len(diffs)):
        if diffs[i] < min_diff:
            min_diff = diffs[i]
            indices = [i]
        elif diffs[i] == min_diff:
            indices.append(i)
    return min_diff, indices


def farthest_index(diffs: Sequence[float]) -> int:
    worst = 0
    for i in range(1, len(diffs)):
        if diffs[i] > diffs[worst]:
            worst = i
    return worst


def resolve_round(
    submissions: Sequence[tuple[str, int | None]], rule: RoundRule
) -> RoundResult:
    """
    Resolve one round.

    ``submissions`` is the roster in order as (player_id, number) pairs.
    Raises ``ValueError`` when it is empty or someone has not submitted.
    """
    if not submissions:
        raise ValueError("No submissions to resolve")
    if any(number is None for _, number in submissions):
        raise ValueError("Not all players submitted")

    player_ids = tuple(pid for pid, _ in submissions)
    numbers = tuple(number for _, number in submissions)

    total = sum(numbers)
    target = compute_target(numbers, rule)
    diffs = [abs(n - target) for n in numbers]

    min_diff, winners = closest_indices(diffs)

    eliminated = None
    if rule.eliminates:
        eliminated = farthest_index(diffs)
        winners = [i for i in winners if i != eliminated]

    return RoundResult(
        rule=rule,
        player_ids=player_ids,
        numbers=numbers,
        sum=total,
        average=total / len(numbers),
        target=target,
        min_diff=min_diff,
        winner_indices=tuple(winners),
        eliminated_index=eliminated,
    )
