"""
Discard Review

Compares a discard a player actually made against the ranked list the
advisor produced for the same turn.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from .advisor import TilePriority, recommend_discard
from .config import AdvisorConfig, DEFAULT_CONFIG
from .tiles import Tile


class DecisionQuality(Enum):
    OPTIMAL = "optimal"
    GOOD = "good"              # Rank 2
    ACCEPTABLE = "acceptable"  # Rank 3-5
    SUBOPTIMAL = "suboptimal"
    UNKNOWN = "unknown"        # Tile not in the ranking


@dataclass(frozen=True)
class DiscardComparison:
    """
    How a player's discard compares with the recommendation.

    Attributes:
        player_tile: The discarded tile
        recommended: The recommended discard (first unflagged entry)
        is_same: Player discarded the recommended tile
        player_rank: 1-based rank of the player's tile, -1 if absent
        value_difference: Player tile value minus recommended value
        quality: DecisionQuality bucket
        details: Short comparison phrases
    """
    player_tile: Tile
    recommended: Optional[Tile] = None
    is_same: bool = False
    player_rank: int = -1
    value_difference: float = 0.0
    quality: DecisionQuality = DecisionQuality.UNKNOWN
    details: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SafetySummary:
    safe: int = 0
    dangerous: int = 0
    mean_danger: float = 0.0


def _find(player_tile: Tile, priorities: Sequence[TilePriority]) -> int:
    """Index of the player's tile, preferring an exact dora match"""
    for strict in (True, False):
        for i, priority in enumerate(priorities):
            if priority.tile.same(player_tile, strict=strict):
                return i
    return -1


def _details(player: TilePriority, best: TilePriority) -> Tuple[str, ...]:
    phrases = []
    if player.hand_value.shanten > best.hand_value.shanten:
        phrases.append("Loses shanten")
    if player.efficiency < best.efficiency:
        phrases.append("Lower efficiency")
    elif player.efficiency > best.efficiency:
        phrases.append("Higher efficiency")
    if player.danger < best.danger:
        phrases.append("Safer")
    elif player.danger > best.danger:
        phrases.append("More dangerous")
    return tuple(phrases)


def compare_discard(player_tile: Tile, priorities: Sequence[TilePriority]) -> DiscardComparison:
    """
    Rank a player's discard against the advisor's ranking.

    Args:
        player_tile: Tile the player discarded
        priorities: Ranked list from rank_discard_candidates

    Returns:
        DiscardComparison (quality UNKNOWN when the tile is not ranked)
    """
    if not priorities:
        return DiscardComparison(player_tile)

    best = recommend_discard(priorities)
    index = _find(player_tile, priorities)
    if index == -1:
        return DiscardComparison(player_tile, recommended=best.tile)

    rank = index + 1
    player = priorities[index]
    is_same = player is best
    if is_same:
        quality = DecisionQuality.OPTIMAL
    elif rank <= 2:
        quality = DecisionQuality.GOOD
    elif rank <= 5:
        quality = DecisionQuality.ACCEPTABLE
    else:
        quality = DecisionQuality.SUBOPTIMAL

    return DiscardComparison(
        player_tile=player_tile,
        recommended=best.tile,
        is_same=is_same,
        player_rank=rank,
        value_difference=player.value - best.value,
        quality=quality,
        details=_details(player, best),
    )


def safety_summary(priorities: Sequence[TilePriority], config: AdvisorConfig = DEFAULT_CONFIG) -> SafetySummary:
    """Count safe and dangerous candidates and the mean danger"""
    if not priorities:
        return SafetySummary()
    return SafetySummary(
        safe=sum(1 for p in priorities if p.danger < config.safe_danger),
        dangerous=sum(1 for p in priorities if p.danger > config.high_danger),
        mean_danger=sum(p.danger for p in priorities) / len(priorities),
    )
