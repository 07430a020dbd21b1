"""
Advisor Configuration

Tunable weights and thresholds for the discard and call advisor:
- Priority weights (efficiency, score, safety)
- Strategy thresholds (seven pairs, thirteen orphans)
- Wait quality weights used by the efficiency analyzer
- Ordering policy for fold-flagged tiles
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping


class FoldOrdering(Enum):
    """How fold-flagged tiles are placed in the ranked discard list"""
    SAFE_FIRST = "safe_first"   # Unflagged tiles always come before flagged ones
    VALUE_ONLY = "value_only"   # Ignore the flag, order by composite value alone


@dataclass(frozen=True)
class AdvisorConfig:
    """
    Configuration for the advisor.

    Composite priority of a tile:
        keep_efficiency * efficiency_weight
        + keep_score * score_weight
        - danger * safety_weight
    """

    name: str = "Default"

    # Priority weights
    efficiency_weight: float = 40.0
    score_weight: float = 0.00015
    safety_weight: float = 0.002

    # Strategy thresholds
    chiitoitsu_pairs: int = 5           # Pairs needed (with < 2 groups) to go for seven pairs
    thirteen_orphans_kinds: int = 10    # Distinct terminal/honor kinds to go for thirteen orphans

    # Calls are evaluated anyway late in the round
    call_tiles_left_threshold: int = 4

    # Wait quality weights (per useful tile kind)
    two_sided_quality: float = 1.0
    interior_quality: float = 0.6
    edge_quality: float = 0.5
    pair_quality: float = 0.6
    single_quality: float = 0.4

    # Efficiency values are divided by this before being added to shanten
    # progress; it keeps efficiency a tie-breaker between equal shanten
    efficiency_scale: float = 4.0

    # Expected riichi score is discounted once per shanten step
    shanten_score_discount: float = 0.5

    # Danger bands used by the safety summary
    safe_danger: float = 500.0
    high_danger: float = 2000.0

    fold_ordering: FoldOrdering = FoldOrdering.SAFE_FIRST

    def __post_init__(self):
        """Validate weights and thresholds"""
        for name in ("efficiency_weight", "score_weight", "safety_weight",
                     "two_sided_quality", "interior_quality", "edge_quality",
                     "pair_quality", "single_quality"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if not 0 <= self.chiitoitsu_pairs <= 7:
            raise ValueError(f"chiitoitsu_pairs must be 0-7, got {self.chiitoitsu_pairs}")
        if not 0 <= self.thirteen_orphans_kinds <= 13:
            raise ValueError(f"thirteen_orphans_kinds must be 0-13, got {self.thirteen_orphans_kinds}")
        if self.efficiency_scale <= 0:
            raise ValueError("efficiency_scale must be positive")
        if not 0 < self.shanten_score_discount <= 1:
            raise ValueError("shanten_score_discount must be in (0, 1]")

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "AdvisorConfig":
        """
        Build a config from a plain mapping (e.g. loaded from JSON).

        Raises:
            ValueError: unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        kwargs: Dict[str, Any] = dict(values)
        if isinstance(kwargs.get("fold_ordering"), str):
            kwargs["fold_ordering"] = FoldOrdering(kwargs["fold_ordering"])
        return cls(**kwargs)

    def __repr__(self) -> str:
        return f"AdvisorConfig({self.name})"


DEFAULT_CONFIG = AdvisorConfig()


# Pushes for value: score matters more, danger less
AGGRESSIVE_CONFIG = AdvisorConfig(
    name="Aggressive",
    efficiency_weight=40.0,
    score_weight=0.0003,
    safety_weight=0.001,
    chiitoitsu_pairs=5,
    thirteen_orphans_kinds=10,
    call_tiles_left_threshold=4,
)


# Weighs danger heavily and calls less
DEFENSIVE_CONFIG = AdvisorConfig(
    name="Defensive",
    efficiency_weight=40.0,
    score_weight=0.0001,
    safety_weight=0.006,
    chiitoitsu_pairs=5,
    thirteen_orphans_kinds=11,
    call_tiles_left_threshold=2,
)
