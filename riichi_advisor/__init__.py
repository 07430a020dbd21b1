"""
Riichi Mahjong Hand Advisor
Hand evaluation, discard ranking and call decisions for Japanese Mahjong
"""

from .tiles import Tile, TileSuit, HonorRank, Meld, MeldType, parse_tiles, parse_tile, tiles_to_string
from .errors import AdvisorError, TileParseError, HandError, DecompositionError
from .dora import DoraSystem
from .config import AdvisorConfig, FoldOrdering, DEFAULT_CONFIG, AGGRESSIVE_CONFIG, DEFENSIVE_CONFIG
from .state import TurnState
from .availability import AvailabilityTracker
from .decomposition import Decomposition, decompose
from .shanten import ShantenCalculator, ShantenResult, calculate_shanten, is_winning_hand
from .strategy import Strategy, StrategyState, next_strategy, select_strategy
from .yaku import YakuResult, YakuSummary, get_yaku
from .scoring import ScoreEstimate, calculate_fu, calculate_score, estimate_score
from .efficiency import useful_tiles
from .advisor import (
    CallRecommendation, Combination, DiscardAdvisor, HandValue, TilePriority,
    evaluate_call, evaluate_hand, rank_discard_candidates, recommend_discard,
)
from .review import DiscardComparison, DecisionQuality, compare_discard, safety_summary

__version__ = "0.1.0"
__all__ = [
    "Tile",
    "TileSuit",
    "HonorRank",
    "Meld",
    "MeldType",
    "parse_tiles",
    "parse_tile",
    "tiles_to_string",
    "AdvisorError",
    "TileParseError",
    "HandError",
    "DecompositionError",
    "DoraSystem",
    "AdvisorConfig",
    "FoldOrdering",
    "DEFAULT_CONFIG",
    "AGGRESSIVE_CONFIG",
    "DEFENSIVE_CONFIG",
    "TurnState",
    "AvailabilityTracker",
    "Decomposition",
    "decompose",
    "ShantenCalculator",
    "ShantenResult",
    "calculate_shanten",
    "is_winning_hand",
    "Strategy",
    "StrategyState",
    "next_strategy",
    "select_strategy",
    "YakuResult",
    "YakuSummary",
    "get_yaku",
    "ScoreEstimate",
    "calculate_fu",
    "calculate_score",
    "estimate_score",
    "useful_tiles",
    "CallRecommendation",
    "Combination",
    "DiscardAdvisor",
    "HandValue",
    "TilePriority",
    "evaluate_call",
    "evaluate_hand",
    "rank_discard_candidates",
    "recommend_discard",
    "DiscardComparison",
    "DecisionQuality",
    "compare_discard",
    "safety_summary",
]
