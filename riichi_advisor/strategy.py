"""
Strategy Selector

Chooses the hand shape to aim for on each turn. The choice is a small
state machine: FOLD is sticky, seven pairs and thirteen orphans are closed
only and disable calls, everything else plays the general 4 groups + pair
shape.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .config import AdvisorConfig, DEFAULT_CONFIG
from .decomposition import decompose, pairs_in_hand, terminal_honor_kinds
from .tiles import Meld, Tile


logger = logging.getLogger(__name__)


class Strategy(Enum):
    """Hand shape the advisor is playing towards"""
    GENERAL = "General"
    CHIITOITSU = "Chiitoitsu"
    THIRTEEN_ORPHANS = "Thirteen_Orphans"
    FOLD = "Fold"

    @property
    def closed_only(self) -> bool:
        return self in (Strategy.CHIITOITSU, Strategy.THIRTEEN_ORPHANS)


@dataclass(frozen=True)
class StrategyState:
    """Strategy for this turn and whether calling is still allowed"""
    strategy: Strategy = Strategy.GENERAL
    calls_allowed: bool = True


INITIAL_STRATEGY = StrategyState()


def next_strategy(
    previous: StrategyState,
    hand: Sequence[Tile],
    melds: Sequence[Meld] = (),
    is_closed: Optional[bool] = None,
    config: AdvisorConfig = DEFAULT_CONFIG,
) -> StrategyState:
    """
    Decide this turn's strategy from the previous one and the hand.

    Args:
        previous: Strategy state of the previous turn
        hand: Concealed tiles
        melds: Own exposed melds
        is_closed: Closed flag; derived from melds when None
        config: Thresholds for the closed-only shapes

    Returns:
        New StrategyState
    """
    if previous.strategy == Strategy.FOLD:
        return previous

    if is_closed is None:
        is_closed = not any(m.is_open for m in melds)

    pairs = len(pairs_in_hand(hand))
    if is_closed:
        groups = decompose(hand, melds).complete_groups
        if pairs >= 6 or (pairs >= config.chiitoitsu_pairs and groups < 2):
            return _switch(previous, StrategyState(Strategy.CHIITOITSU, calls_allowed=False))

    if len(terminal_honor_kinds(hand)) >= config.thirteen_orphans_kinds:
        return _switch(previous, StrategyState(Strategy.THIRTEEN_ORPHANS, calls_allowed=False))

    calls_allowed = True if previous.strategy.closed_only else previous.calls_allowed
    return _switch(previous, StrategyState(Strategy.GENERAL, calls_allowed))


def select_strategy(
    hand: Sequence[Tile],
    is_closed: Optional[bool] = None,
    melds: Sequence[Meld] = (),
    previous: StrategyState = INITIAL_STRATEGY,
    config: AdvisorConfig = DEFAULT_CONFIG,
) -> Strategy:
    """Strategy for a hand, starting from the general shape by default"""
    return next_strategy(previous, hand, melds, is_closed, config).strategy


def fold(previous: StrategyState) -> StrategyState:
    """Give up on winning for the rest of the round"""
    return _switch(previous, StrategyState(Strategy.FOLD, calls_allowed=False))


def _switch(previous: StrategyState, new: StrategyState) -> StrategyState:
    if new.strategy != previous.strategy:
        logger.info(f"Strategy: {previous.strategy.value} -> {new.strategy.value}")
    return new
