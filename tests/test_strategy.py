"""
Tests for strategy selection
"""

import logging
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from riichi_advisor.config import AdvisorConfig
from riichi_advisor.strategy import (
    INITIAL_STRATEGY, Strategy, StrategyState, fold, next_strategy, select_strategy,
)
from riichi_advisor.tiles import Meld, parse_tiles


SIX_PAIRS = "112233m4455p66s7z9s"
FIVE_PAIRS = "1155m99p3p7p11s22z4s9s"
ORPHANS = "159m159p19s12345z"
GENERAL = "123m456p789s11z45s"


class TestSelection:
    """Test strategy choice from a fresh state"""

    def test_general(self):
        assert select_strategy(parse_tiles(GENERAL), is_closed=True) == Strategy.GENERAL

    def test_six_pairs(self):
        state = next_strategy(INITIAL_STRATEGY, parse_tiles(SIX_PAIRS))
        assert state.strategy == Strategy.CHIITOITSU
        assert not state.calls_allowed

    def test_five_pairs_without_groups(self):
        assert select_strategy(parse_tiles(FIVE_PAIRS), is_closed=True) == Strategy.CHIITOITSU

    def test_pair_threshold(self):
        config = AdvisorConfig(chiitoitsu_pairs=6)
        hand = parse_tiles(FIVE_PAIRS)
        assert next_strategy(INITIAL_STRATEGY, hand, config=config).strategy == Strategy.GENERAL

    def test_open_hand_never_seven_pairs(self):
        assert select_strategy(parse_tiles(SIX_PAIRS), is_closed=False) == Strategy.GENERAL

    def test_closed_from_melds(self):
        pon = Meld.from_tiles(parse_tiles("777z"))
        hand = parse_tiles("112233m4455p66s")
        assert select_strategy(hand, melds=[pon]) == Strategy.GENERAL

    def test_thirteen_orphans(self):
        state = next_strategy(INITIAL_STRATEGY, parse_tiles(ORPHANS))
        assert state.strategy == Strategy.THIRTEEN_ORPHANS
        assert not state.calls_allowed

    def test_orphans_threshold(self):
        config = AdvisorConfig(thirteen_orphans_kinds=12)
        assert select_strategy(parse_tiles(ORPHANS), config=config) == Strategy.GENERAL

    def test_closed_only(self):
        assert Strategy.CHIITOITSU.closed_only
        assert Strategy.THIRTEEN_ORPHANS.closed_only
        assert not Strategy.GENERAL.closed_only
        assert not Strategy.FOLD.closed_only


class TestTransitions:
    """Test turn to turn strategy changes"""

    def test_fold_is_sticky(self):
        folded = fold(INITIAL_STRATEGY)
        assert folded.strategy == Strategy.FOLD
        assert not folded.calls_allowed
        assert next_strategy(folded, parse_tiles(SIX_PAIRS)) == folded
        assert next_strategy(folded, parse_tiles(GENERAL)) == folded

    def test_calls_reenabled_leaving_closed_shape(self):
        previous = StrategyState(Strategy.CHIITOITSU, calls_allowed=False)
        state = next_strategy(previous, parse_tiles(GENERAL))
        assert state.strategy == Strategy.GENERAL
        assert state.calls_allowed

    def test_general_keeps_call_flag(self):
        previous = StrategyState(Strategy.GENERAL, calls_allowed=False)
        assert not next_strategy(previous, parse_tiles(GENERAL)).calls_allowed

    def test_logs_change(self, caplog):
        caplog.set_level(logging.INFO, logger="riichi_advisor.strategy")
        next_strategy(INITIAL_STRATEGY, parse_tiles(SIX_PAIRS))
        assert "General -> Chiitoitsu" in caplog.text

    def test_no_log_without_change(self, caplog):
        caplog.set_level(logging.INFO, logger="riichi_advisor.strategy")
        next_strategy(INITIAL_STRATEGY, parse_tiles(GENERAL))
        assert caplog.text == ""
