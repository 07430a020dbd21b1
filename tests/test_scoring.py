"""
Tests for fu and point calculation
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from riichi_advisor.decomposition import WaitQuality, decompose
from riichi_advisor.scoring import (
    calculate_fu, calculate_score, calculate_yakuman_score, estimate_score,
)
from riichi_advisor.tiles import Meld, parse_tiles
from riichi_advisor.yaku import get_yaku


class TestScore:
    """Test han/fu to points conversion"""

    def test_one_han(self):
        assert calculate_score(1, 30) == 960
        assert calculate_score(1, 30, is_dealer=True) == 1440

    def test_dealer_multiplier(self):
        for han in range(1, 14):
            assert calculate_score(han, 30, is_dealer=True) * 2 == calculate_score(han, 30) * 3

    def test_mangan_cap(self):
        assert calculate_score(4, 40) == 8000
        assert calculate_score(5, 30) == 8000
        assert calculate_score(3, 70) == 8000

    def test_limits(self):
        assert calculate_score(6, 30) == 12000
        assert calculate_score(8, 30) == 16000
        assert calculate_score(11, 30) == 24000

    def test_kazoe_yakuman_ignores_fu(self):
        assert calculate_score(13, 30) == 32000
        assert calculate_score(13, 110) == 32000
        assert calculate_score(13, 20, is_dealer=True) == 48000

    def test_yakuman(self):
        assert calculate_yakuman_score(1) == 32000
        assert calculate_yakuman_score(1, is_dealer=True) == 48000
        assert calculate_score(0, 30, yakuman=2) == 64000

    def test_tsumo(self):
        assert calculate_score(1, 30, is_tsumo=True) == 960
        assert calculate_score(1, 30, is_dealer=True, is_tsumo=True) == 1440


class TestFu:
    """Test fu calculation"""

    def test_closed_ron(self):
        # 20 base + 10 closed ron, rounded, minimum 30
        d = decompose(parse_tiles("123m456p789s234s55p"))
        assert calculate_fu(d, WaitQuality.TWO_SIDED) == 30

    def test_concealed_terminal_triplet(self):
        # 20 + 10 + 8 + 2 (interior) = 40
        d = decompose(parse_tiles("111m456p789s234s55p"))
        assert calculate_fu(d, WaitQuality.INTERIOR) == 40

    def test_open_triplets(self):
        melds = [Meld.from_tiles(parse_tiles("777z")), Meld.from_tiles(parse_tiles("2222p"))]
        d = decompose(parse_tiles("123m456s55p"), melds)
        # 20 + 4 (open honor pon) + 8 (open simple kan) = 32 -> 40
        assert calculate_fu(d, WaitQuality.TWO_SIDED, is_closed=False) == 40

    def test_value_pair(self):
        d = decompose(parse_tiles("123m456p789s234s11z"))
        # Double east pair: 20 + 10 + 2 + 2 = 34 -> 40
        assert calculate_fu(d, WaitQuality.TWO_SIDED, seat_wind=1, round_wind=1) == 40
        assert calculate_fu(d, WaitQuality.TWO_SIDED, seat_wind=2, round_wind=3) == 30

    def test_tsumo(self):
        d = decompose(parse_tiles("123m456p789s234s55p"))
        assert calculate_fu(d, WaitQuality.TWO_SIDED, is_tsumo=True) == 30

    def test_chiitoitsu(self):
        d = decompose(parse_tiles("1122m3344p5566s77z"))
        assert calculate_fu(d, WaitQuality.SINGLE, is_chiitoitsu=True) == 25


class TestEstimate:
    """Test open/closed/riichi estimates"""

    def test_riichi_adds_one_han(self):
        hand = parse_tiles("123456789m234p11z")
        summary = get_yaku(hand, decompose(hand), seat_wind=2, round_wind=1)
        estimate = estimate_score(summary, dora=0, fu=30)
        assert estimate.open == calculate_score(1, 30)
        assert estimate.closed == calculate_score(2, 30)
        assert estimate.riichi == calculate_score(3, 30)

    def test_dora_adds_han(self):
        hand = parse_tiles("123456789m234p11z")
        summary = get_yaku(hand, decompose(hand))
        assert estimate_score(summary, dora=2).closed == calculate_score(4, 30)

    def test_yakuman_bypasses_fu(self):
        hand = parse_tiles("555666777z123m11p")
        summary = get_yaku(hand, decompose(hand))
        estimate = estimate_score(summary, fu=110, is_dealer=True)
        assert estimate.open == 48000
        assert estimate.closed == 48000
        assert estimate.riichi == 48000

    def test_for_hand(self):
        hand = parse_tiles("123456789m234p11z")
        estimate = estimate_score(get_yaku(hand, decompose(hand)))
        assert estimate.for_hand(True) == estimate.closed
        assert estimate.for_hand(False) == estimate.open

    def test_no_yaku_scores_zero(self):
        # Complete, but only dora; riichi would be the sole yaku
        hand = parse_tiles("123p22456m444678s")
        summary = get_yaku(hand, decompose(hand), seat_wind=2, round_wind=1)
        estimate = estimate_score(summary, dora=2)
        assert estimate.open == 0
        assert estimate.closed == 0
        assert estimate.riichi == calculate_score(3, 30)

    def test_closed_only_yaku_open(self):
        hand = parse_tiles("112233m456p789s11z")
        summary = get_yaku(hand, decompose(hand), seat_wind=2, round_wind=1)
        estimate = estimate_score(summary)
        assert estimate.open == 0
        assert estimate.closed == calculate_score(1, 30)
