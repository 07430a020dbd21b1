"""
Tests for useful tile detection and efficiency
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from riichi_advisor.availability import AvailabilityTracker
from riichi_advisor.config import AdvisorConfig
from riichi_advisor.decomposition import WaitQuality
from riichi_advisor.efficiency import efficiency, efficiency_after_discard, quality_weight, useful_tiles
from riichi_advisor.state import TurnState
from riichi_advisor.strategy import Strategy
from riichi_advisor.tiles import parse_tile, parse_tiles


SNAPSHOT = "1m|1239p22456m44468s|||||||||0,0,0,0|2|1|50"


class TestUsefulTiles:
    """Test useful tile kinds per strategy"""

    def test_tenpai_remainder(self):
        useful = useful_tiles(parse_tiles("123p22456m44468s"))
        assert [(u.tile.notation, u.quality) for u in useful] == [
            ("2m", WaitQuality.PAIR),
            ("7s", WaitQuality.INTERIOR),
        ]

    def test_isolated_neighbours(self):
        useful = useful_tiles(parse_tiles("59m"))
        assert [u.index for u in useful] == list(range(11, 18))
        assert all(u.quality == WaitQuality.SINGLE for u in useful)

    def test_keeps_best_quality(self):
        useful = {u.index: u.quality for u in useful_tiles(parse_tiles("458m"))}
        # 6m completes 45m and neighbours the isolated 8m
        assert useful[parse_tile("6m").tile_index] == WaitQuality.TWO_SIDED
        assert useful[parse_tile("9m").tile_index] == WaitQuality.SINGLE

    def test_sorted_by_index(self):
        indices = [u.index for u in useful_tiles(parse_tiles("1239p22456m44468s"))]
        assert indices == sorted(indices)
        assert len(indices) == len(set(indices))

    def test_chiitoitsu(self):
        useful = useful_tiles(parse_tiles("112233m445566p7s"), Strategy.CHIITOITSU)
        assert [u.index for u in useful] == [parse_tile("7s").tile_index]

    def test_kokushi_missing_kind(self):
        useful = useful_tiles(parse_tiles("119m19p19s123456z"), Strategy.THIRTEEN_ORPHANS)
        assert [u.index for u in useful] == [33]

    def test_kokushi_without_duplicate(self):
        useful = useful_tiles(parse_tiles("19m19p19s1234567z"), Strategy.THIRTEEN_ORPHANS)
        assert len(useful) == 13


class TestEfficiency:
    """Test availability weighted efficiency"""

    def setup_method(self):
        self.availability = AvailabilityTracker.from_state(TurnState.from_snapshot(SNAPSHOT))

    def test_weighted_average(self):
        # 7s: 4 unseen x 0.6, 2m: 2 unseen x 0.6, over two kinds
        value = efficiency(parse_tiles("123p22456m44468s"), Strategy.GENERAL, self.availability)
        assert value == pytest.approx(1.8)

    def test_after_discard(self):
        hand = parse_tiles("1239p22456m44468s")
        value = efficiency_after_discard(hand, parse_tile("9p"), Strategy.GENERAL, self.availability)
        assert value == pytest.approx(1.8)

    def test_nothing_useful(self):
        assert efficiency([], Strategy.GENERAL, self.availability) == 0.0
        assert efficiency(parse_tiles("1122m"), Strategy.CHIITOITSU, self.availability) == 0.0

    def test_unseen_tiles_only(self):
        seen = AvailabilityTracker.from_visible(parse_tiles("5m") * 4)
        # Every copy of the only useful kind is visible
        assert efficiency(parse_tiles("1122m5m"), Strategy.CHIITOITSU, seen) == 0.0

    def test_custom_weights(self):
        config = AdvisorConfig(interior_quality=1.0, pair_quality=1.0)
        value = efficiency(parse_tiles("123p22456m44468s"), Strategy.GENERAL, self.availability, config=config)
        assert value == pytest.approx(3.0)
        assert quality_weight(WaitQuality.EDGE, config) == config.edge_quality

    def test_never_negative(self):
        hand = parse_tiles("1239p22456m44468s")
        for tile in hand:
            assert efficiency_after_discard(hand, tile, Strategy.GENERAL, self.availability) >= 0
