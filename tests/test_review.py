"""
Tests for reviewing a player's discard
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from riichi_advisor.advisor import rank_discard_candidates
from riichi_advisor.config import AdvisorConfig, FoldOrdering
from riichi_advisor.review import DecisionQuality, compare_discard, safety_summary
from riichi_advisor.state import TurnState
from riichi_advisor.tiles import parse_tile


SNAPSHOT = "1m|1239p22456m44468s|||||||||0,0,0,0|2|1|50"


@pytest.fixture
def ranked():
    return rank_discard_candidates(TurnState.from_snapshot(SNAPSHOT))


class TestCompareDiscard:
    """Test decision quality buckets"""

    def test_optimal(self, ranked):
        result = compare_discard(parse_tile("9p"), ranked)
        assert result.is_same
        assert result.player_rank == 1
        assert result.quality == DecisionQuality.OPTIMAL
        assert result.value_difference == 0.0
        assert result.details == ()

    @pytest.mark.parametrize("rank,quality", [
        (2, DecisionQuality.GOOD),
        (3, DecisionQuality.ACCEPTABLE),
        (5, DecisionQuality.ACCEPTABLE),
        (6, DecisionQuality.SUBOPTIMAL),
        (11, DecisionQuality.SUBOPTIMAL),
    ])
    def test_buckets(self, ranked, rank, quality):
        result = compare_discard(ranked[rank - 1].tile, ranked)
        assert result.player_rank == rank
        assert result.quality == quality
        assert not result.is_same
        assert result.recommended == parse_tile("9p")

    def test_value_difference(self, ranked):
        result = compare_discard(ranked[3].tile, ranked)
        assert result.value_difference == pytest.approx(ranked[3].value - ranked[0].value)
        assert result.value_difference > 0
        assert "Loses shanten" in result.details

    def test_unranked_tile(self, ranked):
        result = compare_discard(parse_tile("7z"), ranked)
        assert result.quality == DecisionQuality.UNKNOWN
        assert result.player_rank == -1
        assert result.recommended == parse_tile("9p")

    def test_recommendation_skips_flagged(self):
        config = AdvisorConfig(fold_ordering=FoldOrdering.VALUE_ONLY)
        ranked = rank_discard_candidates(
            TurnState.from_snapshot(SNAPSHOT), fold_predicate=lambda t: t == parse_tile("9p"), config=config
        )
        result = compare_discard(ranked[1].tile, ranked)
        assert result.recommended == ranked[1].tile
        assert result.is_same
        assert result.quality == DecisionQuality.OPTIMAL
        assert result.value_difference == 0.0
        flagged = compare_discard(parse_tile("9p"), ranked)
        assert not flagged.is_same
        assert flagged.player_rank == 1

    def test_empty_ranking(self):
        result = compare_discard(parse_tile("9p"), [])
        assert result.quality == DecisionQuality.UNKNOWN
        assert result.recommended is None

    def test_dora_variant_matches_kind(self, ranked):
        # The ranking only holds dora 2m; a plain 2m still finds it
        result = compare_discard(parse_tile("2m"), ranked)
        assert result.player_rank > 0


class TestSafetySummary:
    """Test danger bands"""

    def test_bands(self):
        danger = {"9p": 3000.0, "8s": 1000.0}
        ranked = rank_discard_candidates(
            TurnState.from_snapshot(SNAPSHOT), danger_lookup=lambda t: danger.get(t.notation, 0.0)
        )
        summary = safety_summary(ranked)
        assert summary.safe == 9
        assert summary.dangerous == 1
        assert summary.mean_danger == pytest.approx(4000.0 / 11)

    def test_custom_bands(self, ranked):
        config = AdvisorConfig(safe_danger=0.0)
        assert safety_summary(ranked, config).safe == 0

    def test_empty(self):
        summary = safety_summary([])
        assert summary.safe == 0
        assert summary.mean_danger == 0.0
