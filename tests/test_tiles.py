"""
Tests for the tile model, notation and dora
"""

import pytest
import numpy as np
from dataclasses import FrozenInstanceError

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from riichi_advisor.tiles import (
    Tile, TileSuit, HonorRank, Meld, MeldType,
    parse_tiles, parse_tile, parse_combination, tiles_to_string,
    to_counts, remove_tiles, validate_hand,
)
from riichi_advisor.dora import DoraSystem, tile_from_flag
from riichi_advisor.errors import TileParseError, HandError, AdvisorError


class TestTiles:
    """Test tile system"""

    def test_tile_creation(self):
        t = Tile(TileSuit.DOTS, 9)
        assert t.notation == "9p"
        assert t.tile_index == 8
        assert Tile(TileSuit.HONOR, HonorRank.RED).tile_index == 33

    def test_invalid_rank(self):
        with pytest.raises(ValueError):
            Tile(TileSuit.BAMBOO, 10)
        with pytest.raises(ValueError):
            Tile(TileSuit.HONOR, 8)

    def test_index_roundtrip(self):
        for idx in range(34):
            assert Tile.from_index(idx).tile_index == idx

    def test_properties(self):
        east = Tile(TileSuit.HONOR, HonorRank.EAST)
        white = Tile(TileSuit.HONOR, HonorRank.WHITE)
        assert east.is_wind and not east.is_dragon
        assert white.is_dragon and not white.is_wind
        assert Tile(TileSuit.CHARACTERS, 1).is_terminal
        assert Tile(TileSuit.CHARACTERS, 5).is_simple
        assert not east.is_simple

    def test_equality_ignores_dora(self):
        plain = Tile(TileSuit.CHARACTERS, 5)
        red = Tile(TileSuit.CHARACTERS, 5, dora_count=1)
        assert plain == red
        assert hash(plain) == hash(red)
        assert plain.same(red)
        assert not plain.same(red, strict=True)

    def test_ordering(self):
        tiles = [Tile(TileSuit.BAMBOO, 1), Tile(TileSuit.DOTS, 3), Tile(TileSuit.DOTS, 1)]
        assert [t.notation for t in sorted(tiles)] == ["1p", "3p", "1s"]
        red = Tile(TileSuit.DOTS, 5, 1)
        assert red < Tile(TileSuit.DOTS, 5)


class TestNotation:
    """Test text notation"""

    def test_parse_compact(self):
        hand = parse_tiles("1239p22456m44468s")
        assert len(hand) == 14
        assert hand[0] == Tile(TileSuit.DOTS, 1)
        assert hand[4] == Tile(TileSuit.CHARACTERS, 2)

    def test_parse_with_spaces(self):
        assert parse_tiles("1m 2m 3m") == parse_tiles("123m")

    def test_red_five(self):
        tile = parse_tile("0s")
        assert tile.rank == 5
        assert tile.dora_count == 1

    def test_render(self):
        assert tiles_to_string(parse_tiles("9p1239p")) == "12399p"
        assert tiles_to_string(parse_tiles("0m")) == "0m"

    def test_parse_errors(self):
        for bad in ("1x", "abc", "12", "8z", "0z"):
            with pytest.raises(TileParseError):
                parse_tiles(bad)

    def test_parse_error_carries_text(self):
        with pytest.raises(TileParseError) as info:
            parse_tiles("1m?")
        assert info.value.text == "1m?"
        assert isinstance(info.value, ValueError)
        assert isinstance(info.value, AdvisorError)

    def test_single_tile(self):
        with pytest.raises(TileParseError):
            parse_tile("12m")

    def test_combination(self):
        assert parse_combination("3m|4m") == [Tile(TileSuit.CHARACTERS, 3), Tile(TileSuit.CHARACTERS, 4)]
        with pytest.raises(TileParseError):
            parse_combination("")
        with pytest.raises(TileParseError):
            parse_combination("3m|")


class TestMelds:
    """Test meld validation"""

    def test_valid_melds(self):
        chi = Meld.from_tiles(parse_tiles("345p"))
        assert chi.meld_type == MeldType.CHI
        assert chi.is_open and not chi.is_triplet
        pon = Meld.from_tiles(parse_tiles("777z"))
        assert pon.meld_type == MeldType.PON
        kan = Meld.from_tiles(parse_tiles("1111s"), concealed=True)
        assert kan.meld_type == MeldType.CONCEALED_KAN
        assert not kan.is_open

    def test_meld_is_immutable(self):
        pon = Meld.from_tiles(parse_tiles("777z"))
        assert isinstance(pon.tiles, tuple)
        with pytest.raises(FrozenInstanceError):
            pon.tiles = ()

    def test_invalid_melds(self):
        with pytest.raises(ValueError):
            Meld(MeldType.CHI, parse_tiles("135p"))
        with pytest.raises(ValueError):
            Meld(MeldType.CHI, parse_tiles("123z"))
        with pytest.raises(ValueError):
            Meld(MeldType.PON, parse_tiles("112m"))
        with pytest.raises(ValueError):
            Meld(MeldType.KAN, parse_tiles("111m"))


class TestHandHelpers:
    """Test hand helpers"""

    def test_counts(self):
        counts = to_counts(parse_tiles("1123m7z"))
        assert counts.dtype == np.int8
        assert counts[9] == 2
        assert counts[33] == 1
        assert counts.sum() == 5

    def test_remove_prefers_exact_dora(self):
        hand = parse_tiles("505m")
        remaining = remove_tiles(hand, [parse_tile("0m")])
        assert [t.dora_count for t in remaining] == [0, 0]

    def test_remove_ignores_missing(self):
        hand = parse_tiles("123m")
        assert remove_tiles(hand, [parse_tile("9s")]) == hand

    def test_validate_hand(self):
        validate_hand(parse_tiles("1239p22456m44468s"))
        with pytest.raises(HandError):
            validate_hand(parse_tiles("11111m"))
        with pytest.raises(HandError):
            validate_hand(parse_tiles("123456789m123456p"))

    def test_validate_counts_melds(self):
        meld = Meld.from_tiles(parse_tiles("111m"))
        with pytest.raises(HandError):
            validate_hand(parse_tiles("11m"), [meld])


class TestDora:
    """Test dora indicator system"""

    def test_dora_sequence(self):
        assert DoraSystem.get_dora_tile(parse_tile("9m")) == parse_tile("1m")
        assert DoraSystem.get_dora_tile(parse_tile("1m")) == parse_tile("2m")
        assert DoraSystem.get_dora_tile(parse_tile("4z")) == parse_tile("1z")
        assert DoraSystem.get_dora_tile(parse_tile("5z")) == parse_tile("6z")
        assert DoraSystem.get_dora_tile(parse_tile("7z")) == parse_tile("5z")

    def test_apply_stacks(self):
        dora = DoraSystem([parse_tile("4m"), parse_tile("4m")])
        stamped = dora.apply(parse_tiles("0m5m6m"))
        assert [t.dora_count for t in stamped] == [3, 2, 0]

    def test_count(self):
        dora = DoraSystem([parse_tile("1m")])
        assert dora.count_dora(parse_tiles("22m3m")) == 2
        assert dora.dora_value(parse_tile("2m")) == 1

    def test_flag(self):
        assert tile_from_flag(parse_tile("3p"), True).dora_count == 1
        assert tile_from_flag(parse_tile("0p"), True).dora_count == 1
        assert tile_from_flag(parse_tile("3p"), False).dora_count == 0

    def test_kan_adds_indicator(self):
        dora = DoraSystem([parse_tile("1m")])
        dora.add_dora_indicator(parse_tile("7z"))
        assert dora.count_dora(parse_tiles("2m5z")) == 2
