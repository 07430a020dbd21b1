"""
Turn State

Immutable snapshot of everything visible on the current turn. It is built
once per turn by whoever reads the table and passed explicitly into every
evaluation call.

Player 0 is always the evaluating player.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from .dora import DoraSystem
from .errors import TileParseError
from .tiles import Meld, MeldType, Tile, parse_tiles, validate_hand


logger = logging.getLogger(__name__)

NUM_PLAYERS = 4
SNAPSHOT_FIELDS = 14
# Tiles in the live wall after the deal (136 - 52 dealt - 14 dead wall)
INITIAL_TILES_LEFT = 70


@dataclass(frozen=True)
class TurnState:
    """
    Visible game state for one turn.

    Attributes:
        hand: Own concealed tiles, dora counts already stamped
        dora_indicators: Revealed dora indicators
        discards: Discard pile of each player
        melds: Exposed melds of each player, dora counts stamped
        seat_wind: Own seat wind (1=East ... 4=North); East is the dealer
        round_wind: Round wind (1=East ... 4=North)
        tiles_left: Tiles remaining in the live wall
        riichi: Riichi declared flag per player
        is_closed: Explicit closed flag; derived from own melds when None
    """
    hand: Tuple[Tile, ...]
    dora_indicators: Tuple[Tile, ...] = ()
    discards: Tuple[Tuple[Tile, ...], ...] = ((), (), (), ())
    melds: Tuple[Tuple[Meld, ...], ...] = ((), (), (), ())
    seat_wind: int = 1
    round_wind: int = 1
    tiles_left: int = INITIAL_TILES_LEFT
    riichi: Tuple[bool, ...] = (False, False, False, False)
    is_closed: Optional[bool] = None

    def __post_init__(self):
        if not 1 <= self.seat_wind <= 4:
            raise ValueError(f"Seat wind must be 1-4, got {self.seat_wind}")
        if not 1 <= self.round_wind <= 4:
            raise ValueError(f"Round wind must be 1-4, got {self.round_wind}")
        if self.tiles_left < 0:
            raise ValueError(f"Tiles left cannot be negative, got {self.tiles_left}")

    @property
    def own_melds(self) -> Tuple[Meld, ...]:
        return self.melds[0] if self.melds else ()

    @property
    def closed(self) -> bool:
        """Whether the own hand is still closed"""
        if self.is_closed is not None:
            return self.is_closed
        return not any(m.is_open for m in self.own_melds)

    @property
    def is_dealer(self) -> bool:
        return self.seat_wind == 1

    @property
    def opponents_in_riichi(self) -> int:
        return sum(1 for flag in self.riichi[1:] if flag)

    def with_hand(self, hand: Sequence[Tile]) -> "TurnState":
        """Same turn, different own hand (e.g. after a discard)"""
        return replace(self, hand=tuple(hand))

    @classmethod
    def from_tiles(
        cls,
        hand: Sequence[Tile],
        dora_indicators: Sequence[Tile] = (),
        melds: Optional[Sequence[Sequence[Meld]]] = None,
        discards: Optional[Sequence[Sequence[Tile]]] = None,
        seat_wind: int = 1,
        round_wind: int = 1,
        tiles_left: int = INITIAL_TILES_LEFT,
        riichi: Optional[Sequence[bool]] = None,
        is_closed: Optional[bool] = None,
    ) -> "TurnState":
        """
        Build a turn state, stamping indicator dora onto hand and meld tiles.

        Raises:
            HandError: hand breaks the 14-tile or 4-copy limits
        """
        dora = DoraSystem(list(dora_indicators))
        melds = _pad([tuple(m) for m in (melds or [])], ())
        stamped_melds = tuple(
            tuple(Meld(m.meld_type, dora.apply(m.tiles), m.called_tile) for m in player_melds)
            for player_melds in melds
        )
        stamped_hand = tuple(dora.apply(hand))
        validate_hand(stamped_hand, stamped_melds[0])
        return cls(
            hand=stamped_hand,
            dora_indicators=tuple(dora_indicators),
            discards=_pad([tuple(d) for d in (discards or [])], ()),
            melds=stamped_melds,
            seat_wind=seat_wind,
            round_wind=round_wind,
            tiles_left=tiles_left,
            riichi=_pad([bool(r) for r in (riichi or [])], False),
            is_closed=is_closed,
        )

    @classmethod
    def from_snapshot(cls, text: str) -> "TurnState":
        """
        Parse a snapshot string:

            dora|hand|melds0|melds1|melds2|melds3|discards0|...|discards3|riichi|seat|round|left

        e.g. "1m|1239p22456m44468s|||||||||0,0,0,0|2|1|50". Tiles use compact
        notation; riichi flags are comma separated 0/1.

        Raises:
            TileParseError: wrong number of fields or malformed values
        """
        if not text or not isinstance(text, str):
            raise TileParseError("Snapshot string is required", text or "")
        parts = text.split("|")
        if len(parts) != SNAPSHOT_FIELDS:
            raise TileParseError(
                f"Snapshot must have {SNAPSHOT_FIELDS} parts separated by |, got {len(parts)}", text
            )

        dora_indicators = parse_tiles(parts[0])
        hand = parse_tiles(parts[1])
        melds = [_parse_melds(p) for p in parts[2:6]]
        discards = [parse_tiles(p) for p in parts[6:10]]
        try:
            riichi = [flag.strip() == "1" for flag in parts[10].split(",")] if parts[10] else []
            seat_wind = int(parts[11])
            round_wind = int(parts[12])
            tiles_left = int(parts[13])
        except ValueError as e:
            raise TileParseError(f"Invalid number in snapshot: {e}", text) from e

        try:
            state = cls.from_tiles(
                hand,
                dora_indicators=dora_indicators,
                melds=melds,
                discards=discards,
                seat_wind=seat_wind,
                round_wind=round_wind,
                tiles_left=tiles_left,
                riichi=riichi,
            )
        except ValueError as e:
            if isinstance(e, TileParseError):
                raise
            raise TileParseError(str(e), text) from e
        logger.debug(f"Loaded snapshot: {len(state.hand)} tiles, {tiles_left} left")
        return state


def _parse_melds(text: str) -> Tuple[Meld, ...]:
    """
    Split a run of called tiles into melds: four identical tiles form a
    kan, otherwise tiles are taken three at a time.
    """
    tiles = parse_tiles(text)
    melds: List[Meld] = []
    i = 0
    try:
        while i < len(tiles):
            if i + 4 <= len(tiles) and all(t == tiles[i] for t in tiles[i:i + 4]):
                melds.append(Meld(MeldType.KAN, tiles[i:i + 4]))
                i += 4
            else:
                melds.append(Meld.from_tiles(tiles[i:i + 3]))
                i += 3
    except ValueError as e:
        raise TileParseError(f"Invalid meld: {e}", text) from e
    return tuple(melds)


def _pad(values: list, filler) -> tuple:
    values = list(values)[:NUM_PLAYERS]
    return tuple(values + [filler] * (NUM_PLAYERS - len(values)))
