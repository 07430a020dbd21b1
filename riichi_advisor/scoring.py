"""
Riichi Mahjong Scoring

Fu (minipoints) and point conversion for the evaluating seat, with open,
closed and riichi-declared variants of the same hand.
"""

from dataclasses import dataclass
from typing import Optional

from .decomposition import BlockKind, Decomposition, WaitQuality
from .tiles import MeldType, Tile
from .yaku import YakuSummary


DEFAULT_FU = 30
CHIITOITSU_FU = 25
YAKUMAN_BASE = 8000


@dataclass(frozen=True)
class ScoreEstimate:
    """Points the hand is worth if won by ron (or tsumo when asked)"""
    open: int = 0
    closed: int = 0
    riichi: int = 0

    def for_hand(self, is_closed: bool) -> int:
        return self.closed if is_closed else self.open


def _triplet_fu(tile: Tile, concealed: bool, is_kan: bool) -> int:
    fu = 4 if tile.is_terminal_or_honor else 2
    if concealed:
        fu *= 2
    if is_kan:
        fu *= 4
    return fu


def calculate_fu(
    decomposition: Decomposition,
    wait_shape: Optional[WaitQuality] = None,
    is_closed: bool = True,
    seat_wind: int = 1,
    round_wind: int = 1,
    is_tsumo: bool = False,
    is_chiitoitsu: bool = False,
) -> int:
    """Calculate fu (minipoints)"""
    if is_chiitoitsu:
        return CHIITOITSU_FU

    fu = 20  # Base fu

    if is_tsumo:
        fu += 2

    # Menzen ron
    if is_closed and not is_tsumo:
        fu += 10

    # Sets fu
    for block in decomposition.groups:
        if block.kind == BlockKind.TRIPLET:
            fu += _triplet_fu(Tile.from_index(block.index), concealed=True, is_kan=False)
    for meld in decomposition.melds:
        if meld.is_triplet:
            is_kan = meld.meld_type in (MeldType.KAN, MeldType.CONCEALED_KAN)
            fu += _triplet_fu(meld.base_tile, concealed=not meld.is_open, is_kan=is_kan)

    # Pair fu
    if decomposition.pair is not None:
        pair_tile = Tile.from_index(decomposition.pair.index)
        if pair_tile.is_dragon:
            fu += 2
        elif pair_tile.is_wind:
            if pair_tile.rank == round_wind:
                fu += 2
            if pair_tile.rank == seat_wind:
                fu += 2

    # Wait fu
    if wait_shape in (WaitQuality.INTERIOR, WaitQuality.EDGE, WaitQuality.SINGLE):
        fu += 2

    # Round up to nearest 10
    fu = ((fu + 9) // 10) * 10

    # Minimum 30 fu (except chiitoitsu)
    return max(fu, DEFAULT_FU)


def _payment(base: int, is_dealer: bool, is_tsumo: bool) -> int:
    if is_dealer:
        if is_tsumo:
            # Each player pays this
            return base * 2 * 3
        return base * 6
    if is_tsumo:
        # Dealer pays double, others pay single
        return base * 2 + base * 2
    return base * 4


def calculate_score(
    han: int,
    fu: int = DEFAULT_FU,
    is_dealer: bool = False,
    is_tsumo: bool = False,
    yakuman: int = 0,
) -> int:
    """
    Calculate final score from han and fu.

    Yakuman-class hands bypass fu and han entirely.
    """
    if yakuman > 0:
        return calculate_yakuman_score(yakuman, is_dealer, is_tsumo)

    # Limit hands
    if han >= 13:
        base = YAKUMAN_BASE  # Kazoe yakuman
    elif han >= 11:
        base = 6000  # Sanbaiman
    elif han >= 8:
        base = 4000  # Baiman
    elif han >= 6:
        base = 3000  # Haneman
    elif han >= 5:
        base = 2000  # Mangan
    else:
        # Calculate basic points
        base = fu * (2 ** (max(han, 0) + 2))
        if base > 2000:
            base = 2000  # Mangan cap

    return _payment(base, is_dealer, is_tsumo)


def calculate_yakuman_score(yakuman_count: int, is_dealer: bool = False, is_tsumo: bool = False) -> int:
    """Calculate yakuman score"""
    return _payment(YAKUMAN_BASE * yakuman_count, is_dealer, is_tsumo)


def estimate_score(
    yaku: YakuSummary,
    dora: int = 0,
    fu: int = DEFAULT_FU,
    is_dealer: bool = False,
    is_tsumo: bool = False,
) -> ScoreEstimate:
    """
    Score a hand open, closed and with riichi declared (closed + 1 han).

    Dora are not yaku: a variant with no yaku scores 0. Riichi is a yaku
    itself, so the riichi variant always scores.
    """
    def score(han: int, yaku_han: int, yakuman: int) -> int:
        if yakuman:
            return calculate_yakuman_score(yakuman, is_dealer, is_tsumo)
        if yaku_han <= 0:
            return 0
        return calculate_score(han, fu, is_dealer, is_tsumo)

    open_yaku = yaku.han(is_closed=False)
    closed_yaku = yaku.han(is_closed=True)
    return ScoreEstimate(
        open=score(open_yaku + dora, open_yaku, yaku.yakuman(is_closed=False)),
        closed=score(closed_yaku + dora, closed_yaku, yaku.yakuman(is_closed=True)),
        riichi=score(closed_yaku + dora + 1, closed_yaku + 1, yaku.yakuman(is_closed=True)),
    )
