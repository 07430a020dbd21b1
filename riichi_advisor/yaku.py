"""
Yaku Detector

Tests a completed or near-complete hand against each scoring pattern.
Every detector is a pure function of a HandAnalysis and returns the han the
pattern is worth open and closed (0 when absent). Detectors never consult
each other; overlapping patterns (iipeikou/ryanpeikou, chanta/junchan,
honitsu/chinitsu, shousangen/daisangen) are made mutually exclusive by
their own conditions.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, List, Sequence, Tuple

from .decomposition import BlockKind, Decomposition, pairs_in_hand
from .shanten import shanten_kokushi
from .tiles import HonorRank, Tile, TileSuit, to_counts


# Honor kind indices
DRAGON_INDICES = tuple(TileSuit.HONOR * 9 + r - 1 for r in (HonorRank.WHITE, HonorRank.GREEN, HonorRank.RED))
YAKUMAN_HAN = 10


class YakuType(IntEnum):
    """Categories of Yaku"""
    NORMAL = 0      # Regular yaku
    YAKUMAN = 1     # Limit hand (yakuman)


@dataclass(frozen=True)
class Yaku:
    """Represents a Yaku (winning pattern)"""
    name: str
    japanese_name: str
    han_closed: int        # Han value when closed
    han_open: int          # Han value when open (0 = not allowed open)
    yaku_type: YakuType = YakuType.NORMAL

    @property
    def is_yakuman(self) -> bool:
        return self.yaku_type == YakuType.YAKUMAN


@dataclass(frozen=True)
class YakuResult:
    """Han a pattern is worth, open and closed (both 0 when absent)"""
    name: str
    open: int = 0
    closed: int = 0
    is_yakuman: bool = False

    def __bool__(self) -> bool:
        return self.open > 0 or self.closed > 0

    def han(self, is_closed: bool) -> int:
        return self.closed if is_closed else self.open


@dataclass
class YakuSummary:
    """All satisfied patterns of a hand"""
    open: int = 0
    closed: int = 0
    patterns: List[YakuResult] = field(default_factory=list)

    def han(self, is_closed: bool) -> int:
        """Yaku han for the hand (closed sum when unopened, else open sum)"""
        return self.closed if is_closed else self.open

    def yakuman(self, is_closed: bool) -> int:
        """Number of yakuman-class patterns that count for this openness"""
        return sum(1 for p in self.patterns if p.is_yakuman and p.han(is_closed) > 0)

    @property
    def names(self) -> List[str]:
        return [p.name for p in self.patterns]


@dataclass
class HandAnalysis:
    """Hand structure the detectors read"""
    tiles: List[Tile]                 # Concealed tiles plus meld tiles
    decomposition: Decomposition
    seat_wind: int = 1
    round_wind: int = 1
    is_closed: bool = True
    concealed: List[Tile] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        hand: Sequence[Tile],
        decomposition: Decomposition,
        seat_wind: int = 1,
        round_wind: int = 1,
        is_closed: bool = True,
    ) -> "HandAnalysis":
        tiles = list(hand)
        for meld in decomposition.melds:
            tiles.extend(meld.tiles)
        return cls(
            tiles=tiles,
            decomposition=decomposition,
            seat_wind=seat_wind,
            round_wind=round_wind,
            is_closed=is_closed,
            concealed=list(hand),
        )

    @property
    def sets(self) -> List[Tuple[BlockKind, Tuple[int, ...]]]:
        """(kind, tile indices) of every complete group, concealed and exposed"""
        found = [(b.kind, b.indices) for b in self.decomposition.groups]
        for meld in self.decomposition.melds:
            kind = BlockKind.TRIPLET if meld.is_triplet else BlockKind.SEQUENCE
            found.append((kind, tuple(t.tile_index for t in meld.tiles)))
        return found

    @property
    def is_complete_shape(self) -> bool:
        return self.decomposition.complete_groups == 4 and self.decomposition.pair is not None


def _result(yaku: Yaku, count: int = 1) -> YakuResult:
    if count <= 0:
        return YakuResult(yaku.name, is_yakuman=yaku.is_yakuman)
    return YakuResult(yaku.name, yaku.han_open * count, yaku.han_closed * count, yaku.is_yakuman)


YAKUHAI = Yaku("Yakuhai", "役牌", 1, 1)
TANYAO = Yaku("Tanyao", "断幺九", 1, 1)
IIPEIKOU = Yaku("Iipeikou", "一盃口", 1, 0)
RYANPEIKOU = Yaku("Ryanpeikou", "二盃口", 3, 0)
SANANKOU = Yaku("Sanankou", "三暗刻", 2, 2)
TOITOI = Yaku("Toitoi", "対々和", 2, 2)
SANSHOKU_DOUKOU = Yaku("Sanshoku Doukou", "三色同刻", 2, 2)
SANSHOKU_DOUJUN = Yaku("Sanshoku Doujun", "三色同順", 2, 1)
ITTSU = Yaku("Ittsu", "一気通貫", 2, 1)
CHANTA = Yaku("Chanta", "混全帯幺九", 2, 1)
JUNCHAN = Yaku("Junchan", "純全帯幺九", 3, 2)
HONROUTOU = Yaku("Honroutou", "混老頭", 2, 2)
SHOUSANGEN = Yaku("Shousangen", "小三元", 2, 2)
CHIITOITSU = Yaku("Chiitoitsu", "七対子", 2, 0)
HONITSU = Yaku("Honitsu", "混一色", 3, 2)
CHINITSU = Yaku("Chinitsu", "清一色", 6, 5)
DAISANGEN = Yaku("Daisangen", "大三元", YAKUMAN_HAN, YAKUMAN_HAN, YakuType.YAKUMAN)
KOKUSHI = Yaku("Kokushi Musou", "国士無双", YAKUMAN_HAN, 0, YakuType.YAKUMAN)


def yakuhai(a: HandAnalysis) -> YakuResult:
    """
    Value-tile triplets: each dragon triplet, the seat wind and the round
    wind. A triplet of a double wind counts twice.
    """
    count = 0
    for idx in a.decomposition.triplet_indices:
        tile = Tile.from_index(idx)
        if tile.is_dragon:
            count += 1
        elif tile.is_wind:
            count += int(tile.rank == a.seat_wind) + int(tile.rank == a.round_wind)
    return _result(YAKUHAI, count)


def tanyao(a: HandAnalysis) -> YakuResult:
    """All simples (no terminals/honors), checked over every tile"""
    if not a.tiles or any(not t.is_simple for t in a.tiles):
        return _result(TANYAO, 0)
    return _result(TANYAO)


def _sequence_repeats(a: HandAnalysis) -> List[int]:
    seqs = Counter(a.decomposition.sequence_indices)
    return [c // 2 for c in seqs.values() if c >= 2]


def iipeikou(a: HandAnalysis) -> YakuResult:
    """Two identical sequences"""
    return _result(IIPEIKOU, int(sum(_sequence_repeats(a)) == 1))


def ryanpeikou(a: HandAnalysis) -> YakuResult:
    """Two sets of identical sequences"""
    return _result(RYANPEIKOU, int(sum(_sequence_repeats(a)) >= 2))


def sanankou(a: HandAnalysis) -> YakuResult:
    """Three concealed triplets"""
    return _result(SANANKOU, int(len(a.decomposition.concealed_triplet_indices) >= 3))


def toitoi(a: HandAnalysis) -> YakuResult:
    """All triplets/quads"""
    d = a.decomposition
    return _result(TOITOI, int(d.complete_groups == 4 and len(d.triplet_indices) == 4))


def sanshoku_doukou(a: HandAnalysis) -> YakuResult:
    """Same triplet in three suits"""
    suits_by_rank = {}
    for idx in a.decomposition.triplet_indices:
        if idx < 27:
            suits_by_rank.setdefault(idx % 9, set()).add(idx // 9)
    return _result(SANSHOKU_DOUKOU, int(any(len(s) >= 3 for s in suits_by_rank.values())))


def sanshoku_doujun(a: HandAnalysis) -> YakuResult:
    """Three suits, same sequence"""
    suits_by_rank = {}
    for idx in a.decomposition.sequence_indices:
        suits_by_rank.setdefault(idx % 9, set()).add(idx // 9)
    return _result(SANSHOKU_DOUJUN, int(any(len(s) >= 3 for s in suits_by_rank.values())))


def ittsu(a: HandAnalysis) -> YakuResult:
    """1-2-3, 4-5-6, 7-8-9 in same suit"""
    starts = set(a.decomposition.sequence_indices)
    found = any({base, base + 3, base + 6} <= starts for base in (0, 9, 18))
    return _result(ITTSU, int(found))


def _outside_hand(a: HandAnalysis, allow_honors: bool) -> bool:
    """Every group and the pair hold a terminal (or honor), with a sequence among them"""
    if not a.is_complete_shape:
        return False
    sets = a.sets
    if not any(kind == BlockKind.SEQUENCE for kind, _ in sets):
        return False
    blocks = [indices for _, indices in sets] + [a.decomposition.pair.indices]
    for indices in blocks:
        tiles = [Tile.from_index(i) for i in indices]
        if allow_honors:
            if not any(t.is_terminal_or_honor for t in tiles):
                return False
        elif not any(t.is_terminal for t in tiles):
            return False
    has_honors = any(t.is_honor for t in a.tiles)
    return has_honors if allow_honors else not has_honors


def chanta(a: HandAnalysis) -> YakuResult:
    """All sets contain terminal or honor, honors present"""
    return _result(CHANTA, int(_outside_hand(a, allow_honors=True)))


def junchan(a: HandAnalysis) -> YakuResult:
    """All sets contain terminal (no honors)"""
    return _result(JUNCHAN, int(_outside_hand(a, allow_honors=False)))


def honroutou(a: HandAnalysis) -> YakuResult:
    """All terminals and honors, with both present, in four sets and a pair or seven pairs"""
    if not (a.is_complete_shape or chiitoitsu(a)):
        return _result(HONROUTOU, 0)
    if not a.tiles or any(not t.is_terminal_or_honor for t in a.tiles):
        return _result(HONROUTOU, 0)
    mixed = any(t.is_honor for t in a.tiles) and any(t.is_terminal for t in a.tiles)
    return _result(HONROUTOU, int(mixed))


def _dragon_triplets(a: HandAnalysis) -> int:
    return sum(1 for idx in a.decomposition.triplet_indices if idx in DRAGON_INDICES)


def shousangen(a: HandAnalysis) -> YakuResult:
    """Small 3 dragons (2 pongs + pair)"""
    pair = a.decomposition.pair
    dragon_pair = pair is not None and pair.index in DRAGON_INDICES
    return _result(SHOUSANGEN, int(_dragon_triplets(a) == 2 and dragon_pair))


def daisangen(a: HandAnalysis) -> YakuResult:
    """Big 3 dragons"""
    return _result(DAISANGEN, int(_dragon_triplets(a) == 3))


def chiitoitsu(a: HandAnalysis) -> YakuResult:
    """Seven distinct pairs"""
    return _result(CHIITOITSU, int(len(a.concealed) == 14 and len(pairs_in_hand(a.concealed)) == 7))


def _suits(a: HandAnalysis) -> Tuple[set, bool]:
    suits = {t.suit for t in a.tiles if not t.is_honor}
    return suits, any(t.is_honor for t in a.tiles)


def honitsu(a: HandAnalysis) -> YakuResult:
    """One suit + honors"""
    suits, has_honors = _suits(a)
    return _result(HONITSU, int(len(suits) == 1 and has_honors))


def chinitsu(a: HandAnalysis) -> YakuResult:
    """Pure one suit (no honors)"""
    suits, has_honors = _suits(a)
    return _result(CHINITSU, int(len(suits) == 1 and not has_honors))


def kokushi(a: HandAnalysis) -> YakuResult:
    """One of each terminal/honor plus a pair among them"""
    return _result(KOKUSHI, int(a.is_closed and shanten_kokushi(to_counts(a.concealed)) == -1))


YAKU_CHECKS: List[Callable[[HandAnalysis], YakuResult]] = [
    # 1 Han
    yakuhai,
    tanyao,
    iipeikou,
    # 2 Han
    sanankou,
    toitoi,
    sanshoku_doukou,
    sanshoku_doujun,
    ittsu,
    chanta,
    honroutou,
    shousangen,
    chiitoitsu,
    # 3 Han
    ryanpeikou,
    junchan,
    honitsu,
    # 6 Han
    chinitsu,
    # Yakuman
    daisangen,
    kokushi,
]


def get_yaku(
    hand: Sequence[Tile],
    decomposition: Decomposition,
    seat_wind: int = 1,
    round_wind: int = 1,
    is_closed: bool = True,
) -> YakuSummary:
    """
    Run every detector over a hand.

    Args:
        hand: Concealed tiles
        decomposition: Decomposition of the hand (exposed melds included)
        seat_wind: Own seat wind (1=East ... 4=North)
        round_wind: Round wind
        is_closed: Whether the hand is unopened

    Returns:
        YakuSummary with open/closed han sums and the satisfied patterns
    """
    analysis = HandAnalysis.build(hand, decomposition, seat_wind, round_wind, is_closed)
    summary = YakuSummary()
    for check in YAKU_CHECKS:
        result = check(analysis)
        if result:
            summary.patterns.append(result)
            summary.open += result.open
            summary.closed += result.closed
    return summary
