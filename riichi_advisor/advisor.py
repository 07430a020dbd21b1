"""
Discard and Call Advisor for Riichi Mahjong

Evaluates a turn state and recommends a discard or a call.

Features:
- Hand value: shanten, waits, dora, yaku and score estimate
- Per-tile priority combining efficiency, score and supplied danger
- Fold-aware ordering of the ranked tiles
- Call evaluation over the offered combinations
"""

import asyncio
import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .availability import AvailabilityTracker
from .config import AdvisorConfig, DEFAULT_CONFIG, FoldOrdering
from .decomposition import WaitQuality
from .dora import DoraSystem
from .efficiency import efficiency
from .errors import TileParseError
from .scoring import ScoreEstimate, calculate_fu, estimate_score
from .shanten import MAX_SHANTEN, ShantenCalculator, wait_shape
from .state import TurnState
from .strategy import INITIAL_STRATEGY, Strategy, StrategyState, fold, next_strategy
from .tiles import Meld, MeldType, Tile, count_dora, parse_combination, remove_tiles
from .yaku import YakuResult, get_yaku


logger = logging.getLogger(__name__)

DangerLookup = Callable[[Tile], float]
FoldPredicate = Callable[[Tile], bool]


@dataclass(frozen=True)
class HandValue:
    """
    What a hand is worth as it stands.

    Attributes:
        shanten: Distance to tenpai (-1 complete)
        waits: Unseen copies of the winning kinds (0 unless tenpai)
        wait_tiles: Winning kind indices
        wait_shape: Shape of the wait at tenpai
        dora: Dora in hand and own melds
        yaku: Satisfied patterns
        han: Yaku han for the hand's openness plus dora
        fu: Fu used for the score
        score: Open, closed and riichi point estimates
    """
    shanten: int
    waits: int = 0
    wait_tiles: Tuple[int, ...] = ()
    wait_shape: Optional[WaitQuality] = None
    dora: int = 0
    yaku: Tuple[YakuResult, ...] = ()
    han: int = 0
    fu: int = 30
    score: ScoreEstimate = field(default_factory=ScoreEstimate)


@dataclass(frozen=True)
class TilePriority:
    """Ranking entry for discarding one tile"""
    tile: Tile
    efficiency: float
    danger: float
    hand_value: HandValue
    value: float
    fold_flagged: bool = False
    explanation: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.efficiency < 0:
            raise ValueError(f"Efficiency cannot be negative, got {self.efficiency}")
        if self.danger < 0:
            raise ValueError(f"Danger cannot be negative, got {self.danger}")


@dataclass(frozen=True)
class Combination:
    """
    Tiles of a call. Two tiles are the own tiles surrendered for the
    discard; three tiles are either a whole chi/pon (called tile included)
    or three own copies for a kan.
    """
    tiles: Tuple[Tile, ...]

    @classmethod
    def parse(cls, text: str) -> "Combination":
        """Parse pipe-joined notation such as "3m|4m" or "2m|3m|4m" """
        tiles = parse_combination(text)
        if not 2 <= len(tiles) <= 3:
            raise TileParseError(f"A call uses 2 or 3 tiles, got {len(tiles)}", text)
        combination = cls(tuple(tiles))
        try:
            combination.meld()
        except ValueError as e:
            raise TileParseError(f"Tiles cannot form a meld: {e}", text) from e
        return combination

    def meld(self, called_tile: Optional[Tile] = None) -> Meld:
        """
        The meld formed with the called tile. When the called tile is not
        given it is inferred from the combination's shape.
        """
        tiles = sorted(self.tiles)
        if len(tiles) == 3:
            return Meld.from_tiles(tiles)
        if called_tile is None:
            called_tile = _missing_tile(tiles[0], tiles[1])
        return Meld.from_tiles(tiles + [called_tile])

    def surrender(self, hand: Sequence[Tile], called_tile: Optional[Tile] = None) -> Optional[Tuple[List[Tile], Meld]]:
        """
        Own tiles given up for the call and the meld they form.

        Returns:
            (tiles taken from hand, meld), or None when the hand does not
            hold the tiles
        """
        tiles = sorted(self.tiles)
        if len(tiles) == 2:
            taken, meld = tiles, self.meld(called_tile)
        elif not _not_held(hand, tiles) and all(t == tiles[0] for t in tiles):
            taken = tiles
            meld = Meld(MeldType.KAN, tiles + [called_tile or tiles[0]], called_tile)
        else:
            missing = _not_held(hand, tiles)
            called = called_tile or (missing[0] if missing else tiles[0])
            taken = remove_tiles(tiles, [called])
            if len(taken) == len(tiles):
                return None
            meld = Meld(self.meld().meld_type, tiles, called)
        if _not_held(hand, taken):
            return None
        return taken, meld

    @property
    def dora_count(self) -> int:
        return count_dora(self.tiles)

    def __str__(self) -> str:
        return "|".join(str(t) for t in self.tiles)


def _not_held(hand: Sequence[Tile], tiles: Sequence[Tile]) -> List[Tile]:
    """Tiles (counting copies) that the hand cannot supply"""
    remaining = list(hand)
    missing = []
    for tile in tiles:
        after = remove_tiles(remaining, [tile])
        if len(after) == len(remaining):
            missing.append(tile)
        remaining = after
    return missing


def _missing_tile(low: Tile, high: Tile) -> Tile:
    if low == high:
        return Tile(low.suit, low.rank)
    if high.rank - low.rank == 2:
        return Tile(low.suit, low.rank + 1)
    if low.rank > 1:
        return Tile(low.suit, low.rank - 1)
    return Tile(low.suit, high.rank + 1)


@dataclass(frozen=True)
class CallRecommendation:
    """Outcome of evaluating a possible call"""
    recommended: bool
    best_combination: Optional[Combination] = None
    shanten: Optional[int] = None
    dora_value: int = 0
    improves: bool = False
    reason: str = ""


def _own_dora(state: TurnState) -> int:
    return count_dora(state.hand) + sum(m.dora_count for m in state.own_melds)


def evaluate_hand(
    state: TurnState,
    strategy: Strategy = Strategy.GENERAL,
    availability: Optional[AvailabilityTracker] = None,
) -> HandValue:
    """
    Evaluate the own hand of a turn state.

    Args:
        state: Turn state (hand tiles carry stamped dora)
        strategy: Shape being played; FOLD evaluates the general shape
        availability: Unseen copies; computed from the state when None

    Returns:
        HandValue
    """
    if availability is None:
        availability = AvailabilityTracker.from_state(state)
    melds = state.own_melds
    closed = state.closed

    result = ShantenCalculator(availability).calculate(state.hand, strategy, melds)
    shape = wait_shape(result, strategy)
    yaku = get_yaku(state.hand, result.decomposition, state.seat_wind, state.round_wind, closed)
    dora = _own_dora(state)
    fu = calculate_fu(
        result.decomposition,
        wait_shape=shape,
        is_closed=closed,
        seat_wind=state.seat_wind,
        round_wind=state.round_wind,
        is_chiitoitsu=strategy == Strategy.CHIITOITSU,
    )

    return HandValue(
        shanten=result.shanten,
        waits=result.ukeire,
        wait_tiles=tuple(result.wait_tiles),
        wait_shape=shape,
        dora=dora,
        yaku=tuple(yaku.patterns),
        han=yaku.han(closed) + dora,
        fu=fu,
        score=estimate_score(yaku, dora, fu, is_dealer=state.is_dealer),
    )


def _expected_score(value: HandValue, closed: bool, config: AdvisorConfig) -> float:
    """Riichi score (open score for open hands) discounted per shanten step"""
    points = value.score.riichi if closed else value.score.open
    return points * config.shanten_score_discount ** max(value.shanten, 0)


def _progress(value: HandValue, eff: float, config: AdvisorConfig) -> float:
    return (MAX_SHANTEN - value.shanten) + eff / config.efficiency_scale


def _explain(
    value: HandValue,
    best_shanten: int,
    keep_efficiency: float,
    danger: float,
    fold_flagged: bool,
    strategy: Strategy,
    config: AdvisorConfig,
) -> Tuple[str, ...]:
    phrases = []
    if strategy == Strategy.FOLD:
        phrases.append("Folding")
    elif value.shanten > best_shanten:
        phrases.append("Loses shanten")
    elif keep_efficiency == 0:
        phrases.append("Least useful tile")
    if value.shanten == 0 and strategy != Strategy.FOLD:
        phrases.append("Keeps tenpai")
    if danger > config.high_danger:
        phrases.append("Dangerous")
    elif danger < config.safe_danger:
        phrases.append("Safe")
    if fold_flagged:
        phrases.append("Fold flagged")
    return tuple(phrases)


def _candidates(hand: Sequence[Tile]) -> List[Tile]:
    """One tile per distinct (kind, dora) in hand order"""
    seen = set()
    found = []
    for tile in hand:
        key = (tile.tile_index, tile.dora_count)
        if key not in seen:
            seen.add(key)
            found.append(tile)
    return found


def rank_discard_candidates(
    state: TurnState,
    strategy: Strategy = Strategy.GENERAL,
    danger_lookup: Optional[DangerLookup] = None,
    fold_predicate: Optional[FoldPredicate] = None,
    config: AdvisorConfig = DEFAULT_CONFIG,
) -> List[TilePriority]:
    """
    Rank every tile in hand as a discard, best discard first.

    The value of a tile is what keeping it adds to the hand, less its
    danger. It is 0 for the discard that leaves the best progress and
    expected score; lower values are better discards. When folding only
    danger counts.

    Args:
        state: Turn state
        strategy: Shape being played
        danger_lookup: Danger score of discarding a tile (default 0)
        fold_predicate: Whether a tile should be held back when folding
        config: Weights, thresholds and fold ordering

    Returns:
        TilePriority list sorted by value (after fold ordering)
    """
    availability = AvailabilityTracker.from_state(state)
    melds = state.own_melds

    evaluated = []
    for tile in _candidates(state.hand):
        remainder = remove_tiles(state.hand, [tile])
        value = evaluate_hand(state.with_hand(remainder), strategy, availability)
        eff = efficiency(remainder, strategy, availability, melds, config)
        danger = float(danger_lookup(tile)) if danger_lookup else 0.0
        flagged = bool(fold_predicate(tile)) if fold_predicate else False
        evaluated.append((tile, value, eff, danger, flagged))

    if not evaluated:
        return []

    best_progress = max(_progress(v, e, config) for _, v, e, _, _ in evaluated)
    best_expected = max(_expected_score(v, state.closed, config) for _, v, _, _, _ in evaluated)
    best_shanten = min(v.shanten for _, v, _, _, _ in evaluated)

    priorities = []
    for tile, value, eff, danger, flagged in evaluated:
        keep_efficiency = best_progress - _progress(value, eff, config)
        keep_score = best_expected - _expected_score(value, state.closed, config)
        if strategy == Strategy.FOLD:
            composite = danger * config.safety_weight
        else:
            composite = (
                keep_efficiency * config.efficiency_weight
                + keep_score * config.score_weight
                - danger * config.safety_weight
            )
        logger.debug(
            f"{tile}: shanten={value.shanten} eff={eff:.2f} danger={danger:.0f} "
            f"keep_eff={keep_efficiency:.3f} keep_score={keep_score:.0f} value={composite:.3f}"
        )
        priorities.append(TilePriority(
            tile=tile,
            efficiency=eff,
            danger=danger,
            hand_value=value,
            value=composite,
            fold_flagged=flagged,
            explanation=_explain(value, best_shanten, keep_efficiency, danger, flagged, strategy, config),
        ))

    priorities.sort(key=lambda p: p.value)
    if config.fold_ordering == FoldOrdering.SAFE_FIRST:
        priorities = [p for p in priorities if not p.fold_flagged] + [p for p in priorities if p.fold_flagged]
    return priorities


def recommend_discard(priorities: Sequence[TilePriority]) -> Optional[TilePriority]:
    """First entry of a ranked list that is not fold flagged, else the first entry"""
    for priority in priorities:
        if not priority.fold_flagged:
            return priority
    return priorities[0] if priorities else None


def evaluate_call(
    combinations: Sequence[Union[Combination, str]],
    state: TurnState,
    strategy_state: StrategyState = INITIAL_STRATEGY,
    config: AdvisorConfig = DEFAULT_CONFIG,
    called_tile: Optional[Tile] = None,
) -> CallRecommendation:
    """
    Find the best way to call a discard, if calling is allowed at all.

    Args:
        combinations: Own tiles for each way to call, as Combination or
            pipe-joined notation ("3m|4m")
        state: Turn state before the call
        strategy_state: Current strategy and whether calls are allowed
        config: Late-round threshold for calling anyway
        called_tile: The discard being called; inferred when None

    Returns:
        CallRecommendation

    Raises:
        TileParseError: malformed combination text
    """
    parsed = [c if isinstance(c, Combination) else Combination.parse(c) for c in combinations]
    dora = DoraSystem(list(state.dora_indicators))
    parsed = [Combination(tuple(dora.apply(c.tiles))) for c in parsed]

    strategy = strategy_state.strategy
    calculator = ShantenCalculator()
    current = calculator.shanten_only(state.hand, strategy, state.own_melds)

    if not strategy_state.calls_allowed and (state.tiles_left > config.call_tiles_left_threshold or current > 1):
        logger.debug(f"Call skipped: {strategy.value}, {state.tiles_left} left, shanten {current}")
        return CallRecommendation(
            recommended=False,
            shanten=current,
            reason=f"Strategy does not allow calls ({state.tiles_left} left, shanten {current})",
        )
    if not parsed:
        return CallRecommendation(recommended=False, shanten=current, reason="No combinations to call")

    shape = Strategy.GENERAL if strategy.closed_only else strategy
    best: Optional[Combination] = None
    best_shanten = MAX_SHANTEN + 1
    best_dora = 0
    for combination in parsed:
        formed = combination.surrender(state.hand, called_tile)
        if formed is None:
            logger.debug(f"Call skipped: {combination} not held")
            continue
        taken, meld = formed
        remainder = remove_tiles(state.hand, taken)
        shanten = calculator.shanten_only(remainder, shape, tuple(state.own_melds) + (meld,))
        if shanten < best_shanten or (shanten == best_shanten and combination.dora_count > best_dora):
            best = combination
            best_shanten = shanten
            best_dora = combination.dora_count

    if best is None:
        return CallRecommendation(recommended=False, shanten=current, reason="No combination is held in hand")

    logger.info(f"Best call {best}: shanten {current} -> {best_shanten}, dora {best_dora}")
    return CallRecommendation(
        recommended=True,
        best_combination=best,
        shanten=best_shanten,
        dora_value=best_dora,
        improves=best_shanten < current,
        reason=f"Best combination improves hand to {best_shanten} shanten",
    )


class DiscardAdvisor:
    """
    Turn-by-turn advisor.

    Keeps the strategy state between turns and ranks discards with the
    supplied danger and fold callbacks.
    """

    def __init__(
        self,
        config: AdvisorConfig = DEFAULT_CONFIG,
        danger_lookup: Optional[DangerLookup] = None,
        fold_predicate: Optional[FoldPredicate] = None,
    ):
        """
        Initialize advisor.

        Args:
            config: Weights and thresholds
            danger_lookup: Danger score of discarding a tile
            fold_predicate: Whether a tile should be held back when folding
        """
        self.config = config
        self.danger_lookup = danger_lookup
        self.fold_predicate = fold_predicate
        self.strategy_state = INITIAL_STRATEGY

    @property
    def strategy(self) -> Strategy:
        return self.strategy_state.strategy

    def new_round(self) -> None:
        self.strategy_state = INITIAL_STRATEGY

    def fold(self) -> None:
        self.strategy_state = fold(self.strategy_state)

    def update_strategy(self, state: TurnState) -> StrategyState:
        """Recompute the strategy for this turn"""
        self.strategy_state = next_strategy(
            self.strategy_state, state.hand, state.own_melds, state.closed, self.config
        )
        return self.strategy_state

    def rank(self, state: TurnState) -> List[TilePriority]:
        return rank_discard_candidates(
            state, self.strategy, self.danger_lookup, self.fold_predicate, self.config
        )

    def recommend(self, state: TurnState) -> Optional[TilePriority]:
        """Update the strategy and return the recommended discard"""
        self.update_strategy(state)
        best = recommend_discard(self.rank(state))
        if best is not None:
            logger.info(f"Discard {best.tile} ({self.strategy.value}, value {best.value:.3f})")
        return best

    def evaluate_call(
        self,
        combinations: Sequence[Union[Combination, str]],
        state: TurnState,
        called_tile: Optional[Tile] = None,
    ) -> CallRecommendation:
        return evaluate_call(combinations, state, self.strategy_state, self.config, called_tile)

    async def rank_async(self, state: TurnState) -> List[TilePriority]:
        """Rank discards in the default executor"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self.rank, state))

