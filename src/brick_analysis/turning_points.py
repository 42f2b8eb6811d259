"""
Turning-Point Filter

Reduces raw extrema markers to the tops and bottoms that strictly alternate
(top -> bottom -> top ...). Runs unmodified over bars or bricks: anything
exposing ``high``, ``low`` and ``extrema_marker`` is a candidate.

Rules:
- A marker nearer the high (ties included) makes a top candidate anchored at
  the high; otherwise a bottom candidate anchored at the low.
- Consecutive tops keep the highest (later wins ties); consecutive bottoms
  keep the lowest (later wins ties).
- A change of side commits the pending extreme.
- The last pending extreme is always committed: it is the open structure.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple, Union

from .types import Candidate

logger = logging.getLogger(__name__)


class ExtremeKind(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"


@dataclass(frozen=True)
class RelevantExtreme:
    """A kept marker, snapped to the exact high or low it belongs to."""
    anchor_price: float
    is_top: bool

    @property
    def kind(self) -> ExtremeKind:
        return ExtremeKind.TOP if self.is_top else ExtremeKind.BOTTOM


@dataclass(frozen=True)
class Classification:
    """Side and anchor of one marker-bearing candidate."""
    kind: ExtremeKind
    anchor: float


# Pending slot: exactly one of these at any time.

@dataclass(frozen=True)
class NoPending:
    pass


@dataclass(frozen=True)
class PendingTop:
    index: int
    anchor: float


@dataclass(frozen=True)
class PendingBottom:
    index: int
    anchor: float


PendingSlot = Union[NoPending, PendingTop, PendingBottom]


def classify_candidate(candidate: Candidate) -> Optional[Classification]:
    """
    Decide whether a candidate's marker points at its high or its low.

    Returns None when there is no marker, or when the marker, high or low is
    not a finite number.
    """
    marker = candidate.extrema_marker
    if marker is None:
        return None

    high = candidate.high
    low = candidate.low
    if not (_finite(marker) and _finite(high) and _finite(low)):
        return None

    if abs(marker - high) <= abs(marker - low):
        return Classification(ExtremeKind.TOP, high)
    return Classification(ExtremeKind.BOTTOM, low)


def _finite(value) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def _pending_for(index: int, classification: Classification) -> PendingSlot:
    if classification.kind is ExtremeKind.TOP:
        return PendingTop(index, classification.anchor)
    return PendingBottom(index, classification.anchor)


def advance(
    pending: PendingSlot, index: int, classification: Classification
) -> Tuple[PendingSlot, Optional[PendingSlot]]:
    """
    Apply one classified candidate to the pending slot.

    Returns:
        (new pending slot, slot to commit or None)
    """
    is_top = classification.kind is ExtremeKind.TOP
    anchor = classification.anchor

    if isinstance(pending, NoPending):
        return _pending_for(index, classification), None

    if isinstance(pending, PendingTop):
        if is_top:
            if anchor >= pending.anchor:
                return PendingTop(index, anchor), None
            return pending, None
        return PendingBottom(index, anchor), pending

    if isinstance(pending, PendingBottom):
        if not is_top:
            if anchor <= pending.anchor:
                return PendingBottom(index, anchor), None
            return pending, None
        return PendingTop(index, anchor), pending

    raise TypeError(f"Unknown pending slot: {pending!r}")


class TurningPointFilter:
    """
    Single-pass alternation filter with one slot of lookback.

    Feed candidates in order with ``process`` and call ``finish`` once.
    A fresh instance is needed per sequence.
    """

    def __init__(self):
        self.pending: PendingSlot = NoPending()
        self.relevant: Dict[int, RelevantExtreme] = {}
        self.marker_count = 0
        self.skipped_count = 0

    def process(self, index: int, candidate: Candidate) -> None:
        if candidate.extrema_marker is None:
            return

        self.marker_count += 1
        classification = classify_candidate(candidate)
        if classification is None:
            self.skipped_count += 1
            logger.debug(f"Skipping malformed candidate {index}: non-finite price or marker")
            return

        self.pending, committed = advance(self.pending, index, classification)
        if committed is not None:
            self._commit(committed)

    def finish(self) -> Dict[int, RelevantExtreme]:
        if not isinstance(self.pending, NoPending):
            self._commit(self.pending)
            self.pending = NoPending()
        return self.relevant

    def _commit(self, slot: PendingSlot) -> None:
        self.relevant[slot.index] = RelevantExtreme(
            anchor_price=slot.anchor,
            is_top=isinstance(slot, PendingTop),
        )


def filter_relevant(candidates: Sequence[Candidate]) -> Dict[int, RelevantExtreme]:
    """
    Select the relevant tops and bottoms among marker-bearing candidates.

    Args:
        candidates: Bars or bricks in sequence order

    Returns:
        Mapping of candidate position -> RelevantExtreme, in position order.
        Positions not present are not relevant.

    Example:
        >>> relevant = filter_relevant(bricks)
        >>> [(i, r.is_top) for i, r in relevant.items()]
        [(3, True), (7, False)]
    """
    turning_points = TurningPointFilter()
    for index, candidate in enumerate(candidates):
        turning_points.process(index, candidate)
    relevant = turning_points.finish()

    logger.debug(
        f"Turning points: {turning_points.marker_count} markers, "
        f"{len(relevant)} relevant, {turning_points.skipped_count} skipped"
    )
    return relevant

