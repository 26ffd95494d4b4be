# assortment/services/solvers/closest_sum_dp.py
"""
Closest-sum 0/1 subset-sum over split units.

reachable[s] is True when some subset of splits sums to exactly s;
origin[s] is the index of the split that first reached s (the prior sum is
s - splits[origin[s]].price). Both arrays live only for one call.

Each split pass reads the table as it was before the pass, which is what the
classic "iterate s downward" loop guarantees: a split is used at most once.
The pass is vectorized with numpy; the result (including back-pointers) is
identical to the scalar downward loop.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from assortment.services.solvers.binary_expander import SplitUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClosestSumResult:
    """Winning sum plus the (item_id, portion) picks that produce it."""
    best_sum: int
    target: int
    upper_bound: int
    picks: List[Tuple[str, int]] = field(default_factory=list)

    @property
    def distance(self) -> int:
        return abs(self.best_sum - self.target)


def search_upper_bound(target: int, max_item_price: int) -> int:
    """Overshoot is bounded by one full (unsplit) item, so search to target + max price."""
    return target + max_item_price


def build_reachability(splits: Sequence[SplitUnit], upper_bound: int) -> Tuple[np.ndarray, np.ndarray]:
    reachable = np.zeros(upper_bound + 1, dtype=bool)
    origin = np.full(upper_bound + 1, -1, dtype=np.int64)
    reachable[0] = True

    for idx, split in enumerate(splits):
        p = split.price
        if p <= 0 or p > upper_bound:
            continue
        # newly[s - p] <=> reachable[s - p] and not reachable[s], evaluated on the pre-pass table
        newly = reachable[:-p] & ~reachable[p:]
        hits = np.flatnonzero(newly) + p
        if hits.size:
            reachable[hits] = True
            origin[hits] = idx

    return reachable, origin


def pick_best_sum(reachable: np.ndarray, target: int) -> int:
    """Closest reachable sum to target; ties go to the larger sum (overshoot wins)."""
    sums = np.flatnonzero(reachable)
    diffs = np.abs(sums - target)
    closest = sums[diffs == diffs.min()]
    return int(closest.max())


def reconstruct(origin: np.ndarray, splits: Sequence[SplitUnit], best_sum: int) -> List[Tuple[str, int]]:
    picks: List[Tuple[str, int]] = []
    s = best_sum
    while s > 0:
        idx = int(origin[s])
        if idx < 0:
            # reachable sums always carry a back-pointer; a miss means the table is corrupt
            raise RuntimeError(f"Broken back-pointer chain at sum {s}")
        split = splits[idx]
        picks.append((split.item_id, split.portion))
        s -= split.price
    return picks


def solve_closest_sum(
    splits: Sequence[SplitUnit],
    target: int,
    max_item_price: int,
) -> Optional[ClosestSumResult]:
    """
    Find the reachable sum closest to `target` (minor units).

    Args:
        splits: Split units from the binary expander
        target: Target sum in minor units (> 0)
        max_item_price: Largest original (unsplit) unit price in minor units

    Returns:
        ClosestSumResult, or None when no split exists or selecting nothing
        is strictly closer to the target than any reachable nonzero sum.
    """
    if target <= 0 or not splits or max_item_price <= 0:
        return None

    upper_bound = search_upper_bound(target, max_item_price)
    reachable, origin = build_reachability(splits, upper_bound)
    best_sum = pick_best_sum(reachable, target)

    logger.debug(
        "solver.dp.table_built",
        extra={
            "split_count": len(splits),
            "upper_bound": upper_bound,
            "best_sum": best_sum,
            "target_minor": target,
        },
    )

    if best_sum <= 0:
        return None

    return ClosestSumResult(
        best_sum=best_sum,
        target=target,
        upper_bound=upper_bound,
        picks=reconstruct(origin, splits, best_sum),
    )


__all__ = [
    "ClosestSumResult",
    "search_upper_bound",
    "build_reachability",
    "pick_best_sum",
    "reconstruct",
    "solve_closest_sum",
]
