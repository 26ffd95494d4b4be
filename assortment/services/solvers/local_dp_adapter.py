# assortment/services/solvers/local_dp_adapter.py
"""
Exact local solver: binary expansion + closest-sum DP + materialization.

Steps:
1. Quantize unit prices to minor units (done by CatalogItem.unit_price_minor)
2. Expand each (item, quantity) into binary split units
3. Run the 0/1 closest-sum DP up to target + max unit price
4. Materialize the winning splits into concrete units

Items priced above twice the target are dropped first: any selection holding
one is farther from the target than selecting nothing.

The adapter keeps configuration only; every array it allocates belongs to a
single solve() call, so one instance can serve concurrent requests.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from assortment.errors import InvalidInputError
from assortment.schemas.catalog import CatalogItem
from assortment.schemas.selection import FailureReason, SelectionOutcome
from assortment.services.catalog_filters import index_by_id, priced_at_or_below, solvable_items
from assortment.services.solvers.binary_expander import expand_items
from assortment.services.solvers.closest_sum_dp import search_upper_bound, solve_closest_sum
from assortment.services.solvers.materializer import materialize

logger = logging.getLogger(__name__)

DEFAULT_MAX_SEARCH_WIDTH = 20_000_000


@dataclass(frozen=True)
class DpConfig:
    """Configuration for the local DP solver."""

    # Refuse searches wider than this many sums (None = no cap)
    max_search_width: Optional[int] = DEFAULT_MAX_SEARCH_WIDTH


class LocalDpSolverAdapter:
    """Exact closest-sum solver over a bounded-quantity catalog."""

    def __init__(self, config: Optional[DpConfig] = None) -> None:
        self.config = config or DpConfig()

    def solve(self, items: Sequence[CatalogItem], target_minor: int) -> SelectionOutcome:
        """
        Select units whose total is closest to target_minor.

        Args:
            items: Catalog items (unfiltered items are filtered here)
            target_minor: Target in minor units, > 0

        Returns:
            SelectionOutcome with status "selected" or "failed"
            (no_combination_found / invalid_input).
        """
        started = time.perf_counter()

        if target_minor <= 0:
            raise InvalidInputError(f"target_minor must be > 0, got {target_minor}")

        candidates = solvable_items(items)
        index_by_id(candidates)

        items_by_id = index_by_id(priced_at_or_below(candidates, 2 * target_minor))
        overpriced = len(candidates) - len(items_by_id)

        if not items_by_id:
            logger.info(
                "solver.local.no_candidates",
                extra={"path": "local", "target_minor": target_minor, "catalog_size": len(items)},
            )
            return SelectionOutcome.failed(
                FailureReason.NO_COMBINATION_FOUND,
                "No item is in stock at a price that can bring the total closer to the target.",
                target_minor=target_minor,
                path="local",
                diagnostics={"overpriced_count": overpriced},
            )

        max_price = max(it.unit_price_minor for it in items_by_id.values())
        upper_bound = search_upper_bound(target_minor, max_price)
        if self.config.max_search_width is not None and upper_bound > self.config.max_search_width:
            raise InvalidInputError(
                f"Search width {upper_bound} exceeds the configured cap {self.config.max_search_width}.",
                details={"upper_bound": upper_bound, "max_search_width": self.config.max_search_width},
            )

        splits = expand_items((it.id, it.quantity, it.unit_price_minor) for it in items_by_id.values())
        result = solve_closest_sum(splits, target_minor, max_price)

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        if result is None:
            logger.info(
                "solver.local.no_combination",
                extra={
                    "path": "local",
                    "target_minor": target_minor,
                    "catalog_size": len(items_by_id),
                    "split_count": len(splits),
                    "elapsed_ms": elapsed_ms,
                },
            )
            return SelectionOutcome.failed(
                FailureReason.NO_COMBINATION_FOUND,
                "No combination of items is closer to the target than selecting nothing.",
                target_minor=target_minor,
                path="local",
                diagnostics={"upper_bound": upper_bound, "split_count": len(splits)},
            )

        units = materialize(result.picks, items_by_id)

        logger.info(
            "solver.local.done",
            extra={
                "path": "local",
                "target_minor": target_minor,
                "best_sum": result.best_sum,
                "unit_count": len(units),
                "split_count": len(splits),
                "upper_bound": upper_bound,
                "elapsed_ms": elapsed_ms,
            },
        )

        return SelectionOutcome.selected(
            units,
            total_minor=result.best_sum,
            target_minor=target_minor,
            path="local",
            diagnostics={
                "upper_bound": upper_bound,
                "split_count": len(splits),
                "distance_minor": result.distance,
            },
        )


__all__ = ["DEFAULT_MAX_SEARCH_WIDTH", "DpConfig", "LocalDpSolverAdapter"]
