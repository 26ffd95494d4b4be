# test_scripts/test_binary_expander.py

from __future__ import annotations

from typing import List, Set

from assortment.services.solvers.binary_expander import binary_portions, expand_item, expand_items


def _subset_sums(portions: List[int]) -> Set[int]:
    sums = {0}
    for p in portions:
        sums |= {s + p for s in sums}
    return sums


def test_binary_portions_examples():
    assert binary_portions(0) == []
    assert binary_portions(1) == [1]
    assert binary_portions(13) == [1, 2, 4, 6]
    assert binary_portions(8) == [1, 2, 4, 1]
    assert binary_portions(15) == [1, 2, 4, 8]


def test_every_count_up_to_quantity_is_a_subset_sum():
    for q in range(0, 65):
        portions = binary_portions(q)
        assert sum(portions) == q
        sums = _subset_sums(portions)
        for k in range(0, q + 1):
            assert k in sums, f"count {k} not expressible for quantity {q}"
        # and nothing beyond the stock
        assert max(sums) == q


def test_portion_count_is_logarithmic():
    for q in range(0, 65):
        assert len(binary_portions(q)) == q.bit_length()


def test_expand_item_prices_each_portion():
    splits = expand_item("A", 5, 250)
    assert [(s.portion, s.price) for s in splits] == [(1, 250), (2, 500), (2, 500)]
    assert all(s.item_id == "A" for s in splits)


def test_expand_items_skips_zero_quantity_and_zero_price():
    splits = expand_items([("A", 3, 100), ("B", 0, 100), ("C", 4, 0)])
    assert {s.item_id for s in splits} == {"A"}
    assert sum(s.portion for s in splits) == 3
