"""Tests for status classification, reorder sets and the view projection."""

from __future__ import annotations

import pytest

from src.inventory.reorder import build_reorder_set
from src.inventory.status import classify, status_priority
from src.inventory.view import project
from src.models.schemas import DerivedStatus, Unit


# =========================================================================
# classify
# =========================================================================


class TestClassify:
    """Verify the status rules and their boundaries."""

    @pytest.mark.parametrize(
        "stock, level, ordered, expected",
        [
            (5.0, 10.0, False, DerivedStatus.URGENT_REORDER),
            (10.0, 10.0, False, DerivedStatus.URGENT_REORDER),
            (10.5, 10.0, False, DerivedStatus.WELL_STOCKED),
            (0.0, 0.0, False, DerivedStatus.URGENT_REORDER),
            (0.0, 100.0, True, DerivedStatus.ORDER_PLACED),
            (500.0, 10.0, True, DerivedStatus.ORDER_PLACED),
        ],
    )
    def test_rules(self, make_item, stock, level, ordered, expected) -> None:
        item = make_item(current_stock=stock, reorder_level=level, is_ordered=ordered)
        assert classify(item) is expected

    def test_ordered_without_delivery_date_is_not_well_stocked(self, make_item) -> None:
        item = make_item(current_stock=1, reorder_level=5, is_ordered=True, expected_delivery=None)
        assert classify(item) is DerivedStatus.ORDER_PLACED

    def test_priority_order(self) -> None:
        assert (
            status_priority(DerivedStatus.URGENT_REORDER)
            > status_priority(DerivedStatus.ORDER_PLACED)
            > status_priority(DerivedStatus.WELL_STOCKED)
        )


# =========================================================================
# build_reorder_set
# =========================================================================


class TestBuildReorderSet:

    def test_empty_input(self) -> None:
        assert build_reorder_set([]) == []

    def test_all_well_stocked(self, make_item) -> None:
        items = [make_item("Rice"), make_item("Onions")]
        assert build_reorder_set(items) == []

    def test_keeps_only_urgent_in_input_order(self, make_item) -> None:
        items = [
            make_item("Teff", current_stock=2, reorder_level=5),
            make_item("Rice"),
            make_item("Berbere", current_stock=0, reorder_level=1, is_ordered=True),
            make_item("Cooking Oil", current_stock=3, reorder_level=3, unit=Unit.LITRE),
        ]
        candidates = build_reorder_set(items)
        assert [c.name for c in candidates] == ["Teff", "Cooking Oil"]
        assert candidates[1].unit is Unit.LITRE

    def test_total_stock_value(self, make_item) -> None:
        item = make_item(
            "Flour",
            current_stock=12.5,
            reorder_level=20,
            unit_cost=40.0,
            primary_vendor="Mill Co",
            vendor_contact="mill@example.com",
        )
        (candidate,) = build_reorder_set([item])
        assert candidate.total_stock_value == 500.0
        assert candidate.vendor == "Mill Co"
        assert candidate.vendor_contact == "mill@example.com"


# =========================================================================
# project
# =========================================================================


class TestProject:

    def test_empty_search_returns_all_in_priority_order(self, make_item) -> None:
        well_a = make_item("Rice")
        urgent_a = make_item("Teff", current_stock=1)
        ordered = make_item("Coffee", current_stock=1, is_ordered=True)
        well_b = make_item("Onions")
        urgent_b = make_item("Butter", current_stock=2)

        result = project([well_a, urgent_a, ordered, well_b, urgent_b], "", False)

        assert [i.name for i in result] == ["Teff", "Butter", "Coffee", "Rice", "Onions"]

    def test_search_is_case_insensitive_on_name(self, make_item) -> None:
        items = [
            make_item("Flour"),
            make_item("FLOUR"),
            make_item("All-Purpose Flour"),
            make_item("Sugar", primary_vendor="Sweet Supplies"),
        ]
        result = project(items, "flour", False)
        assert {i.name for i in result} == {"Flour", "FLOUR", "All-Purpose Flour"}

    def test_search_matches_vendor(self, make_item) -> None:
        items = [make_item("Sugar", primary_vendor="Flour & Sugar Traders"), make_item("Rice")]
        result = project(items, "flour", False)
        assert [i.name for i in result] == ["Sugar"]

    def test_blank_search_is_noop(self, make_item) -> None:
        items = [make_item("Rice"), make_item("Teff")]
        assert len(project(items, "   ", False)) == 2

    def test_urgent_only(self, make_item) -> None:
        items = [
            make_item("Rice"),
            make_item("Teff", current_stock=1),
            make_item("Coffee", current_stock=1, is_ordered=True),
        ]
        result = project(items, "", True)
        assert [i.name for i in result] == ["Teff"]

    def test_search_then_urgent_filter(self, make_item) -> None:
        items = [
            make_item("Flour", current_stock=1),
            make_item("Rice Flour"),
            make_item("Teff", current_stock=1),
        ]
        result = project(items, "flour", True)
        assert [i.name for i in result] == ["Flour"]

    def test_does_not_mutate_input(self, make_item) -> None:
        items = [make_item("Rice"), make_item("Teff", current_stock=1)]
        snapshot = list(items)
        result = project(items, "", False)
        assert items == snapshot
        assert result is not items
