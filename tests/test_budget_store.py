from decimal import Decimal

import pytest

from expense_tracker.exceptions import ConflictError
from expense_tracker.services.budget_store import BudgetStore


def test_duplicate_category_budget_is_rejected(db):
    store = BudgetStore(db)
    first = store.create(1, 5, "2024-07", Decimal("300"))

    with pytest.raises(ConflictError):
        store.create(1, 5, "2024-07", Decimal("999"))

    assert store.get_by_id(first.id).amount == Decimal("300.00")


def test_duplicate_overall_budget_is_rejected(db):
    store = BudgetStore(db)
    store.create(1, None, "2024-07", Decimal("1000"))

    with pytest.raises(ConflictError):
        store.create(1, None, "2024-07", Decimal("2000"))


@pytest.mark.parametrize("category", [5, None])
def test_storage_rejects_duplicates_that_slip_past_the_lookup(db, monkeypatch, category):
    store = BudgetStore(db)
    store.create(1, category, "2024-07", Decimal("100"))
    monkeypatch.setattr(store, "exists_for_key", lambda *args: False)

    with pytest.raises(ConflictError):
        store.create(1, category, "2024-07", Decimal("200"))

    # the session is still usable after the rollback
    assert len(store.list_for_owner_and_month(1, "2024-07")) == 1


def test_same_key_parts_in_other_slots_are_independent(db):
    store = BudgetStore(db)
    store.create(1, 5, "2024-07", Decimal("100"))
    store.create(1, 5, "2024-08", Decimal("100"))
    store.create(1, 6, "2024-07", Decimal("100"))
    store.create(1, None, "2024-07", Decimal("100"))
    store.create(2, 5, "2024-07", Decimal("100"))

    assert store.exists_for_key(1, None, "2024-07")
    assert not store.exists_for_key(1, None, "2024-08")
    assert store.find_for_key(2, 5, "2024-07").owner_id == 2


def test_month_listing_puts_overall_first(db):
    store = BudgetStore(db)
    store.create(1, 6, "2024-07", Decimal("100"))
    store.create(1, None, "2024-07", Decimal("100"))
    store.create(1, 2, "2024-07", Decimal("100"))

    assert [b.category_id for b in store.list_for_owner_and_month(1, "2024-07")] == [None, 2, 6]


def test_update_and_delete_report_missing_budgets(db):
    store = BudgetStore(db)
    budget = store.create(1, 5, "2024-07", Decimal("100"))

    assert store.update_amount(budget.id, Decimal("250")) is True
    assert store.get_by_id(budget.id).amount == Decimal("250.00")
    assert store.update_amount(9999, Decimal("1")) is False

    assert store.delete(budget.id) is True
    assert store.delete(budget.id) is False
    assert store.get_by_id(budget.id) is None


def test_create_validates_month(db):
    with pytest.raises(ValueError):
        BudgetStore(db).create(1, 5, "2024-7", Decimal("100"))
