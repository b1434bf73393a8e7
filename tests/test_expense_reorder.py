from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from app.modules.expenses.repository import ExpensesRepository
from app.modules.expenses.service import ExpensesService
from app.shared.database.models import ExpenseItem


def _reorder(db, claim_sheet_id, expense_ids):
    return asyncio.run(ExpensesService(db).reorder_expenses(claim_sheet_id, expense_ids))


def _serials(db, claim_sheet_id):
    db.expire_all()
    rows = (
        db.query(ExpenseItem.id, ExpenseItem.serial_no)
        .filter(ExpenseItem.claim_sheet_id == claim_sheet_id)
        .order_by(ExpenseItem.serial_no)
        .all()
    )
    return [(row.id, row.serial_no) for row in rows]


def test_reorder_moves_last_expense_to_front(db, seed):
    sheet_id, (a, b, c) = seed()

    result = _reorder(db, sheet_id, [c, a, b])

    assert [(e.id, e.serial_no) for e in result.expenses] == [(c, 1), (a, 2), (b, 3)]
    assert _serials(db, sheet_id) == [(c, 1), (a, 2), (b, 3)]


def test_single_expense_reorder_is_a_noop(db, seed):
    sheet_id, (a,) = seed(amounts=(Decimal("10.00"),))

    result = _reorder(db, sheet_id, [a])

    assert [(e.id, e.serial_no) for e in result.expenses] == [(a, 1)]


def test_reorder_twice_with_same_order_gives_same_state(db, seed):
    sheet_id, (a, b, c) = seed()

    _reorder(db, sheet_id, [b, c, a])
    once = _serials(db, sheet_id)
    _reorder(db, sheet_id, [b, c, a])

    assert _serials(db, sheet_id) == once == [(b, 1), (c, 2), (a, 3)]


def test_reorder_keeps_every_expense_and_its_data(db, seed):
    sheet_id, ids = seed(amounts=tuple(Decimal(n) for n in range(1, 8)))
    shuffled = [ids[3], ids[6], ids[0], ids[5], ids[1], ids[4], ids[2]]

    result = _reorder(db, sheet_id, shuffled)

    assert [e.id for e in result.expenses] == shuffled
    assert [e.serial_no for e in result.expenses] == list(range(1, 8))
    assert {e.id: e.amount for e in result.expenses} == {
        expense_id: Decimal(n) for n, expense_id in enumerate(ids, start=1)
    }
    assert result.total_amount == Decimal("28.00")


def test_reorder_restores_dense_numbering_after_delete(db, seed):
    sheet_id, (a, b, c) = seed()
    asyncio.run(ExpensesService(db).delete_expense(b))
    assert [serial for _, serial in _serials(db, sheet_id)] == [1, 3]

    result = _reorder(db, sheet_id, [c, a])

    assert [(e.id, e.serial_no) for e in result.expenses] == [(c, 1), (a, 2)]


def test_reorder_leaves_other_claim_sheets_untouched(db, seed):
    sheet_a, (a1, a2, a3) = seed("CLM-A")
    sheet_b, ids_b = seed("CLM-B")
    before_b = _serials(db, sheet_b)

    _reorder(db, sheet_a, [a3, a2, a1])

    assert _serials(db, sheet_b) == before_b


def test_empty_order_is_rejected(db, seed):
    sheet_id, _ = seed()

    with pytest.raises(InvalidArgumentError):
        _reorder(db, sheet_id, [])


def test_duplicate_ids_are_rejected(db, seed):
    sheet_id, (a, b, c) = seed()

    with pytest.raises(InvalidArgumentError):
        _reorder(db, sheet_id, [a, a, b, c])


def test_omitted_expense_is_rejected_and_nothing_changes(db, seed):
    sheet_id, (a, b, c) = seed()

    with pytest.raises(InvalidArgumentError) as exc:
        _reorder(db, sheet_id, [c, a])

    assert str(b) in exc.value.detail
    assert _serials(db, sheet_id) == [(a, 1), (b, 2), (c, 3)]


def test_unknown_claim_sheet_is_not_found(db, seed):
    _, (a, _, _) = seed()

    with pytest.raises(NotFoundError):
        _reorder(db, 9999, [a])


def test_expense_from_another_sheet_is_not_found(db, seed):
    sheet_a, (a1, a2, a3) = seed("CLM-A")
    _, (b1, _, _) = seed("CLM-B")

    with pytest.raises(NotFoundError):
        _reorder(db, sheet_a, [a1, a2, a3, b1])

    assert _serials(db, sheet_a) == [(a1, 1), (a2, 2), (a3, 3)]


def test_failure_during_assignment_rolls_back_displacement(db, seed, monkeypatch):
    sheet_id, (a, b, c) = seed()
    original_assign = ExpensesRepository.assign_serial_no
    calls = []

    def failing_assign(self, expense_id, claim_sheet_id, serial_no):
        calls.append(expense_id)
        if len(calls) == 2:
            raise IntegrityError("UPDATE expense_items", {}, Exception("UNIQUE constraint failed"))
        return original_assign(self, expense_id, claim_sheet_id, serial_no)

    monkeypatch.setattr(ExpensesRepository, "assign_serial_no", failing_assign)

    with pytest.raises(ConflictError):
        _reorder(db, sheet_id, [c, b, a])

    assert _serials(db, sheet_id) == [(a, 1), (b, 2), (c, 3)]


def test_store_constraint_violation_surfaces_as_conflict(db, seed, monkeypatch):
    sheet_id, (a, b, c) = seed()
    # Reports a full displacement without doing it: the first assignment collides with a live serial_no
    monkeypatch.setattr(ExpensesRepository, "displace_serial_numbers", lambda self, claim_sheet_id: 3)

    with pytest.raises(ConflictError):
        _reorder(db, sheet_id, [c, a, b])

    serials = _serials(db, sheet_id)
    assert serials == [(a, 1), (b, 2), (c, 3)]
    assert all(serial > 0 for _, serial in serials)


def test_consecutive_reorders_end_in_last_order(db, seed):
    sheet_id, (a, b, c) = seed()

    _reorder(db, sheet_id, [b, a, c])
    _reorder(db, sheet_id, [c, b, a])

    assert _serials(db, sheet_id) == [(c, 1), (b, 2), (a, 3)]


def test_expense_left_negative_after_assignment_is_a_conflict(db, seed, monkeypatch):
    sheet_id, (a, b, c) = seed()
    original_assign = ExpensesRepository.assign_serial_no

    def assign_all_but_b(self, expense_id, claim_sheet_id, serial_no):
        if expense_id == b:
            return True
        return original_assign(self, expense_id, claim_sheet_id, serial_no)

    monkeypatch.setattr(ExpensesRepository, "assign_serial_no", assign_all_but_b)

    with pytest.raises(ConflictError):
        _reorder(db, sheet_id, [c, b, a])

    assert _serials(db, sheet_id) == [(a, 1), (b, 2), (c, 3)]
