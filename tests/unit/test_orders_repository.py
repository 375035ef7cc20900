from unittest.mock import MagicMock

from hearty_hounds.orders import repository
from hearty_hounds.orders.models import OrderStatus, can_transition

def test_insert_if_absent_ignores_duplicates_on_payment_intent():
    db = MagicMock()
    upsert = db.table.return_value.upsert
    upsert.return_value.execute.return_value.data = [{"id": "o1", "payment_intent_id": "pi_1"}]

    row = repository.insert_if_absent(db, {"id": "o1", "payment_intent_id": "pi_1"})

    assert row["id"] == "o1"
    db.table.assert_called_with("orders")
    assert upsert.call_args.kwargs == {"on_conflict": "payment_intent_id", "ignore_duplicates": True}

def test_insert_if_absent_returns_none_when_row_already_exists():
    db = MagicMock()
    db.table.return_value.upsert.return_value.execute.return_value.data = []
    assert repository.insert_if_absent(db, {"id": "o2", "payment_intent_id": "pi_1"}) is None

def test_find_by_payment_intent():
    db = MagicMock()
    select = db.table.return_value.select.return_value
    select.eq.return_value.limit.return_value.execute.return_value.data = []
    assert repository.find_by_payment_intent(db, "pi_x") is None
    select.eq.assert_called_with("payment_intent_id", "pi_x")

def test_list_orders_filters_by_email_newest_first():
    db = MagicMock()
    query = db.table.return_value.select.return_value
    query.eq.return_value.order.return_value.limit.return_value.execute.return_value.data = [{"id": "o1"}]

    rows = repository.list_orders(db, customer_email="a@b.c", limit=10)

    assert rows == [{"id": "o1"}]
    query.eq.assert_called_with("customer_email", "a@b.c")
    query.eq.return_value.order.assert_called_with("created_at", desc=True)
    query.eq.return_value.order.return_value.limit.assert_called_with(10)

def test_transition_table_is_forward_only():
    assert can_transition(OrderStatus.PAID, OrderStatus.PROCESSING)
    assert can_transition(OrderStatus.DELIVERED, OrderStatus.REFUNDED)
    assert not can_transition(OrderStatus.PAID, OrderStatus.PAID)
    assert not can_transition(OrderStatus.REFUNDED, OrderStatus.PAID)
