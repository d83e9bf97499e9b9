import pytest

from conftest import LINE_ITEMS, FakeNotifier, make_order, paid_session
from storefront.data.models import OrderModel
from storefront.domain.errors import PaymentNotCompletedError, PaymentVerificationError
from storefront.services.settlement_service import (
    SettlementService,
    extract_items,
    extract_shipping_address,
)


@pytest.fixture
def service(db, gateway, notifier):
    gateway.sessions["cs_test_paid"] = paid_session()
    gateway.line_items["cs_test_paid"] = LINE_ITEMS
    return SettlementService(db, gateway, notifier)


def test_reconcile_creates_order_from_paid_session(db, service, notifier):
    order_id = service.reconcile("cs_test_paid")

    order = db.get(OrderModel, order_id)
    assert order.stripe_session_id == "cs_test_paid"
    assert order.subtotal == 4999
    assert order.shipping == 999
    assert order.total == 5998
    assert order.currency == "usd"
    assert order.status == "completed"
    assert order.customer_email == "jane@example.com"
    assert order.items == [{"name": "iTag Pro", "quantity": 1, "price": 4999}]
    assert order.shipping_address["line1"] == "1 Main St"
    assert notifier.confirmations == [order_id]


def test_reconcile_twice_returns_same_order_and_one_email(db, service, gateway, notifier):
    first = service.reconcile("cs_test_paid")
    second = service.reconcile("cs_test_paid")

    assert first == second
    assert db.query(OrderModel).count() == 1
    assert notifier.confirmations == [first]
    # drugi raz bez pytania Stripe
    assert gateway.retrieve_calls == ["cs_test_paid"]


def test_unpaid_session_creates_nothing(db, gateway, notifier):
    gateway.sessions["cs_unpaid"] = paid_session("cs_unpaid", payment_status="unpaid")
    svc = SettlementService(db, gateway, notifier)

    with pytest.raises(PaymentNotCompletedError):
        svc.reconcile("cs_unpaid")

    assert db.query(OrderModel).count() == 0
    assert notifier.confirmations == []


def test_unpaid_is_a_verification_failure(db, gateway):
    gateway.sessions["cs_unpaid"] = paid_session("cs_unpaid", payment_status="unpaid")

    with pytest.raises(PaymentVerificationError):
        SettlementService(db, gateway, FakeNotifier()).reconcile("cs_unpaid")


def test_stripe_error_becomes_verification_error(db, gateway, notifier):
    svc = SettlementService(db, gateway, notifier)

    with pytest.raises(PaymentVerificationError):
        svc.reconcile("cs_missing")

    assert db.query(OrderModel).count() == 0


def test_lost_race_returns_winner_without_email(db, service, notifier, monkeypatch):
    winner = make_order(db, stripe_session_id="cs_test_paid")

    # odczyt sprzed insertu nie widzi jeszcze zamowienia konkurenta
    real_lookup = service.repo.get_by_session_id
    calls = []

    def racing_lookup(session_id):
        calls.append(session_id)
        if len(calls) == 1:
            return None
        return real_lookup(session_id)

    monkeypatch.setattr(service.repo, "get_by_session_id", racing_lookup)

    assert service.reconcile("cs_test_paid") == winner.id
    assert db.query(OrderModel).count() == 1
    assert notifier.confirmations == []


def test_email_failure_does_not_fail_settlement(db, gateway):
    gateway.sessions["cs_test_paid"] = paid_session()
    gateway.line_items["cs_test_paid"] = LINE_ITEMS
    svc = SettlementService(db, gateway, FakeNotifier(fail=True))

    order_id = svc.reconcile("cs_test_paid")

    assert db.get(OrderModel, order_id) is not None


def test_no_email_means_no_confirmation(db, gateway, notifier):
    gateway.sessions["cs_anon"] = paid_session("cs_anon", customer_details={"email": None, "name": None})
    svc = SettlementService(db, gateway, notifier)

    order_id = svc.reconcile("cs_anon")

    assert db.get(OrderModel, order_id).customer_email is None
    assert notifier.confirmations == []


def test_client_reference_wins_over_account_id(db, gateway, notifier):
    gateway.sessions["cs_ref"] = paid_session("cs_ref", client_reference_id="user-from-checkout")
    svc = SettlementService(db, gateway, notifier)

    order_id = svc.reconcile("cs_ref")
    assert db.get(OrderModel, order_id).user_id == "user-from-checkout"

    # konto z verify nie nadpisuje konta zapisanego przy checkoucie
    gateway.sessions["cs_claimed"] = paid_session("cs_claimed", client_reference_id="owner")
    order_id = svc.reconcile("cs_claimed", account_id="someone-else")
    assert db.get(OrderModel, order_id).user_id == "owner"


def test_account_id_used_for_guest_checkout(db, gateway, notifier):
    gateway.sessions["cs_guest"] = paid_session("cs_guest")

    order_id = SettlementService(db, gateway, notifier).reconcile("cs_guest", account_id="user-signed-in-later")

    assert db.get(OrderModel, order_id).user_id == "user-signed-in-later"


def test_total_is_subtotal_plus_shipping(db, gateway, notifier):
    # amount_total z podatkiem - zamowienie trzyma subtotal + shipping
    gateway.sessions["cs_tax"] = paid_session("cs_tax", amount_total=6500, currency="eur")
    order_id = SettlementService(db, gateway, notifier).reconcile("cs_tax")

    order = db.get(OrderModel, order_id)
    assert order.total == 5998
    assert order.currency == "eur"


def test_missing_shipping_cost_is_zero(db, gateway, notifier):
    gateway.sessions["cs_free"] = paid_session("cs_free", shipping_cost=None, amount_total=4999)
    order_id = SettlementService(db, gateway, notifier).reconcile("cs_free")

    order = db.get(OrderModel, order_id)
    assert order.shipping == 0
    assert order.total == 4999


def test_shipping_address_prefers_collected_information():
    address = extract_shipping_address(paid_session())
    assert address == {
        "name": "Jane Doe",
        "line1": "1 Main St",
        "line2": None,
        "city": "Springfield",
        "state": "IL",
        "postal_code": "62701",
        "country": "US",
    }


def test_shipping_address_falls_back_to_legacy_field():
    session = paid_session(
        collected_information=None,
        shipping_details={"name": "Old Api", "address": {"line1": "2 Legacy Ave", "country": "GB"}},
    )
    address = extract_shipping_address(session)
    assert address["name"] == "Old Api"
    assert address["line1"] == "2 Legacy Ave"


def test_shipping_address_falls_back_to_customer_address():
    address = extract_shipping_address(paid_session(collected_information={}))
    assert address["line1"] == "9 Billing Rd"
    assert address["name"] == "Jane Doe"


def test_shipping_address_absent():
    session = paid_session(collected_information=None, customer_details={"email": "a@b.co"})
    assert extract_shipping_address(session) is None


def test_extract_items_uses_line_totals():
    items = extract_items([
        {"description": "iTag Mini", "quantity": 2, "amount_total": 5998},
        {"description": "iTag Pet", "quantity": None, "amount_total": None},
    ])
    assert items == [
        {"name": "iTag Mini", "quantity": 2, "price": 5998},
        {"name": "iTag Pet", "quantity": 0, "price": 0},
    ]
