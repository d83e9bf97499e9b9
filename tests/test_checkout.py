import pytest

from conftest import MINI_ID, PRO_ID, USER_ID, make_product
from storefront.data.models import ProfileModel
from storefront.domain.errors import CheckoutSessionError, InvalidCheckoutError, UnknownProductError
from storefront.domain.schemas import AddressIn, CheckoutItemIn, CustomerInfoIn
from storefront.services.checkout_service import MAX_LINES, CheckoutService

PRICE_MAP = {PRO_ID: "price_pro", MINI_ID: "price_mini"}


@pytest.fixture
def service(gateway):
    return CheckoutService(gateway, price_map=PRICE_MAP, frontend_url="https://shop.test/")


def _item(product_id=PRO_ID, quantity=1):
    return CheckoutItemIn(productId=product_id, quantity=quantity)


def test_create_session_maps_catalog_to_prices(service, gateway):
    url = service.create_session([_item(PRO_ID, 2), _item(MINI_ID, 1)])

    assert url == "https://checkout.stripe.test/cs_test_1"
    params = gateway.created_sessions[0]
    assert params["line_items"] == [
        {"price": "price_pro", "quantity": 2},
        {"price": "price_mini", "quantity": 1},
    ]
    assert params["mode"] == "payment"
    assert params["success_url"] == "https://shop.test/payment-success?session_id={CHECKOUT_SESSION_ID}"
    assert params["cancel_url"] == "https://shop.test/cart"
    assert params["phone_number_collection"] == {"enabled": True}
    assert "US" in params["shipping_address_collection"]["allowed_countries"]
    assert "client_reference_id" not in params


def test_unknown_product_rejected_before_stripe(service, gateway):
    with pytest.raises(UnknownProductError) as exc:
        service.create_session([_item("not-in-catalog")])

    assert exc.value.product_id == "not-in-catalog"
    assert gateway.created_sessions == []


@pytest.mark.parametrize("quantity", [0, -1, 101])
def test_quantity_out_of_range(service, quantity):
    with pytest.raises(InvalidCheckoutError):
        service.create_session([_item(quantity=quantity)])


def test_quantity_bounds_accepted(service, gateway):
    service.create_session([_item(quantity=1), _item(MINI_ID, quantity=100)])
    assert len(gateway.created_sessions) == 1


def test_empty_cart_rejected(service):
    with pytest.raises(InvalidCheckoutError):
        service.create_session([])


def test_too_many_lines_rejected(service):
    with pytest.raises(InvalidCheckoutError):
        service.create_session([_item() for _ in range(MAX_LINES + 1)])


def test_account_id_sent_as_client_reference(service, gateway):
    service.create_session([_item()], account_id=USER_ID)
    assert gateway.created_sessions[0]["client_reference_id"] == USER_ID


def test_email_only_uses_customer_email(service, gateway):
    service.create_session([_item()], customer_email=" jane@example.com ")

    params = gateway.created_sessions[0]
    assert params["customer_email"] == "jane@example.com"
    assert "customer" not in params
    assert gateway.created_customers == []


def test_invalid_email_rejected(service):
    with pytest.raises(InvalidCheckoutError):
        service.create_session([_item()], customer_email="not-an-email")


def test_customer_info_creates_prefilled_customer(service, gateway):
    info = CustomerInfoIn(
        email="jane@example.com",
        name="Jane Doe",
        phone="+1 555 0100",
        address=AddressIn(line1="1 Main St", city="Springfield", postal_code="62701", country="us"),
    )

    service.create_session([_item()], customer_info=info)

    params = gateway.created_sessions[0]
    assert params["customer"] == "cus_1"
    created = gateway.created_customers[0]
    assert created["email"] == "jane@example.com"
    assert created["name"] == "Jane Doe"
    assert created["address"]["country"] == "US"
    assert created["shipping"]["address"]["line1"] == "1 Main St"


def test_existing_customer_reused_and_updated(service, gateway):
    gateway.customers["jane@example.com"] = {"id": "cus_existing"}
    info = CustomerInfoIn(email="jane@example.com", name="Jane Doe")

    service.create_session([_item()], customer_info=info)

    assert gateway.created_sessions[0]["customer"] == "cus_existing"
    assert gateway.created_customers == []
    assert gateway.updated_customers == [("cus_existing", {"name": "Jane Doe"})]


def test_stripe_failure_is_generic(service, gateway):
    gateway.fail_create = True

    with pytest.raises(CheckoutSessionError) as exc:
        service.create_session([_item()])

    assert str(exc.value) == "Unable to start checkout"


# ---------------------------------------------------------------- API

def test_api_returns_url(client, gateway):
    resp = client.post("/checkout/session", json={"items": [{"productId": PRO_ID, "quantity": 1}]})

    assert resp.status_code == 200
    assert resp.json()["url"].startswith("https://checkout.stripe.test/")


def test_api_unknown_product_is_400(client, gateway):
    resp = client.post("/checkout/session", json={"items": [{"productId": "bogus", "quantity": 1}]})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Unknown product: bogus"}
    assert gateway.created_sessions == []


def test_api_stripe_failure_is_500(client, gateway):
    gateway.fail_create = True

    resp = client.post("/checkout/session", json={"items": [{"productId": PRO_ID, "quantity": 1}]})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Unable to start checkout"}


def test_api_signed_in_user_prefilled_from_profile(client, db, gateway, user_headers):
    db.add(ProfileModel(
        user_id=USER_ID,
        email="jane@example.com",
        full_name="Jane Doe",
        address_line1="1 Main St",
        city="Springfield",
        country="US",
    ))
    db.commit()

    resp = client.post(
        "/checkout/session",
        json={"items": [{"productId": PRO_ID, "quantity": 1}]},
        headers=user_headers,
    )

    assert resp.status_code == 200
    params = gateway.created_sessions[0]
    assert params["client_reference_id"] == USER_ID
    assert params["customer"] == "cus_1"
    assert gateway.created_customers[0]["name"] == "Jane Doe"


def test_api_clears_cart_after_handoff(client, db, carts):
    make_product(db)
    client.post("/carts/guest-1/items", json={"product_id": PRO_ID, "selected_color": "Black"})
    assert "guest-1" in carts

    resp = client.post(
        "/checkout/session",
        json={"items": [{"productId": PRO_ID, "quantity": 1}], "cartKey": "guest-1"},
    )

    assert resp.status_code == 200
    assert "guest-1" not in carts
    assert client.get("/carts/guest-1").json()["items"] == []


def test_api_failed_checkout_keeps_cart(client, db, gateway, carts):
    make_product(db)
    client.post("/carts/guest-1/items", json={"product_id": PRO_ID, "selected_color": "Black"})
    gateway.fail_create = True

    resp = client.post(
        "/checkout/session",
        json={"items": [{"productId": PRO_ID, "quantity": 1}], "cartKey": "guest-1"},
    )

    assert resp.status_code == 500
    assert client.get("/carts/guest-1").json()["total_items"] == 1


def test_selected_color_trimmed():
    item = CheckoutItemIn(productId=PRO_ID, quantity=1, selectedColor="  " + "x" * 80)
    assert item.selected_color == "x" * 50
