from conftest import FakeNotifier
from storefront.data.models import ContactMessageModel, SettingModel
from storefront.domain.schemas import ContactIn
from storefront.services.contact_service import ContactService


def test_submit_stores_and_notifies(db, notifier):
    ContactService(db, notifier).submit(ContactIn(name="Jane", email="jane@example.com", message="Hello"))

    assert db.query(ContactMessageModel).one().read is False
    assert notifier.contacts == [{"admin_email": "support@itag.com", "name": "Jane", "email": "jane@example.com"}]


def test_admin_address_from_settings(db, notifier):
    db.add(SettingModel(key="contact_email", value="owner@shop.test"))
    db.commit()

    ContactService(db, notifier).submit(ContactIn(name="Jane", email="jane@example.com", message="Hello"))

    assert notifier.contacts[0]["admin_email"] == "owner@shop.test"


def test_email_failure_keeps_message(db):
    ContactService(db, FakeNotifier(fail=True)).submit(
        ContactIn(name="Jane", email="jane@example.com", message="Hello")
    )

    assert db.query(ContactMessageModel).count() == 1


def test_contact_endpoint(client, db, notifier):
    resp = client.post("/contact", json={"name": "Jane", "email": "jane@example.com", "message": "Hi"})

    assert resp.status_code == 201
    assert resp.json()["success"] is True
    assert len(notifier.contacts) == 1


def test_contact_endpoint_validates(client, db):
    resp = client.post("/contact", json={"name": "Jane", "email": "nope", "message": "Hi"})

    assert resp.status_code == 422
    assert db.query(ContactMessageModel).count() == 0
