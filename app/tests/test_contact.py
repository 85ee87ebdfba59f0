import logging

from app.models.property import Property, PropertyType


def _property(db, is_active=True):
    property = Property(
        title="Lake House",
        description="By the lake",
        price=420000,
        property_type=PropertyType.HOUSE,
        street="9 Shore Rd",
        city="Madison",
        state="WI",
        zip_code="53703",
        amenities=[],
        is_active=is_active,
    )
    db.add(property)
    db.commit()
    db.refresh(property)
    return property


def _fields(r):
    return {d["field"].split(".")[-1] for d in r.json()["details"]}


def test_contact_submission(client, caplog):
    with caplog.at_level(logging.INFO, logger="app.routers.contact"):
        r = client.post(
            "/api/contact/submit",
            json={
                "name": "  Jo Smith ",
                "email": "Jo@Example.com",
                "phone": "(555) 123-4567",
                "message": "I would like to know more about your services.",
            },
        )
    assert r.status_code == 200, r.text
    assert r.json() == {"message": "Thank you for your message. We will get back to you soon!"}
    assert "jo@example.com" in caplog.text


def test_contact_submission_validation(client):
    r = client.post(
        "/api/contact/submit",
        json={"name": "J", "email": "nope", "phone": "123", "message": "short"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"
    assert _fields(r) == {"name", "email", "phone", "message"}


def test_blank_phone_is_optional(client):
    r = client.post(
        "/api/contact/submit",
        json={"name": "Jo", "email": "jo@example.com", "phone": " ", "message": "Hello there, friends"},
    )
    assert r.status_code == 200, r.text


def test_property_inquiry(client, db_session):
    property = _property(db_session)
    payload = {
        "name": "Jo",
        "email": "jo@example.com",
        "property_id": property.id,
        "inquiry_type": "price-info",
    }
    r = client.post("/api/contact/property-inquiry", json=payload)
    assert r.status_code == 200, r.text

    r = client.post("/api/contact/property-inquiry", json={**payload, "inquiry_type": "haggle"})
    assert r.status_code == 400


def test_property_inquiry_unknown_or_inactive(client, db_session):
    hidden = _property(db_session, is_active=False)
    payload = {"name": "Jo", "email": "jo@example.com"}
    r = client.post("/api/contact/property-inquiry", json={**payload, "property_id": hidden.id})
    assert r.status_code == 404
    r = client.post("/api/contact/property-inquiry", json={**payload, "property_id": 9999})
    assert r.status_code == 404


def test_callback_request_requires_phone(client):
    r = client.post("/api/contact/callback-request", json={"name": "Jo"})
    assert r.status_code == 400
    assert "phone" in _fields(r)

    r = client.post(
        "/api/contact/callback-request",
        json={"name": "Jo", "phone": "+1 555 123 4567", "preferred_time": "mornings"},
    )
    assert r.status_code == 200, r.text
    assert r.json()["message"] == "Callback request received. We will call you back soon!"


def test_newsletter(client):
    r = client.post("/api/contact/newsletter", json={"email": "fan@example.com"})
    assert r.status_code == 200
    r = client.post("/api/contact/newsletter", json={"email": "fan"})
    assert r.status_code == 400


def test_malformed_email_is_rejected_everywhere(client):
    r = client.post("/api/contact/newsletter", json={"email": "jane@example..com"})
    assert r.status_code == 400
    r = client.post(
        "/api/contact/submit",
        json={"name": "Jane", "email": "jane@example..com", "message": "Hello there, friends"},
    )
    assert r.status_code == 400
    assert _fields(r) == {"email"}
