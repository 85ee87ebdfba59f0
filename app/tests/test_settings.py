from app.models.setting import Setting, SettingCategory, SettingValueType


def _setting(db, key, value, category=SettingCategory.GENERAL, value_type=SettingValueType.STRING, **extra):
    setting = Setting(key=key, value=value, value_type=value_type, category=category, **extra)
    db.add(setting)
    db.commit()
    return setting


def test_upsert_infers_kind(admin_client):
    cases = [
        ("site_name", "Acme Realty", "string"),
        ("max_items", 12, "number"),
        ("maintenance", False, "boolean"),
        ("theme", {"primary": "#123456"}, "object"),
        ("cities", ["Springfield", "Peoria"], "array"),
    ]
    for key, value, kind in cases:
        r = admin_client.put(f"/api/admin/settings/{key}", json={"value": value})
        assert r.status_code == 200, r.text
        data = r.json()["data"]
        assert data["value_type"] == kind
        assert data["value"] == {"kind": kind, "value": value}


def test_upsert_accepts_tagged_value_and_replaces(admin_client, db_session):
    r = admin_client.put(
        "/api/admin/settings/listing_limit",
        json={"value": {"kind": "number", "value": 5}, "category": "features", "description": "Max"},
    )
    assert r.status_code == 200, r.text
    r = admin_client.put("/api/admin/settings/listing_limit", json={"value": "unlimited"})
    data = r.json()["data"]
    assert data["value"] == {"kind": "string", "value": "unlimited"}
    assert data["category"] == "features"
    assert data["description"] == "Max"
    assert db_session.query(Setting).filter(Setting.key == "listing_limit").count() == 1


def test_upsert_rejects_mismatched_tag(admin_client):
    r = admin_client.put(
        "/api/admin/settings/bad", json={"value": {"kind": "number", "value": "abc"}}
    )
    assert r.status_code == 400


def test_non_editable_setting_is_locked(admin_client, db_session):
    _setting(db_session, "site_version", "1.0", is_editable=False)
    r = admin_client.put("/api/admin/settings/site_version", json={"value": "2.0"})
    assert r.status_code == 400
    assert r.json()["error"] == "Setting 'site_version' is not editable"
    assert admin_client.delete("/api/admin/settings/site_version").status_code == 400


def test_get_and_delete(admin_client, db_session):
    _setting(db_session, "tagline", "Homes for all")
    r = admin_client.get("/api/admin/settings/tagline")
    assert r.json()["data"]["value"]["value"] == "Homes for all"
    assert admin_client.delete("/api/admin/settings/tagline").status_code == 200
    assert admin_client.get("/api/admin/settings/tagline").status_code == 404


def test_admin_list_is_grouped(admin_client, db_session):
    _setting(db_session, "company_name", "Acme", SettingCategory.COMPANY)
    _setting(db_session, "meta_title", "Acme", SettingCategory.SEO)
    grouped = admin_client.get("/api/admin/settings").json()["data"]
    assert set(grouped) == {"company", "seo"}
    assert grouped["company"][0]["key"] == "company_name"


def test_bulk_update_is_per_key(admin_client, db_session):
    _setting(db_session, "locked", "x", is_editable=False)
    r = admin_client.post(
        "/api/admin/settings/bulk", json={"settings": {"first": 1, "locked": "y"}}
    )
    assert r.status_code == 400
    db_session.expire_all()
    assert db_session.query(Setting).filter(Setting.key == "first").one().value == 1

    r = admin_client.post("/api/admin/settings/bulk", json={"settings": {"a": 1, "b": True}})
    assert r.status_code == 200, r.text
    assert r.json()["message"] == "2 settings updated successfully"

    r = admin_client.post("/api/admin/settings/bulk", json={"settings": {}})
    assert r.status_code == 400


def test_public_settings_only_expose_public_categories(client, db_session):
    _setting(db_session, "company_name", "Acme", SettingCategory.COMPANY)
    _setting(db_session, "contact_phone", "(555) 123-4567", SettingCategory.CONTACT)
    _setting(db_session, "social_facebook", "https://facebook.com/acme", SettingCategory.SOCIAL)
    _setting(db_session, "primary_color", "#000", SettingCategory.THEME)

    data = client.get("/api/settings/public").json()["data"]
    assert data == {
        "company": {"company_name": "Acme"},
        "contact": {"contact_phone": "(555) 123-4567"},
        "social": {"social_facebook": "https://facebook.com/acme"},
    }

    r = client.get("/api/settings/public/company_name")
    assert r.json()["data"] == {"key": "company_name", "value": "Acme"}
    assert client.get("/api/settings/public/primary_color").status_code == 404

    company = client.get("/api/settings/company").json()["data"]
    assert company == {"company_name": "Acme", "contact_phone": "(555) 123-4567"}
    social = client.get("/api/settings/social").json()["data"]
    assert social == {"social_facebook": "https://facebook.com/acme"}


def test_contact_settings_validation(admin_client):
    r = admin_client.post("/api/admin/settings/contact", json={"phone": "123"})
    assert r.status_code == 400
    assert r.json()["details"][0]["field"] == "phone"

    r = admin_client.post(
        "/api/admin/settings/contact",
        json={"phone": "555 123 4567", "email": "Info@Acme.COM"},
    )
    assert r.status_code == 200, r.text
    values = {s["key"]: s["value"]["value"] for s in r.json()["data"]}
    assert values == {"contact_phone": "555 123 4567", "contact_email": "info@acme.com"}


def test_social_settings(admin_client, client):
    r = admin_client.post(
        "/api/admin/settings/social", data={"instagram": "https://instagram.com/acme"}
    )
    assert r.status_code == 200, r.text
    social = client.get("/api/settings/social").json()["data"]
    assert social == {"social_instagram": "https://instagram.com/acme"}


def test_settings_admin_only(agent_client):
    assert agent_client.get("/api/admin/settings").status_code == 403


def test_change_password_api(admin_client, login):
    r = admin_client.post(
        "/api/admin/settings/password",
        json={"current_password": "secret123", "new_password": "abc123", "confirm_password": "abc999"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "New passwords do not match"

    r = admin_client.post(
        "/api/admin/settings/password",
        json={"current_password": "secret123", "new_password": "abc123", "confirm_password": "abc123"},
    )
    assert r.status_code == 200, r.text
    admin_client.cookies.clear()
    assert login(admin_client, "admin", password="abc123").status_code == 200


def test_contact_settings_rejects_malformed_email(admin_client):
    r = admin_client.post("/api/admin/settings/contact", json={"email": "jane@example..com"})
    assert r.status_code == 400
    assert r.json()["details"][0]["field"] == "email"

    r = admin_client.post("/api/admin/settings/contact", json={"email": " Team@Acme.com "})
    assert r.status_code == 200, r.text
    assert r.json()["data"][0]["value"]["value"] == "team@acme.com"
