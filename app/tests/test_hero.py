from datetime import datetime, timedelta, timezone

from app.models.hero_slide import HeroSlide


def _slide(db, **overrides):
    values = dict(title="Welcome", image_url="/uploads/hero/a.png", display_order=0)
    values.update(overrides)
    slide = HeroSlide(**values)
    db.add(slide)
    db.commit()
    db.refresh(slide)
    return slide


def test_public_slides_respect_window_and_order(client, db_session):
    now = datetime.now(timezone.utc)
    second = _slide(db_session, title="Second", display_order=2)
    first = _slide(db_session, title="First", display_order=1, start_date=now - timedelta(days=1))
    _slide(db_session, title="Future", start_date=now + timedelta(days=1))
    _slide(db_session, title="Expired", end_date=now - timedelta(days=1))
    _slide(db_session, title="Off", is_active=False)

    r = client.get("/api/hero")
    assert r.status_code == 200, r.text
    slides = r.json()["data"]
    assert [s["id"] for s in slides] == [first.id, second.id]
    assert slides[0]["cta_button"] == {"text": "Learn More", "link": "/listings", "is_external": False}
    assert slides[0]["image"]["url"] == "/uploads/hero/a.png"


def test_public_slide_detail_hides_inactive(client, db_session):
    hidden = _slide(db_session, is_active=False)
    assert client.get(f"/api/hero/{hidden.id}").status_code == 404
    visible = _slide(db_session)
    assert client.get(f"/api/hero/{visible.id}").status_code == 200


def test_is_currently_active():
    now = datetime.now(timezone.utc)
    slide = HeroSlide(is_active=True, start_date=now - timedelta(hours=1), end_date=now + timedelta(hours=1))
    assert slide.is_currently_active(now)
    assert not slide.is_currently_active(now + timedelta(hours=2))
    slide.is_active = False
    assert not slide.is_currently_active(now)


def test_create_requires_image(admin_client):
    r = admin_client.post("/api/admin/hero", data={"title": "No image"})
    assert r.status_code == 400
    assert r.json()["error"] == "Hero image is required"


def test_create_and_replace_image(admin_client, image, upload_dir):
    r = admin_client.post(
        "/api/admin/hero",
        data={"title": "Spring Open House", "cta_text": "Book now", "display_order": "3"},
        files={"image": image("hero.png")},
    )
    assert r.status_code == 201, r.text
    slide = r.json()["data"]
    assert slide["image"]["alt"] == "Spring Open House"
    assert slide["cta_button"]["text"] == "Book now"
    old_path = upload_dir / slide["image"]["url"][len("/uploads/"):]
    assert old_path.exists()

    r = admin_client.put(
        f"/api/admin/hero/{slide['id']}", data={"subtitle": "This weekend"}, files={"image": image("new.png")}
    )
    assert r.status_code == 200, r.text
    updated = r.json()["data"]
    assert updated["subtitle"] == "This weekend"
    assert updated["image"]["url"] != slide["image"]["url"]
    assert not old_path.exists()


def test_create_rejects_inverted_window(admin_client, image):
    r = admin_client.post(
        "/api/admin/hero",
        data={
            "title": "Bad window",
            "start_date": "2030-01-10T00:00:00Z",
            "end_date": "2030-01-01T00:00:00Z",
        },
        files={"image": image()},
    )
    assert r.status_code == 400


def test_update_rejects_inverted_window(admin_client, db_session):
    slide = _slide(db_session, start_date=datetime(2030, 1, 10, tzinfo=timezone.utc))
    r = admin_client.put(
        f"/api/admin/hero/{slide.id}", json={"end_date": "2030-01-01T00:00:00Z"}
    )
    assert r.status_code == 400
    assert r.json()["error"] == "end_date must not be before start_date"


def test_hero_admin_is_admin_only(agent_client):
    assert agent_client.get("/api/admin/hero").status_code == 403


def test_delete_slide(admin_client, db_session):
    slide = _slide(db_session)
    r = admin_client.delete(f"/api/admin/hero/{slide.id}")
    assert r.status_code == 200
    assert admin_client.get(f"/api/admin/hero/{slide.id}").status_code == 404


def test_update_rejects_blank_title(admin_client, db_session):
    slide = _slide(db_session)
    r = admin_client.put(f"/api/admin/hero/{slide.id}", json={"title": "  "})
    assert r.status_code == 400
    db_session.expire_all()
    assert db_session.get(HeroSlide, slide.id).title == "Welcome"
