from datetime import datetime, timedelta, timezone

from app.models.blog_post import BlogCategory, BlogPost, BlogStatus
from app.models.hero_slide import HeroSlide
from app.models.property import Property, PropertyType
from app.models.team_member import TeamMember
from app.services.dashboard_service import DashboardService


def _property(db, title, **extra):
    property = Property(
        title=title,
        description="d",
        price=1000,
        property_type=PropertyType.LAND,
        street="s",
        city="c",
        state="st",
        zip_code="z",
        amenities=[],
        **extra,
    )
    db.add(property)
    return property


def _post(db, slug, status=BlogStatus.DRAFT):
    post = BlogPost(
        title=slug.title(),
        slug=slug,
        excerpt="e",
        content="<p>c</p>",
        category=BlogCategory.COMPANY_NEWS,
        tags=[],
        seo={},
        status=status,
    )
    db.add(post)
    return post


def _seed(db):
    past = datetime.now(timezone.utc) - timedelta(days=1)
    _property(db, "Active featured", is_featured=True)
    _property(db, "Active")
    _property(db, "Inactive", is_active=False)
    _post(db, "draft-post")
    _post(db, "live-post", BlogStatus.PUBLISHED)
    db.add(HeroSlide(title="Live", image_url="/uploads/hero/a.png"))
    db.add(HeroSlide(title="Over", image_url="/uploads/hero/b.png", end_date=past))
    db.add(
        TeamMember(
            first_name="A", last_name="B", position="Agent", bio="b",
            email="a@example.com", phone="5551234567",
        )
    )
    db.commit()


def test_stats(db_session):
    _seed(db_session)
    stats = DashboardService(db_session).stats()
    assert stats == {
        "properties": {"active": 2, "featured": 1, "inactive": 1},
        "blog": {"total": 2, "published": 1},
        "hero_slides": {"active": 1},
        "team": {"active": 1},
    }


def test_recent_activity_mixes_properties_and_posts(db_session):
    _seed(db_session)
    activity = DashboardService(db_session).recent_activity()
    assert len(activity) == 5
    assert {item["type"] for item in activity} == {"property", "blog"}
    stamps = [item["updated_at"] for item in activity]
    assert stamps == sorted(stamps, reverse=True)


def test_dashboard_endpoint(admin_client, db_session):
    _seed(db_session)
    r = admin_client.get("/api/admin/dashboard")
    assert r.status_code == 200, r.text
    body = r.json()["data"]
    assert body["stats"]["properties"]["active"] == 2
    assert len(body["recent_activity"]) == 5


def test_dashboard_requires_admin(agent_client):
    assert agent_client.get("/api/admin/dashboard").status_code == 403
