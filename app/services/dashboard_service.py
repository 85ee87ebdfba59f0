from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.blog_post import BlogPost, BlogStatus
from app.models.hero_slide import HeroSlide
from app.models.property import Property
from app.models.team_member import TeamMember
from app.services.hero_service import currently_active_filter
from app.utils.dates import as_utc

RECENT_ACTIVITY_LIMIT = 10


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def _count(self, model, *conditions) -> int:
        return self.db.query(func.count(model.id)).filter(*conditions).scalar()

    def stats(self) -> dict:
        now = datetime.now(timezone.utc)
        return {
            "properties": {
                "active": self._count(Property, Property.is_active == True),
                "featured": self._count(
                    Property, Property.is_active == True, Property.is_featured == True
                ),
                "inactive": self._count(Property, Property.is_active == False),
            },
            "blog": {
                "total": self._count(BlogPost),
                "published": self._count(
                    BlogPost, BlogPost.status == BlogStatus.PUBLISHED
                ),
            },
            "hero_slides": {
                "active": self._count(HeroSlide, *currently_active_filter(now)),
            },
            "team": {
                "active": self._count(TeamMember, TeamMember.is_active == True),
            },
        }

    def recent_activity(self, limit: int = RECENT_ACTIVITY_LIMIT) -> list[dict]:
        """Latest updated properties and posts, merged newest first."""
        per_source = max(1, limit // 2)
        properties = (
            self.db.query(Property)
            .order_by(Property.updated_at.desc(), Property.id.desc())
            .limit(per_source)
            .all()
        )
        posts = (
            self.db.query(BlogPost)
            .order_by(BlogPost.updated_at.desc(), BlogPost.id.desc())
            .limit(per_source)
            .all()
        )
        activity = [
            {
                "type": "property",
                "id": p.id,
                "title": p.title,
                "status": p.status.value,
                "updated_at": as_utc(p.updated_at or p.created_at),
            }
            for p in properties
        ] + [
            {
                "type": "blog",
                "id": post.id,
                "title": post.title,
                "status": post.status.value,
                "updated_at": as_utc(post.updated_at or post.created_at),
            }
            for post in posts
        ]
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        activity.sort(key=lambda item: item["updated_at"] or epoch, reverse=True)
        return activity[:limit]

    def overview(self) -> dict:
        return {"stats": self.stats(), "recent_activity": self.recent_activity()}
