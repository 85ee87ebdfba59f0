# Import all models so they're registered with Base.metadata
from app.models.user import User
from app.models.property import Property
from app.models.property_images import PropertyImage
from app.models.team_member import TeamMember
from app.models.blog_post import BlogPost
from app.models.hero_slide import HeroSlide
from app.models.setting import Setting
from app.models.user_session import UserSession

__all__ = [
    "User",
    "Property",
    "PropertyImage",
    "TeamMember",
    "BlogPost",
    "HeroSlide",
    "Setting",
    "UserSession",
]
