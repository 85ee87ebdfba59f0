import logging

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.models.team_member import TeamMember
from app.models.user import User
from app.schemas.team import TeamMemberCreate, TeamMemberUpdate
from app.services.property_service import PropertyService
from app.services.storage_service import StorageService, UploadFolder, delete_by_url

logger = logging.getLogger(__name__)


def _not_found():
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail="Team member not found"
    )


class TeamService:
    def __init__(self, db: Session):
        self.db = db

    def _ordered(self):
        return self.db.query(TeamMember).order_by(
            TeamMember.display_order.asc(), TeamMember.id.asc()
        )

    def list_members(self, active_only: bool = True) -> list[TeamMember]:
        query = self._ordered()
        if active_only:
            query = query.filter(TeamMember.is_active == True)
        return query.all()

    def list_with_counts(self) -> list[dict]:
        """Active members in display order, each with its active listing count."""
        properties = PropertyService(self.db)
        return [
            {"member": member, "property_count": properties.count_for_agent(member.user_id)}
            for member in self.list_members()
        ]

    def get_member(self, member_id: int, active_only: bool = False) -> TeamMember:
        query = self.db.query(TeamMember).filter(TeamMember.id == member_id)
        if active_only:
            query = query.filter(TeamMember.is_active == True)
        member = query.first()
        if not member:
            raise _not_found()
        return member

    def get_public_detail(self, member_id: int):
        member = self.get_member(member_id, active_only=True)
        recent = []
        if member.user_id is not None:
            recent = PropertyService(self.db).recent_for_agent(member.user_id, limit=6)
        return member, recent

    def member_properties(self, member_id: int, page: int, limit: int, status_filter):
        member = self.get_member(member_id, active_only=True)
        if member.user_id is None:
            raise _not_found()
        properties, pagination = PropertyService(self.db).for_agent(
            member.user_id, page=page, limit=limit, status=status_filter
        )
        return member, properties, pagination

    def _check_user(self, user_id: int | None):
        if user_id is not None and not self.db.get(User, user_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"User with ID {user_id} does not exist",
            )

    async def create_member(
        self, member_data: TeamMemberCreate, photo: UploadFile | None
    ) -> TeamMember:
        self._check_user(member_data.user_id)
        photo_url = await StorageService(UploadFolder.TEAM).save(photo)

        data = member_data.model_dump()
        member = TeamMember(**data, photo_url=photo_url)
        self.db.add(member)
        self.db.commit()
        self.db.refresh(member)
        logger.info("Team member %s created", member.id)
        return member

    async def update_member(
        self, member_id: int, member_data: TeamMemberUpdate, photo: UploadFile | None
    ) -> TeamMember:
        member = self.get_member(member_id)
        update_data = member_data.model_dump(exclude_unset=True)
        if "user_id" in update_data:
            self._check_user(update_data["user_id"])

        new_photo = await StorageService(UploadFolder.TEAM).save(photo)
        old_photo = None
        if new_photo:
            old_photo, member.photo_url = member.photo_url, new_photo

        # Nested objects are merged, so a form carrying only ``linkedin``
        # keeps the other profiles
        for key in ("social_media", "experience"):
            if key in update_data:
                update_data[key] = {**(getattr(member, key) or {}), **update_data[key]}

        for key, value in update_data.items():
            setattr(member, key, value)

        self.db.commit()
        self.db.refresh(member)
        if old_photo:
            delete_by_url(old_photo)
        return member

    def delete_member(self, member_id: int) -> None:
        member = self.get_member(member_id)
        photo_url = member.photo_url
        self.db.delete(member)
        self.db.commit()
        delete_by_url(photo_url)
        logger.info("Team member %s deleted", member_id)
