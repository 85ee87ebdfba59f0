from fastapi import APIRouter, Request, status

from app.dependencies import AdminUser, db_dependency
from app.schemas.team import TeamMemberCreate, TeamMemberResponse, TeamMemberUpdate
from app.services.storage_service import present
from app.services.team_service import TeamService
from app.utils.forms import parse_form, read_form
from app.utils.responses import serialize, success

router = APIRouter(prefix="/api/admin/team", tags=["admin: team"])


def _photo(files):
    photos = present(files.get("photo"))
    return photos[0] if photos else None


@router.get("")
def list_members(db: db_dependency, user: AdminUser):
    members = TeamService(db).list_members(active_only=False)
    return success(serialize(TeamMemberResponse, members), "Team members retrieved successfully")


@router.get("/{member_id}")
def get_member(db: db_dependency, user: AdminUser, member_id: int):
    member = TeamService(db).get_member(member_id)
    return success(serialize(TeamMemberResponse, member), "Team member retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_member(request: Request, db: db_dependency, user: AdminUser):
    fields, files = await read_form(request)
    member_data = parse_form(TeamMemberCreate, fields)
    member = await TeamService(db).create_member(member_data, _photo(files))
    return success(serialize(TeamMemberResponse, member), "Team member created successfully")


@router.put("/{member_id}")
async def update_member(
    request: Request, db: db_dependency, user: AdminUser, member_id: int
):
    service = TeamService(db)
    service.get_member(member_id)
    fields, files = await read_form(request)
    member_data = parse_form(TeamMemberUpdate, fields)
    member = await service.update_member(member_id, member_data, _photo(files))
    return success(serialize(TeamMemberResponse, member), "Team member updated successfully")


@router.delete("/{member_id}")
def delete_member(db: db_dependency, user: AdminUser, member_id: int):
    TeamService(db).delete_member(member_id)
    return success(message="Team member deleted successfully")
