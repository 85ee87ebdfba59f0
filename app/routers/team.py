from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import db_dependency, enforce_rate_limit
from app.models.property import PropertyStatus
from app.schemas.property import PropertyResponse
from app.schemas.team import TeamAgentSummary, TeamMemberResponse
from app.services.property_service import PUBLIC_PAGE_SIZE
from app.services.team_service import TeamService
from app.utils.responses import serialize, success

router = APIRouter(
    prefix="/api/team",
    tags=["team"],
    dependencies=[Depends(enforce_rate_limit)],
)


@router.get("")
def list_team(db: db_dependency):
    members = [
        {**serialize(TeamMemberResponse, row["member"]), "property_count": row["property_count"]}
        for row in TeamService(db).list_with_counts()
    ]
    return success(members, "Team members retrieved successfully")


@router.get("/{member_id}")
def get_team_member(db: db_dependency, member_id: int):
    member, recent = TeamService(db).get_public_detail(member_id)
    data = serialize(TeamMemberResponse, member)
    data["recent_properties"] = serialize(PropertyResponse, recent)
    return success(data, "Team member retrieved successfully")


@router.get("/{member_id}/properties")
def get_team_member_properties(
    db: db_dependency,
    member_id: int,
    page: int = 1,
    limit: int = Query(PUBLIC_PAGE_SIZE, ge=1, le=100),
    status: Optional[PropertyStatus] = None,
):
    member, properties, pagination = TeamService(db).member_properties(
        member_id, page, limit, status
    )
    return success(
        {
            "agent": serialize(TeamAgentSummary, member),
            "properties": serialize(PropertyResponse, properties),
            "pagination": pagination.to_dict(),
        },
        "Agent properties retrieved successfully",
    )
