from typing import List
from fastapi import APIRouter

from app.core.constants import AchievementEnum
from app.schemas.course_progress import AchievementDetail
from app.schemas.response import APIResponse
from app.services.progress_rules import get_achievement_details

router = APIRouter()

@router.get("/", response_model=APIResponse[List[AchievementDetail]])
async def list_achievements():
    return APIResponse(
        message="Achievements retrieved successfully",
        data=[get_achievement_details(a.value) for a in AchievementEnum]
    )


@router.get("/{achievement_id}", response_model=APIResponse[AchievementDetail])
async def get_achievement(achievement_id: str):
    return APIResponse(message="Achievement retrieved successfully", data=get_achievement_details(achievement_id))
