from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas.response import APIResponse
from app.utils import deps
from app.schemas.course_progress import CourseProgressInitialize, CourseProgressRecord, ProgressSummary
from app.schemas.lesson_progress import LessonCompletionUpdate, WatchTimeUpdate
from app.services.progress_tracker import ProgressTracker
from app.services.progress_summary import summarize_user_progress

router = APIRouter()

@router.post("/courses/{course_id}/progress", response_model=APIResponse[CourseProgressRecord])
async def initialize_course_progress(
    *,
    course_id: str,
    progress_in: CourseProgressInitialize,
    user_id: str = Depends(deps.get_current_user_id),
    tracker: ProgressTracker = Depends(deps.get_progress_tracker)
):
    progress = tracker.initialize(user_id, course_id, progress_in.lesson_ids)
    return APIResponse(message="Course progress initialized", data=progress)


@router.get("/courses/{course_id}/progress", response_model=APIResponse[CourseProgressRecord])
async def get_course_progress(
    *,
    course_id: str,
    user_id: str = Depends(deps.get_current_user_id),
    tracker: ProgressTracker = Depends(deps.get_progress_reader)
):
    progress = tracker.get_course_progress(user_id, course_id)
    if not progress:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No progress recorded for this course.")
    return APIResponse(message="Course progress retrieved successfully", data=progress)


@router.post("/courses/{course_id}/lessons/{lesson_id}/watch-time", response_model=APIResponse[Optional[CourseProgressRecord]])
async def record_watch_time(
    *,
    course_id: str,
    lesson_id: str,
    watch_in: WatchTimeUpdate,
    user_id: str = Depends(deps.get_current_user_id),
    tracker: ProgressTracker = Depends(deps.get_progress_tracker)
):
    tracker.record_watch_time(user_id, course_id, lesson_id, watch_in.watched_seconds, watch_in.current_position)
    return APIResponse(message="Watch time recorded", data=tracker.get_course_progress(user_id, course_id))


@router.put("/courses/{course_id}/lessons/{lesson_id}/completion", response_model=APIResponse[Optional[CourseProgressRecord]])
async def set_lesson_completion(
    *,
    course_id: str,
    lesson_id: str,
    completion_in: LessonCompletionUpdate,
    user_id: str = Depends(deps.get_current_user_id),
    tracker: ProgressTracker = Depends(deps.get_progress_tracker)
):
    tracker.set_lesson_completion(
        user_id, course_id, lesson_id, completion_in.completed, completion_in.additional_time
    )
    return APIResponse(message="Lesson completion updated", data=tracker.get_course_progress(user_id, course_id))


@router.get("/progress/me", response_model=APIResponse[List[CourseProgressRecord]])
async def get_my_progress(
    *,
    user_id: str = Depends(deps.get_current_user_id),
    tracker: ProgressTracker = Depends(deps.get_progress_reader)
):
    return APIResponse(message="User progress retrieved successfully", data=tracker.get_user_progress(user_id))


@router.get("/progress/me/summary", response_model=APIResponse[ProgressSummary])
async def get_my_progress_summary(
    *,
    user_id: str = Depends(deps.get_current_user_id),
    tracker: ProgressTracker = Depends(deps.get_progress_reader)
):
    summary = summarize_user_progress(tracker.get_user_progress(user_id))
    return APIResponse(message="Progress summary retrieved successfully", data=summary)
