from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from kambaz.auth.auth_utils import UserContext, get_current_user, require_faculty
from kambaz.database import get_db
from kambaz.quizzes import database
from kambaz.quizzes.models import QuizCreate, QuizUpdate, QuizPublish, QuestionCreate, QuestionUpdate
from kambaz.quizzes.quiz_service import list_quizzes_for_user, quiz_view_for_user

router = APIRouter(tags=["Quizzes"])


async def get_quiz_or_404(db: AsyncIOMotorDatabase, quiz_id: str) -> dict:
    quiz = await database.find_quiz_by_id(db, quiz_id)
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found.")
    return quiz

# ==================== QUIZ CRUD (FACULTY) ====================

@router.post("/courses/{course_id}/quizzes")
async def create_quiz_for_course(
    course_id: str,
    data: QuizCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(require_faculty)
):
    return await database.create_quiz(db, course_id, data.model_dump())


@router.put("/quizzes/{quiz_id}")
async def update_quiz(
    quiz_id: str,
    data: QuizUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(require_faculty)
):
    quiz = await database.update_quiz(db, quiz_id, data.model_dump(exclude_unset=True))
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found.")
    return quiz


@router.delete("/quizzes/{quiz_id}")
async def delete_quiz(
    quiz_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(require_faculty)
):
    """
    Delete a quiz and all of its submissions
    """
    quizzes_deleted, submissions_deleted = await database.delete_quiz(db, quiz_id)
    if not quizzes_deleted:
        raise HTTPException(status_code=404, detail="Quiz not found.")
    return {
        "deletedCount": quizzes_deleted,
        "submissionsDeleted": submissions_deleted
    }


@router.put("/quizzes/{quiz_id}/publish")
async def update_quiz_publish_status(
    quiz_id: str,
    data: QuizPublish,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(require_faculty)
):
    if not await database.update_quiz_publish_status(db, quiz_id, data.isPublished):
        raise HTTPException(status_code=404, detail="Quiz not found.")
    return await get_quiz_or_404(db, quiz_id)

# ==================== QUIZ RETRIEVAL ====================

@router.get("/courses/{course_id}/quizzes")
async def find_quizzes_for_course(
    course_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(get_current_user)
):
    """
    List quizzes for a course

    Students only see published quizzes, each with their lastScore.
    """
    return await list_quizzes_for_user(db, course_id, user)


@router.get("/quizzes/{quiz_id}")
async def find_quiz_by_id(
    quiz_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(get_current_user)
):
    quiz = await get_quiz_or_404(db, quiz_id)
    return await quiz_view_for_user(db, quiz, user)

# ==================== QUESTIONS (FACULTY) ====================

@router.post("/quizzes/{quiz_id}/questions")
async def create_question_for_quiz(
    quiz_id: str,
    data: QuestionCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(require_faculty)
):
    question = await database.create_question(db, quiz_id, data.model_dump())
    if not question:
        raise HTTPException(status_code=404, detail="Quiz not found.")
    return question


@router.put("/quizzes/{quiz_id}/questions/{question_id}")
async def update_question(
    quiz_id: str,
    question_id: str,
    data: QuestionUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(require_faculty)
):
    """
    Update the supplied question fields; returns the quiz so clients see new points
    """
    matched = await database.update_question(db, quiz_id, question_id, data.model_dump(exclude_unset=True))
    if not matched:
        raise HTTPException(status_code=404, detail="Quiz or Question not found.")
    return await get_quiz_or_404(db, quiz_id)


@router.delete("/quizzes/{quiz_id}/questions/{question_id}")
async def delete_question(
    quiz_id: str,
    question_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(require_faculty)
):
    matched = await database.delete_question(db, quiz_id, question_id)
    if not matched:
        raise HTTPException(status_code=404, detail="Quiz or Question not found.")
    return await get_quiz_or_404(db, quiz_id)
