from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from kambaz.auth.auth_utils import UserContext, require_student
from kambaz.database import get_db
from kambaz.quizzes import database
from kambaz.quizzes.models import SubmissionCreate, SubmissionResponse
from kambaz.quizzes.quiz_service import submit_quiz

router = APIRouter(tags=["Quiz Submissions"])


@router.post("/quizzes/{quiz_id}/submit", response_model=SubmissionResponse)
async def submit(
    quiz_id: str,
    data: SubmissionCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    student: UserContext = Depends(require_student)
):
    """
    Submit answers for grading

    Rejected with 403 once the quiz's attempt limit is reached.
    """
    answers = [answer.model_dump() for answer in data.answers]
    return await submit_quiz(db, quiz_id, student.user_id, answers)


@router.get("/quizzes/{quiz_id}/submissions/last", response_model=SubmissionResponse)
async def find_last_submission(
    quiz_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    student: UserContext = Depends(require_student)
):
    submission = await database.find_last_submission_for_user(db, quiz_id, student.user_id)
    if not submission:
        raise HTTPException(status_code=404, detail="No submission found for this quiz.")
    return submission
