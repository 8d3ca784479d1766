from typing import List
import logging

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from kambaz.auth.auth_utils import UserContext
from kambaz.config import SUBMIT_MAX_RETRIES
from kambaz.quizzes import database
from kambaz.quizzes.attempts import check_can_submit

logger = logging.getLogger(__name__)

HIDDEN_QUESTION_FIELDS = ("correctAnswer", "correctAnswers")

# ==================== SUBMISSION FLOW ====================

async def submit_quiz(db: AsyncIOMotorDatabase, quiz_id: str, student_id: str, answers: List[dict]) -> dict:
    """
    Grade and record a student's attempt

    Server-side validations:
    - Quiz must exist and be published (404)
    - Attempts must remain under the quiz's limit (403)

    The attempt number is read then written. If another request for the same
    student stored that number first, the insert collides on the submission id
    and the whole check is repeated against the new state.
    """
    for _ in range(SUBMIT_MAX_RETRIES):
        quiz = await database.find_quiz_by_id(db, quiz_id)
        if not quiz or not quiz.get("isPublished"):
            raise HTTPException(status_code=404, detail="Quiz not found or not available.")

        last_submission = await database.find_last_submission_for_user(db, quiz_id, student_id)
        attempts_used = last_submission["attemptNumber"] if last_submission else 0

        can_submit, reason = check_can_submit(quiz, attempts_used)
        if not can_submit:
            logger.warning("Rejected submission for quiz %s by %s: %s", quiz_id, student_id, reason)
            raise HTTPException(status_code=403, detail=reason)

        try:
            submission = await database.create_submission(
                db, quiz_id, student_id, answers, attempt_number=attempts_used + 1
            )
        except DuplicateKeyError:
            logger.warning(
                "Attempt %d for quiz %s by %s already stored, retrying",
                attempts_used + 1, quiz_id, student_id
            )
            continue

        if submission is None:
            raise HTTPException(status_code=404, detail="Quiz not found or not available.")

        logger.info(
            "Stored attempt %d for quiz %s by %s (score %s)",
            submission["attemptNumber"], quiz_id, student_id, submission["score"]
        )
        return submission

    raise HTTPException(status_code=409, detail="Another submission is in progress. Please try again.")

# ==================== QUIZ VIEWS ====================

def strip_answers(quiz: dict) -> dict:
    """Copy of the quiz without the answer key on any question"""
    return {
        **quiz,
        "questions": [
            {k: v for k, v in question.items() if k not in HIDDEN_QUESTION_FIELDS}
            for question in quiz.get("questions") or []
        ],
    }


async def quiz_view_for_user(db: AsyncIOMotorDatabase, quiz: dict, user: UserContext) -> dict:
    """
    Faculty see the full quiz. Everyone else only sees published quizzes,
    and students get the answer key stripped plus their last submission.
    """
    if user.is_faculty:
        return quiz

    if not quiz.get("isPublished"):
        raise HTTPException(status_code=403, detail="Forbidden: This quiz is not published.")

    if not user.is_student:
        return strip_answers(quiz)

    student_quiz = strip_answers(quiz)
    student_quiz["lastSubmission"] = await database.find_last_submission_for_user(
        db, quiz["id"], user.user_id
    )
    return student_quiz


async def list_quizzes_for_user(db: AsyncIOMotorDatabase, course_id: str, user: UserContext) -> List[dict]:
    quizzes = await database.find_quizzes_for_course(db, course_id)
    if user.is_faculty:
        return quizzes

    quizzes = [strip_answers(quiz) for quiz in quizzes if quiz.get("isPublished")]
    if not user.is_student:
        return quizzes

    for quiz in quizzes:
        last_submission = await database.find_last_submission_for_user(db, quiz["id"], user.user_id)
        quiz["lastScore"] = last_submission["score"] if last_submission else None
    return quizzes
