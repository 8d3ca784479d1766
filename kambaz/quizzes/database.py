from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING
from datetime import datetime
from typing import List, Optional, Tuple
import logging
import uuid

from kambaz.quizzes.attempts import submission_id
from kambaz.quizzes.grading import grade_quiz

logger = logging.getLogger(__name__)

DEFAULT_QUESTION_POINTS = 10
NO_ID = {"_id": 0}

# ==================== POINTS AGGREGATION ====================

async def recalculate_points(db: AsyncIOMotorDatabase, quiz_id: str) -> float:
    """
    Recompute a quiz's total points from its embedded questions.

    Only questions.points is read, and the total is written with a bare $set,
    so nothing else on the document is loaded or touched. A missing quiz is a
    no-op returning 0.
    """
    quiz = await db.quizzes.find_one({"id": quiz_id}, {"_id": 0, "questions.points": 1})
    if not quiz:
        return 0

    total_points = 0
    for question in quiz.get("questions") or []:
        points = question.get("points")
        if isinstance(points, (int, float)) and not isinstance(points, bool):
            total_points += points

    await db.quizzes.update_one({"id": quiz_id}, {"$set": {"points": total_points}})
    return total_points

# ==================== QUIZ CRUD ====================

async def find_quizzes_for_course(db: AsyncIOMotorDatabase, course_id: str) -> List[dict]:
    cursor = db.quizzes.find({"course": course_id}, NO_ID).sort("createdAt", 1)
    return await cursor.to_list(length=None)


async def find_quiz_by_id(db: AsyncIOMotorDatabase, quiz_id: str) -> Optional[dict]:
    """Get quiz by ID"""
    return await db.quizzes.find_one({"id": quiz_id}, NO_ID)


async def create_quiz(db: AsyncIOMotorDatabase, course_id: str, quiz_data: dict) -> dict:
    """
    Create new quiz for a course
    Starts unpublished, empty and worth zero points
    """
    now = datetime.utcnow()
    quiz = {
        "title": "New Quiz",
        "isPublished": False,
        "multipleAttempts": False,
        "howManyAttempts": 1,
        **{k: v for k, v in quiz_data.items() if v is not None},
        "id": str(uuid.uuid4()),
        "course": course_id,
        "points": 0,
        "questions": [],
        "createdAt": now,
        "updatedAt": now,
    }

    await db.quizzes.insert_one(quiz)
    quiz.pop("_id", None)
    logger.info("Created quiz %s for course %s", quiz["id"], course_id)
    return quiz


async def update_quiz(db: AsyncIOMotorDatabase, quiz_id: str, updates: dict) -> Optional[dict]:
    """Apply a field-level update to quiz details; returns the updated quiz"""
    updates = {k: v for k, v in updates.items() if k not in ("id", "course", "points", "questions")}
    updates["updatedAt"] = datetime.utcnow()

    result = await db.quizzes.update_one({"id": quiz_id}, {"$set": updates})
    if result.matched_count == 0:
        return None
    return await find_quiz_by_id(db, quiz_id)


async def update_quiz_publish_status(db: AsyncIOMotorDatabase, quiz_id: str, is_published: bool) -> bool:
    result = await db.quizzes.update_one(
        {"id": quiz_id},
        {"$set": {"isPublished": is_published, "updatedAt": datetime.utcnow()}}
    )
    if result.matched_count:
        logger.info("Quiz %s isPublished=%s", quiz_id, is_published)
    return result.matched_count > 0


async def delete_quiz(db: AsyncIOMotorDatabase, quiz_id: str) -> Tuple[int, int]:
    """
    Delete a quiz and then every submission that references it.

    The two deletes are independent operations. If the second one fails the
    submissions are left orphaned until purge_orphaned_submissions runs.

    Returns:
        (quizzes_deleted, submissions_deleted)
    """
    quiz_result = await db.quizzes.delete_one({"id": quiz_id})
    submission_result = await db.quiz_submissions.delete_many({"quiz": quiz_id})

    logger.info(
        "Deleted quiz %s (%d) and %d submissions",
        quiz_id, quiz_result.deleted_count, submission_result.deleted_count
    )
    return quiz_result.deleted_count, submission_result.deleted_count

# ==================== EMBEDDED QUESTIONS ====================

async def create_question(db: AsyncIOMotorDatabase, quiz_id: str, question_data: dict) -> Optional[dict]:
    """
    Append a question to a quiz
    Missing points default to 10. Returns None when the quiz does not exist.
    """
    question = {
        **question_data,
        "id": str(uuid.uuid4()),
        "points": DEFAULT_QUESTION_POINTS if question_data.get("points") is None else question_data["points"],
    }

    result = await db.quizzes.update_one(
        {"id": quiz_id},
        {"$push": {"questions": question}}
    )
    if result.matched_count == 0:
        return None

    await recalculate_points(db, quiz_id)
    logger.info("Added question %s to quiz %s", question["id"], quiz_id)
    return question


async def update_question(db: AsyncIOMotorDatabase, quiz_id: str, question_id: str, updates: dict) -> int:
    """
    Update only the supplied fields of one embedded question.

    Each field is written through the positional operator so sibling fields
    of the same question are left alone. Returns the matched count.
    """
    set_updates = {
        f"questions.$.{key}": value
        for key, value in updates.items()
        if key != "id"
    }
    if not set_updates:
        return await db.quizzes.count_documents({"id": quiz_id, "questions.id": question_id})

    result = await db.quizzes.update_one(
        {"id": quiz_id, "questions.id": question_id},
        {"$set": set_updates}
    )

    await recalculate_points(db, quiz_id)
    return result.matched_count


async def delete_question(db: AsyncIOMotorDatabase, quiz_id: str, question_id: str) -> int:
    result = await db.quizzes.update_one(
        {"id": quiz_id, "questions.id": question_id},
        {"$pull": {"questions": {"id": question_id}}}
    )

    await recalculate_points(db, quiz_id)
    return result.matched_count

# ==================== SUBMISSIONS ====================

async def find_last_submission_for_user(db: AsyncIOMotorDatabase, quiz_id: str, student_id: str) -> Optional[dict]:
    """Highest-numbered attempt for this quiz/student pair"""
    return await db.quiz_submissions.find_one(
        {"quiz": quiz_id, "student": student_id},
        NO_ID,
        sort=[("attemptNumber", DESCENDING)]
    )


async def next_attempt_number(db: AsyncIOMotorDatabase, quiz_id: str, student_id: str) -> int:
    last_submission = await find_last_submission_for_user(db, quiz_id, student_id)
    return (last_submission["attemptNumber"] if last_submission else 0) + 1


async def create_submission(
    db: AsyncIOMotorDatabase,
    quiz_id: str,
    student_id: str,
    answers: List[dict],
    attempt_number: Optional[int] = None
) -> Optional[dict]:
    """
    Grade and store one attempt.

    Returns None when the quiz does not exist. The submission id is derived
    from (quiz, student, attempt), so a concurrent insert of the same attempt
    raises pymongo's DuplicateKeyError instead of creating a second row.
    """
    quiz = await find_quiz_by_id(db, quiz_id)
    if not quiz:
        return None

    if attempt_number is None:
        attempt_number = await next_attempt_number(db, quiz_id, student_id)

    score, graded_answers = grade_quiz(quiz, answers)

    submission = {
        "id": submission_id(quiz_id, student_id, attempt_number),
        "quiz": quiz_id,
        "student": student_id,
        "attemptNumber": attempt_number,
        "score": score,
        "submitted": True,
        "submittedAt": datetime.utcnow(),
        "answers": graded_answers,
    }

    await db.quiz_submissions.insert_one(submission)
    submission.pop("_id", None)
    return submission


async def purge_orphaned_submissions(db: AsyncIOMotorDatabase) -> int:
    """
    Delete submissions whose quiz no longer exists.
    Safe to run repeatedly; cleans up after a partially failed delete_quiz.
    """
    referenced = await db.quiz_submissions.distinct("quiz")
    if not referenced:
        return 0

    existing = await db.quizzes.distinct("id", {"id": {"$in": referenced}})
    existing = set(existing)
    orphaned = [quiz_id for quiz_id in referenced if quiz_id not in existing]
    if not orphaned:
        return 0

    result = await db.quiz_submissions.delete_many({"quiz": {"$in": orphaned}})
    logger.warning("Purged %d orphaned submissions for %d deleted quizzes", result.deleted_count, len(orphaned))
    return result.deleted_count

# ==================== INDEXES ====================

async def create_quiz_indexes(db: AsyncIOMotorDatabase):
    """Create MongoDB indexes for quizzes and submissions"""
    await db.quizzes.create_index("id", unique=True)
    await db.quizzes.create_index("course")

    await db.quiz_submissions.create_index("id", unique=True)
    await db.quiz_submissions.create_index([("quiz", 1), ("student", 1), ("attemptNumber", -1)])

    logger.info("Quiz indexes created")
