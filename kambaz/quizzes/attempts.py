from typing import Optional, Tuple


def attempt_limit(quiz: dict) -> int:
    """
    Maximum number of submissions a student may make for this quiz

    Single-attempt quizzes allow 1; otherwise howManyAttempts (at least 1).
    """
    if not quiz.get("multipleAttempts"):
        return 1

    how_many = quiz.get("howManyAttempts")
    if isinstance(how_many, bool) or not isinstance(how_many, int) or how_many < 1:
        return 1
    return how_many


def check_can_submit(quiz: dict, attempts_used: int) -> Tuple[bool, Optional[str]]:
    """
    Validates if a student can submit this quiz

    Returns:
        tuple: (can_submit: bool, reason: str or None)
    """
    limit = attempt_limit(quiz)
    if attempts_used >= limit:
        return False, f"You have exhausted your attempts. Max attempts: {limit}."

    return True, None


def submission_id(quiz_id: str, student_id: str, attempt_number: int) -> str:
    # Deterministic so two writers racing for the same attempt collide on insert
    return f"{quiz_id}-{student_id}-{attempt_number}"
