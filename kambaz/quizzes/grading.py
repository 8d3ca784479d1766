"""
Quiz grading

Text answers are compared case-insensitively after trimming. Grading never
raises: anything it cannot interpret is graded incorrect.
"""

from typing import Any, Dict, List, Tuple

from kambaz.quizzes.models import QuestionType

SINGLE_ANSWER_TYPES = (QuestionType.MULTIPLE_CHOICE.value, QuestionType.TRUE_FALSE.value)


def normalize_answer(value: Any) -> str:
    """Canonical comparison form: trimmed, lower-cased, '' for None"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip().lower()


def accepted_answers(question: dict) -> List[str]:
    """
    Canonical accepted answers for a question.

    MULTIPLE_CHOICE / TRUE_FALSE read `correctAnswer`, FILL_IN_THE_BLANK reads
    the `correctAnswers` list. Empty entries are dropped, so a question with no
    usable answer data yields [].
    """
    question_type = question.get("questionType")

    if question_type in SINGLE_ANSWER_TYPES:
        raw = [question.get("correctAnswer")]
    elif question_type == QuestionType.FILL_IN_THE_BLANK.value:
        raw = question.get("correctAnswers")
        if not isinstance(raw, (list, tuple)):
            return []
    else:
        return []

    normalized = (normalize_answer(a) for a in raw if a is not None)
    return [a for a in normalized if a]


def question_points(question: dict) -> float:
    # Missing or non-numeric points are worth nothing when scoring
    points = question.get("points")
    if isinstance(points, bool) or not isinstance(points, (int, float)):
        return 0
    return points


def build_answer_key(quiz: dict) -> Dict[str, dict]:
    key = {}
    for question in quiz.get("questions") or []:
        if not isinstance(question, dict) or not isinstance(question.get("id"), (str, int)):
            continue
        key[question["id"]] = {
            "points": question_points(question),
            "correct": accepted_answers(question),
        }
    return key


def grade_answer(answer_key: Dict[str, dict], answer: Any) -> Tuple[float, dict]:
    """Grade one submitted answer, returning (points awarded, graded entry)"""
    if not isinstance(answer, dict):
        return 0, {"questionId": None, "studentAnswer": answer, "isCorrect": False}

    graded = {**answer, "isCorrect": False}
    question_id = answer.get("questionId")
    if not isinstance(question_id, (str, int)):
        return 0, graded
    question_data = answer_key.get(question_id)

    if not question_data or not question_data["correct"]:
        return 0, graded

    student_answer = normalize_answer(answer.get("studentAnswer"))
    if student_answer and student_answer in question_data["correct"]:
        graded["isCorrect"] = True
        return question_data["points"], graded

    return 0, graded


def grade_quiz(quiz: dict, answers: List[dict]) -> Tuple[float, List[dict]]:
    """
    Grade a student's answers against a quiz.

    Returns (score, graded_answers). graded_answers keeps the order and length
    of `answers`; questions the student skipped are not added and score zero.
    No partial credit. A question answered more than once is scored on its
    first correct entry only.
    """
    answer_key = build_answer_key(quiz)

    score = 0
    scored_questions = set()
    graded_answers = []
    for answer in answers or []:
        awarded, graded = grade_answer(answer_key, answer)
        if graded["isCorrect"]:
            if graded["questionId"] in scored_questions:
                awarded = 0
            scored_questions.add(graded["questionId"])
        score += awarded
        graded_answers.append(graded)

    return score, graded_answers
