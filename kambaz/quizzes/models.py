from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Union
from datetime import datetime
from enum import Enum

Number = Union[int, float]
AnswerValue = Union[str, bool, int, float]

# ==================== ENUMS ====================

class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    FILL_IN_THE_BLANK = "FILL_IN_THE_BLANK"

class QuizType(str, Enum):
    GRADED_QUIZ = "GRADED_QUIZ"
    PRACTICE_QUIZ = "PRACTICE_QUIZ"
    GRADED_SURVEY = "GRADED_SURVEY"
    UNGRADED_SURVEY = "UNGRADED_SURVEY"

# ==================== QUIZ MODELS ====================
# points and questions are derived/owned fields and never accepted here

class QuizCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = None
    description: Optional[str] = None
    quizType: QuizType = QuizType.GRADED_QUIZ
    isPublished: bool = False
    multipleAttempts: bool = False
    howManyAttempts: int = Field(1, ge=1)
    timeLimit: Optional[int] = Field(None, ge=0)  # minutes
    shuffleAnswers: bool = True
    accessCode: Optional[str] = None
    dueDate: Optional[datetime] = None
    availableDate: Optional[datetime] = None
    untilDate: Optional[datetime] = None

class QuizUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = None
    description: Optional[str] = None
    quizType: Optional[QuizType] = None
    multipleAttempts: Optional[bool] = None
    howManyAttempts: Optional[int] = Field(None, ge=1)
    timeLimit: Optional[int] = Field(None, ge=0)
    shuffleAnswers: Optional[bool] = None
    accessCode: Optional[str] = None
    dueDate: Optional[datetime] = None
    availableDate: Optional[datetime] = None
    untilDate: Optional[datetime] = None

class QuizPublish(BaseModel):
    isPublished: bool

# ==================== QUESTION MODELS ====================

class QuestionCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    questionType: QuestionType = QuestionType.MULTIPLE_CHOICE
    title: Optional[str] = None
    question: Optional[str] = None
    points: Optional[Number] = Field(None, ge=0)  # store defaults a missing value to 10
    choices: List[str] = []
    correctAnswer: Optional[AnswerValue] = None
    correctAnswers: Optional[List[str]] = None

class QuestionUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    questionType: Optional[QuestionType] = None
    title: Optional[str] = None
    question: Optional[str] = None
    points: Optional[Number] = Field(None, ge=0)
    choices: Optional[List[str]] = None
    correctAnswer: Optional[AnswerValue] = None
    correctAnswers: Optional[List[str]] = None

# ==================== SUBMISSION MODELS ====================

class SubmissionAnswer(BaseModel):
    questionId: str
    studentAnswer: Optional[AnswerValue] = None

class SubmissionCreate(BaseModel):
    answers: List[SubmissionAnswer] = []

class GradedAnswer(BaseModel):
    questionId: str
    studentAnswer: Optional[AnswerValue] = None
    isCorrect: bool

class SubmissionResponse(BaseModel):
    id: str
    quiz: str
    student: str
    attemptNumber: int
    score: Number
    submitted: bool = True
    submittedAt: Optional[datetime] = None
    answers: List[GradedAnswer]
