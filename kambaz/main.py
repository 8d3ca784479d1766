"""
Kambaz Backend - Main Application
Quizzes, questions and graded submissions on MongoDB
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from kambaz.config import ALLOWED_ORIGINS, ENVIRONMENT
from kambaz.database import get_db_instance
from kambaz.quizzes.database import create_quiz_indexes, purge_orphaned_submissions
from kambaz.quizzes.quiz_router import router as quiz_router
from kambaz.quizzes.submission_router import router as submission_router
from kambaz.system.health_router import router as health_router
from kambaz.utils.logging_config import configure_logging

logger = configure_logging()

app = FastAPI(title="Kambaz API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    db = get_db_instance()
    await create_quiz_indexes(db)
    await purge_orphaned_submissions(db)
    logger.info("Kambaz backend started (%s)", ENVIRONMENT)


@app.exception_handler(PyMongoError)
async def storage_error_handler(request: Request, exc: PyMongoError):
    logging.getLogger("kambaz.storage").error("Storage error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal Server Error", "error": str(exc)}
    )


# ==================== ROUTER REGISTRATION ====================
app.include_router(health_router)
app.include_router(quiz_router, prefix="/api")
app.include_router(submission_router, prefix="/api")
# ============================================================
