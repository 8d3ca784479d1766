from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from kambaz.config import ENVIRONMENT
from kambaz.database import get_db

router = APIRouter(tags=["System"])


@router.get("/")
async def root():
    return {
        "message": "Server is running",
        "environment": ENVIRONMENT,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/health")
async def health(db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Liveness plus a database ping
    """
    record = {
        "timestamp": datetime.utcnow().isoformat(),
        "status": {"api": "UP"},
    }

    try:
        await db.command("ping")
        record["status"]["database"] = "UP"
    except PyMongoError:
        record["status"]["database"] = "DOWN"
        return JSONResponse(status_code=503, content=record)

    return record
