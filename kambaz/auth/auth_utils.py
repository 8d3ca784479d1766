# kambaz/auth/auth_utils.py
from enum import Enum
from typing import Optional

from fastapi import Depends, Header, HTTPException
from jose import JWTError, jwt

from kambaz.config import JWT_ALGORITHM, JWT_SECRET_KEY


class UserRole(str, Enum):
    STUDENT = "STUDENT"
    FACULTY = "FACULTY"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"
    TA = "TA"


FACULTY_ROLES = {UserRole.FACULTY, UserRole.INSTRUCTOR, UserRole.ADMIN}


class UserContext:
    """
    Caller identity as asserted by the token issuer
    """
    def __init__(self, user_id: str, payload: dict):
        self.user_id = user_id
        self.role = _parse_role(payload.get("role"))

    @property
    def is_faculty(self) -> bool:
        return self.role in FACULTY_ROLES

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT


def _parse_role(value) -> Optional[UserRole]:
    if not value:
        return None
    try:
        return UserRole(str(value).upper())
    except ValueError:
        return None


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or Expired Token")


def verify_token(authorization: str = Header(None)) -> dict:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = authorization.split(" ", 1)[1]
    return decode_token(token)


async def get_current_user(payload: dict = Depends(verify_token)) -> UserContext:
    """
    Dependency: resolves the authenticated caller

    Raises:
        401: Token has no subject
    """
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token: missing user_id")
    return UserContext(user_id, payload)


async def require_faculty(user: UserContext = Depends(get_current_user)) -> UserContext:
    """Dependency: caller must hold a faculty, instructor or admin role"""
    if not user.is_faculty:
        raise HTTPException(status_code=403, detail="Forbidden: Faculty privilege required.")
    return user


async def require_student(user: UserContext = Depends(get_current_user)) -> UserContext:
    """Dependency: caller must be a student"""
    if not user.is_student:
        raise HTTPException(status_code=403, detail="Forbidden: Only students can perform this action.")
    return user
