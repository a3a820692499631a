import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from voicebridge.db import get_db
from voicebridge.errors import AppError, UnknownError
from voicebridge.schemas import LoginReq, SignupReq, VerifyEmailReq
from voicebridge.services.auth_service import authenticate, register_user, verify_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(req: SignupReq, db: AsyncSession = Depends(get_db)):
    try:
        user = await register_user(
            db, req.email, req.password, req.name,
            disability_type=req.disability_type,
            severity=req.severity,
        )
    except AppError:
        raise
    except Exception:
        logger.exception("Signup failed")
        raise UnknownError("An error occurred during registration")

    return {
        "success": True,
        "message": "Account created successfully. Please verify your email.",
        "data": user,
    }


@router.post("/login")
async def login(req: LoginReq, db: AsyncSession = Depends(get_db)):
    try:
        user = await authenticate(db, req.email, req.password)
    except AppError:
        raise
    except Exception:
        logger.exception("Login failed")
        raise UnknownError("An error occurred during login")

    return {"success": True, "message": "Login successful", "data": user}


@router.post("/verify-email")
async def verify(req: VerifyEmailReq, db: AsyncSession = Depends(get_db)):
    try:
        user = await verify_email(db, req.email, req.code)
    except AppError:
        raise
    except Exception:
        logger.exception("Email verification failed")
        raise UnknownError("An error occurred during verification")

    return {"success": True, "message": "Email verified successfully", "data": user}
