from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.auth.auth_schemas import LoginRequest, LoginOut
from app.services.auth.auth_service import login_user
from app.utils.logger import get_logger
from app.utils.response import success_response, APIResponse

logger = get_logger("auth.router")

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=APIResponse[LoginOut])
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Login attempt", extra={"email": payload.email})

    tokens = await login_user(db, payload.email, payload.password)

    return success_response("Login successful", tokens)
