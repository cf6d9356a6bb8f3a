from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.models.users.user_models import User
from app.core.security import verify_password, create_access_token
from app.core.config import ACCESS_TOKEN_EXPIRE_MINUTES
from app.schemas.auth.auth_schemas import LoginOut, LoginUserOut, TokenOut
from app.utils.activity_helpers import emit_activity, actor_context
from app.constants.activity_codes import ActivityCode
from app.utils.logger import get_logger

logger = get_logger("auth.service")


# =====================================================
# LOGIN
# =====================================================
async def login_user(db: AsyncSession, email: str, password: str) -> LoginOut:
    logger.info("Authenticating user", extra={"email": email})

    result = await db.execute(
        select(User).where(User.username == email)
    )
    user = result.scalars().first()

    if not user or not verify_password(password, user.password_hash):
        logger.warning("Invalid credentials", extra={"email": email})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    if not user.is_active:
        logger.warning("Inactive user login blocked", extra={"email": email})
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    user.last_login = datetime.now(timezone.utc)

    access_token = create_access_token(
        subject=user.username,
        token_version=user.token_version,
        company_id=user.company_id,
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.username,
        company_id=user.company_id,
        code=ActivityCode.LOGIN,
        **actor_context(user),
    )

    await db.commit()

    logger.info("Login successful", extra={"user_id": user.id})

    return LoginOut(
        auth=TokenOut(access_token=access_token),
        user=LoginUserOut(
            id=user.id,
            username=user.username,
            role=user.role,
            company_id=user.company_id,
        ),
    )
