from sqlalchemy.ext.asyncio import AsyncSession
from app.models.support.activity_models import UserActivity
from app.constants.activity_templates import ACTIVITY_TEMPLATES
from app.constants.activity_codes import ActivityCode


def render_activity(code: ActivityCode, **context) -> str:
    template = ACTIVITY_TEMPLATES.get(code)
    if not template:
        raise ValueError(f"No activity template for code {code}")

    try:
        return template.format(**context)
    except KeyError as e:
        raise ValueError(
            f"Missing activity context key: {e.args[0]} for {code}"
        )


async def emit_activity(
    db: AsyncSession,
    *,
    user_id: int | None,
    username: str,
    code: ActivityCode,
    company_id: int | None = None,
    **context,
):
    db.add(
        UserActivity(
            company_id=company_id,
            user_id=user_id,
            username_snapshot=username,
            message=render_activity(code, **context),
        )
    )


def actor_context(user) -> dict:
    """Template fields describing who performed an activity."""
    return {
        "actor_role": user.role.capitalize(),
        "actor_email": user.username,
    }
