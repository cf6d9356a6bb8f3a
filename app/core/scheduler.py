from apscheduler.schedulers.asyncio import AsyncIOScheduler
from app.core.db import AsyncSessionLocal

from app.services.billing.document_expiry_service import auto_expire_quotes

# Also runs the one-shot delivery jobs queued by DocumentDeliveryQueue
scheduler = AsyncIOScheduler()


@scheduler.scheduled_job("cron", hour=0, minute=5)  # daily at 00:05
async def expire_quotes_job():
    async with AsyncSessionLocal() as db:
        await auto_expire_quotes(db)
