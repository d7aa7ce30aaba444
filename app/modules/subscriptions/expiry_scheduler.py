import asyncio
import logging
from app.config import settings
from app.database.supabase_client import get_supabase
from app.modules.subscriptions.service import SubscriptionService

logger = logging.getLogger(__name__)


async def check_and_notify_expiring_subscriptions():
    """Send reminder emails for subscriptions that end in the next few days."""
    try:
        service = SubscriptionService(get_supabase())
        # supabase-py and smtplib are blocking
        result = await asyncio.to_thread(service.send_expiry_reminders)
        if not result.get("count"):
            logger.debug("No expiring subscriptions found")
            return
        logger.info(result["message"])
    except Exception as e:
        logger.error(f"Error in expiry scheduler: {str(e)}")


async def expiry_scheduler_loop():
    """Background task that periodically checks for expiring subscriptions"""
    while True:
        try:
            await check_and_notify_expiring_subscriptions()
        except Exception as e:
            logger.error(f"Error in expiry scheduler loop: {str(e)}")

        await asyncio.sleep(settings.expiry_scheduler_interval_seconds)
