"""Background task scheduler using APScheduler."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

# Global scheduler instance
_scheduler: AsyncIOScheduler | None = None


async def expire_licenses_job() -> None:
    """Background job to expire licenses past their expiry date."""
    from vendorvault_api.database import async_session_maker
    from vendorvault_api.services.license_service import LicenseService

    logger.info("Checking for expired licenses")

    async with async_session_maker() as session:
        try:
            service = LicenseService(session)
            expired = await service.expire_overdue_licenses()
            await session.commit()
            logger.info(f"License expiry check completed: {expired} expired")
        except Exception as e:
            logger.error(f"License expiry check failed: {e}", exc_info=True)
            await session.rollback()


async def mark_overdue_payments_job() -> None:
    """Background job to recompute the status of unpaid dues."""
    from vendorvault_api.database import async_session_maker
    from vendorvault_api.services.payment_service import PaymentService

    logger.info("Checking for overdue payments")

    async with async_session_maker() as session:
        try:
            service = PaymentService(session)
            updated = await service.mark_overdue_payments()
            await session.commit()
            logger.info(f"Overdue payment check completed: {updated} updated")
        except Exception as e:
            logger.error(f"Overdue payment check failed: {e}", exc_info=True)
            await session.rollback()


async def license_expiry_warning_job() -> None:
    """Background job to warn vendors about licenses expiring soon."""
    from vendorvault_api.database import async_session_maker
    from vendorvault_api.services.license_service import LicenseService

    logger.info("Checking for licenses expiring soon")

    async with async_session_maker() as session:
        try:
            service = LicenseService(session)
            warned = await service.warn_expiring_licenses()
            await session.commit()
            logger.info(f"License expiry warning completed: {warned} vendors notified")
        except Exception as e:
            logger.error(f"License expiry warning failed: {e}", exc_info=True)
            await session.rollback()


async def start_scheduler() -> None:
    """Start the background task scheduler."""
    global _scheduler

    _scheduler = AsyncIOScheduler()

    _scheduler.add_job(
        expire_licenses_job,
        trigger=IntervalTrigger(hours=24),
        id="expire_licenses",
        name="Expire licenses",
        replace_existing=True,
    )

    _scheduler.add_job(
        mark_overdue_payments_job,
        trigger=IntervalTrigger(hours=24),
        id="mark_overdue_payments",
        name="Mark overdue payments",
        replace_existing=True,
    )

    _scheduler.add_job(
        license_expiry_warning_job,
        trigger=IntervalTrigger(hours=24),
        id="license_expiry_warning",
        name="Warn about expiring licenses",
        replace_existing=True,
    )

    _scheduler.start()
    logger.info("Background scheduler started")


async def stop_scheduler() -> None:
    """Stop the background task scheduler."""
    global _scheduler

    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("Background scheduler stopped")
