import logging
import os
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from classify.core.config import settings
from classify.core.database import SessionLocal
from classify.services.exam import exam_service
from classify.services.exam_attempt import exam_attempt_service

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


async def auto_submit_expired_attempts():
    db = SessionLocal()
    try:
        finalized = exam_attempt_service.expire_stale_attempts(db)
        if finalized:
            logger.info(f"Auto-submitted {finalized} expired exam attempts")
    except Exception as e:
        db.rollback()
        logger.error(f"Error auto-submitting expired attempts: {e}", exc_info=True)
    finally:
        db.close()


async def purge_deleted_exams():
    db = SessionLocal()
    try:
        exam_service.purge_scheduled_deletions(db)
    except Exception as e:
        db.rollback()
        logger.error(f"Error purging scheduled exam deletions: {e}", exc_info=True)
    finally:
        db.close()


def start_scheduler():
    if os.getenv("TESTING") == "true":
        logger.info("Scheduler disabled in test environment")
        return

    if not scheduler.running:
        scheduler.add_job(
            auto_submit_expired_attempts,
            'interval',
            minutes=settings.ATTEMPT_SWEEP_INTERVAL_MINUTES,
            id='auto_submit_expired_attempts',
            name='Auto-submit Expired Exam Attempts',
            replace_existing=True
        )
        scheduler.add_job(
            purge_deleted_exams,
            'cron',
            hour=1,
            minute=0,
            id='purge_deleted_exams',
            name='Purge Exams Scheduled For Deletion',
            replace_existing=True
        )
        scheduler.start()
        logger.info("Scheduler started with attempt expiry sweep and exam purge jobs")


def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
