"""
Daily Horoscope Job

Calendar-driven broadcast of the daily horoscope to every workspace member.
Each firing walks the roster sequentially and skips users already handled
today, so a second firing on the same day sends nothing new.
"""

import time
import logging
from typing import Dict, Any

from apscheduler.triggers.cron import CronTrigger

from runtime.settings import today_string

logger = logging.getLogger(__name__)

JOB_ID = "daily_horoscope"


class DailyHoroscopeJob:
    """Scheduled job sending the daily horoscope to the whole roster"""

    def __init__(self, user_service, delivery_handler, sent_marker, settings):
        self.user_service = user_service
        self.delivery_handler = delivery_handler
        self.sent_marker = sent_marker
        self.settings = settings

    def build_trigger(self) -> CronTrigger:
        return CronTrigger(
            hour=self.settings.hour,
            minute=self.settings.minute,
            day_of_week=self.settings.days_of_week,
            timezone=self.settings.timezone,
        )

    def schedule(self, scheduler):
        """Register the job on an APScheduler scheduler (idempotent)"""
        job = scheduler.add_job(
            self.run,
            trigger=self.build_trigger(),
            id=JOB_ID,
            name="Daily horoscope broadcast",
            replace_existing=True,
        )
        logger.info(f"DAILY-JOB: scheduled at {self.settings.hour:02d}:{self.settings.minute:02d} "
                    f"({self.settings.days_of_week}, {self.settings.timezone})")
        return job

    async def run(self) -> Dict[str, Any]:
        """
        One firing of the daily broadcast

        Users are marked as handled after delivery returns, including users
        that were skipped for having no birthdate or being excluded. The
        first error aborts the rest of the firing; it is logged, not raised.
        """
        t_start = time.time()
        today = today_string(self.settings.timezone)
        summary = {"date": today, "status": "running", "delivered": 0, "skipped": 0, "error": None}

        try:
            self.sent_marker.roll_over(today)

            users = await self.user_service.get_all_users()

            for user in users:
                user_id = user["id"]
                if self.sent_marker.is_sent(user_id, today):
                    summary["skipped"] += 1
                    continue

                await self.delivery_handler.send_daily_horoscope_to_user(user_id)
                self.sent_marker.mark_sent(user_id, today)
                summary["delivered"] += 1

            summary["status"] = "completed"
            logger.info(f"DAILY-JOB: broadcast for {today} completed - {summary['delivered']} handled, "
                        f"{summary['skipped']} already done, {int((time.time() - t_start) * 1000)} ms")

        except Exception as e:
            summary["status"] = "failed"
            summary["error"] = str(e)
            logger.error(f"DAILY-JOB: broadcast for {today} failed after {summary['delivered']} users: {e}")

        return summary
