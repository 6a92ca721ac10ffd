"""Scraping quotas: a cooldown after every batch of dates and a daily article cap."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

logger = logging.getLogger(__name__)

# Remaining-quota level at which a warning is logged before each article
LOW_QUOTA_WARNING = 10


class RateLimiter:
    """Tracks processed dates and articles for one scraping run.

    Args:
        batch_size: Dates per batch; a cooldown follows each full batch.
            ``0`` disables cooldowns.
        cooldown_minutes: Length of the pause between batches.
        daily_article_limit: Articles allowed per calendar day. ``0`` means
            unlimited.
        today: Clock used for the daily reset.
    """

    def __init__(
        self,
        batch_size: int,
        cooldown_minutes: float,
        daily_article_limit: int,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.batch_size = batch_size
        self.cooldown_minutes = cooldown_minutes
        self.daily_article_limit = daily_article_limit
        self._today = today
        self._day = today()
        self.processed_dates = 0
        self.articles_today = 0

    def _reset_if_new_day(self) -> None:
        day = self._today()
        if day != self._day:
            logger.info("New day %s: daily article count reset", day.isoformat())
            self._day = day
            self.articles_today = 0

    def cooldown_seconds(self) -> float:
        """Seconds to pause before the next date; ``0.0`` mid-batch."""
        if self.batch_size <= 0 or self.cooldown_minutes <= 0:
            return 0.0
        if self.processed_dates == 0 or self.processed_dates % self.batch_size:
            return 0.0
        return self.cooldown_minutes * 60.0

    def mark_date(self) -> None:
        self.processed_dates += 1

    def remaining(self) -> int | None:
        """Articles still allowed today, or ``None`` when there is no cap."""
        self._reset_if_new_day()
        if self.daily_article_limit <= 0:
            return None
        return max(self.daily_article_limit - self.articles_today, 0)

    def mark_article(self) -> None:
        self._reset_if_new_day()
        self.articles_today += 1
