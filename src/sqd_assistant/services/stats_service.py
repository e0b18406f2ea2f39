"""
Aggregations behind the stats window and the completed-work report.

Row counts are small, so everything is computed in Python over one
``list_all()`` read instead of per-aggregate SQL.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import ValidationError
from ..models import KNOWN_STATUSES, STATUS_COMPLETED, TodoEntity
from ..repositories import Repository
from ..utils import dates_between, format_date, last_n_days, this_week, timestamp_date
from ..validation import validate_date_range

logger = logging.getLogger(__name__)

TREND_DEFAULT_DAYS = 30
REPORT_RANGES = ("daily", "weekly", "custom")


@dataclass
class Trend:
    dates: List[str] = field(default_factory=list)
    created: List[int] = field(default_factory=list)
    completed: List[int] = field(default_factory=list)


@dataclass
class Stats:
    start: Optional[str]
    end: Optional[str]
    total: int
    status_counts: Dict[str, int]
    broker_counts: Dict[str, int]
    broker_status_counts: Dict[str, Dict[str, int]]
    trend: Trend


@dataclass
class CompletedReport:
    """Completed todos in a date range, grouped by broker (largest group first)."""

    kind: str
    start: date
    end: date
    todos: List[TodoEntity]
    by_broker: List[Tuple[str, List[TodoEntity]]]

    @property
    def broker_count(self) -> int:
        return len(self.by_broker)


def _in_range(timestamp: str, start: date, end: date) -> bool:
    return start <= timestamp_date(timestamp) <= end


class StatsService:
    def __init__(self, repository: Repository, today: Callable[[], date] = date.today) -> None:
        self.repository = repository
        self._today = today

    def stats(self, start: Optional[str] = None, end: Optional[str] = None) -> Stats:
        """
        Status and broker breakdown of todos created within [start, end]
        (all todos without a range), plus a per-day created/completed trend.
        Each broker also gets its own status breakdown, seeded like
        status_counts with the known statuses at zero.
        """
        logger.info("StatsService.stats - start: %s, end: %s", start, end)
        date_range = validate_date_range(start, end)
        todos = self.repository.list_all()

        if date_range is None:
            selected = todos
            trend_range = last_n_days(TREND_DEFAULT_DAYS, self._today())
        else:
            selected = [t for t in todos if _in_range(t["created_at"], *date_range)]
            trend_range = date_range

        status_counts: Dict[str, int] = {s: 0 for s in KNOWN_STATUSES}
        status_counts.update(Counter(t["status"] for t in selected))
        broker_counts = dict(Counter(t["broker"] for t in selected))
        broker_status_counts: Dict[str, Dict[str, int]] = {}
        for todo in selected:
            per_status = broker_status_counts.setdefault(todo["broker"], {s: 0 for s in KNOWN_STATUSES})
            per_status[todo["status"]] = per_status.get(todo["status"], 0) + 1

        return Stats(
            start=start,
            end=end,
            total=len(selected),
            status_counts=status_counts,
            broker_counts=broker_counts,
            broker_status_counts=broker_status_counts,
            trend=self._trend(todos, *trend_range),
        )

    def _trend(self, todos: List[TodoEntity], start: date, end: date) -> Trend:
        created = Counter(timestamp_date(t["created_at"]) for t in todos)
        completed = Counter(
            timestamp_date(t["updated_at"]) for t in todos if t["status"] == STATUS_COMPLETED
        )
        trend = Trend()
        for day in dates_between(start, end):
            trend.dates.append(format_date(day))
            trend.created.append(created.get(day, 0))
            trend.completed.append(completed.get(day, 0))
        return trend

    def report_range(self, kind: str, start: Optional[str], end: Optional[str]) -> Tuple[date, date]:
        if kind == "daily":
            today = self._today()
            return today, today
        if kind == "weekly":
            return this_week(self._today())
        if kind == "custom":
            date_range = validate_date_range(start, end)
            if date_range is None:
                raise ValidationError("custom reports need start and end dates")
            return date_range
        raise ValidationError(f"report range must be one of: {', '.join(REPORT_RANGES)}")

    def completed_report(
        self, kind: str, start: Optional[str] = None, end: Optional[str] = None
    ) -> CompletedReport:
        """Completed todos whose last update falls in the report range."""
        logger.info("StatsService.completed_report - kind: %s", kind)
        range_start, range_end = self.report_range(kind, start, end)

        done = [
            t
            for t in self.repository.list_all()
            if t["status"] == STATUS_COMPLETED and _in_range(t["updated_at"], range_start, range_end)
        ]
        groups: Dict[str, List[TodoEntity]] = {}
        for todo in done:
            groups.setdefault(todo["broker"], []).append(todo)
        # sorted() is stable, so equal-sized brokers keep first-seen order
        by_broker = sorted(groups.items(), key=lambda item: len(item[1]), reverse=True)

        logger.info("Report covers %d todos across %d brokers", len(done), len(by_broker))
        return CompletedReport(kind=kind, start=range_start, end=range_end, todos=done, by_broker=by_broker)
