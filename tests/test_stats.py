from datetime import date

import pytest

from sqd_assistant.errors import DatabaseError, ValidationError
from sqd_assistant.reports import render_markdown, render_text
from sqd_assistant.services.stats_service import StatsService

TODAY = date(2025, 3, 12)  # a Wednesday


@pytest.fixture()
def seeded(repository):
    """
    id  title  status     broker  created              updated
    1   A1     completed  Huatai  2025-03-10 09:00:00  2025-03-11 10:00:00
    2   A2     completed  Huatai  2025-03-01 09:00:00  2025-03-12 10:00:00
    3   B1     completed  Citic   2025-03-11 09:00:00  2025-03-12 11:00:00
    4   C1     pending    Citic   2025-03-12 09:00:00  2025-03-12 09:00:00
    5   D1     blocked    Guotai  2025-02-01 09:00:00  2025-02-01 09:00:00
    """
    rows = [
        ("A1", "Huatai", "2025-03-10 09:00:00", "2025-03-11 10:00:00"),
        ("A2", "Huatai", "2025-03-01 09:00:00", "2025-03-12 10:00:00"),
        ("B1", "Citic", "2025-03-11 09:00:00", "2025-03-12 11:00:00"),
    ]
    for title, broker, created, completed in rows:
        todo = repository.create(title, "pending", broker, created)
        repository.update(todo["id"], {"status": "completed"}, completed)
    repository.create("C1", "pending", "Citic", "2025-03-12 09:00:00")
    repository.create("D1", "blocked", "Guotai", "2025-02-01 09:00:00")
    return repository


@pytest.fixture()
def stats_service(seeded):
    return StatsService(seeded, today=lambda: TODAY)


class TestStats:
    def test_all_todos(self, stats_service):
        stats = stats_service.stats()
        assert stats.total == 5
        assert stats.status_counts == {"pending": 1, "in_progress": 0, "completed": 3, "blocked": 1}
        assert stats.broker_counts == {"Huatai": 2, "Citic": 2, "Guotai": 1}

    def test_status_breakdown_per_broker(self, stats_service):
        assert stats_service.stats().broker_status_counts == {
            "Huatai": {"pending": 0, "in_progress": 0, "completed": 2},
            "Citic": {"pending": 1, "in_progress": 0, "completed": 1},
            "Guotai": {"pending": 0, "in_progress": 0, "completed": 0, "blocked": 1},
        }

    def test_status_breakdown_follows_range(self, stats_service):
        per_broker = stats_service.stats("2025-03-12", "2025-03-12").broker_status_counts
        assert per_broker == {"Citic": {"pending": 1, "in_progress": 0, "completed": 0}}

    def test_default_trend_is_last_30_days(self, stats_service):
        trend = stats_service.stats().trend
        assert len(trend.dates) == 30
        assert trend.dates[0] == "2025-02-11"
        assert trend.dates[-1] == "2025-03-12"
        assert trend.created[-1] == 1
        assert trend.completed[-1] == 2
        assert sum(trend.created) == 4  # D1 is older than the window

    def test_range_filters_by_creation_date(self, stats_service):
        stats = stats_service.stats("2025-03-10", "2025-03-12")
        assert stats.total == 3
        assert stats.status_counts == {"pending": 1, "in_progress": 0, "completed": 2}
        assert stats.broker_counts == {"Huatai": 1, "Citic": 2}
        assert stats.trend.dates == ["2025-03-10", "2025-03-11", "2025-03-12"]
        assert stats.trend.created == [1, 1, 1]
        assert stats.trend.completed == [0, 1, 2]

    def test_bad_range(self, stats_service):
        with pytest.raises(ValidationError):
            stats_service.stats("2025-03-12", "2025-03-01")

    def test_unreadable_timestamp_is_a_database_error(self, seeded):
        seeded.create("Imported", "pending", "Citic", "12/03/2025 09:00")
        service = StatsService(seeded, today=lambda: TODAY)
        with pytest.raises(DatabaseError) as err:
            service.stats()
        assert str(err.value) == "Database error: unreadable timestamp '12/03/2025 09:00'"


class TestCompletedReport:
    def test_weekly(self, stats_service):
        report = stats_service.completed_report("weekly")
        assert (report.start, report.end) == (date(2025, 3, 10), date(2025, 3, 16))
        assert [b for b, _ in report.by_broker] == ["Huatai", "Citic"]
        assert [t["title"] for t in report.by_broker[0][1]] == ["A1", "A2"]
        assert len(report.todos) == 3

    def test_daily(self, stats_service):
        report = stats_service.completed_report("daily")
        assert sorted(t["title"] for t in report.todos) == ["A2", "B1"]

    def test_custom(self, stats_service):
        report = stats_service.completed_report("custom", "2025-03-11", "2025-03-11")
        assert [t["title"] for t in report.todos] == ["A1"]

    def test_custom_requires_dates(self, stats_service):
        with pytest.raises(ValidationError):
            stats_service.completed_report("custom")

    def test_unknown_range(self, stats_service):
        with pytest.raises(ValidationError):
            stats_service.completed_report("monthly")


class TestRendering:
    def test_markdown(self, stats_service):
        md = render_markdown(stats_service.completed_report("weekly"), "2025-03-12 18:00:00")
        assert md.startswith("# Weekly Report\n")
        assert "**Date range**: 2025-03-10 to 2025-03-16" in md
        assert "- Completed tasks: **3**" in md
        assert "- Brokers involved: **2**" in md
        assert "### Huatai" in md
        assert "- Share of work: **66.7%**" in md
        assert "- Share of work: **33.3%**" in md
        assert "1. ✅ A1\n2. ✅ A2" in md
        assert md.index("### Huatai") < md.index("### Citic")
        assert "*Generated at 2025-03-12 18:00:00*" in md

    def test_text(self, stats_service):
        txt = render_text(stats_service.completed_report("daily"), "2025-03-12 18:00:00")
        assert txt.startswith("Daily Report\nDate range: 2025-03-12 to 2025-03-12\n")
        assert "[Huatai]" in txt
        assert "  Share of work: 50.0%" in txt
        assert "    1. B1" in txt
        assert "Generated at: 2025-03-12 18:00:00" in txt

    def test_empty_report(self, repository):
        report = StatsService(repository, today=lambda: TODAY).completed_report("daily")
        md = render_markdown(report, "2025-03-12 18:00:00")
        assert "- Completed tasks: **0**" in md
        assert "###" not in md
