"""Tests for sprintboard.services.backlog window statistics.

    pytest tests/test_backlog.py -v
"""

from datetime import datetime, timezone

from sprintboard.services.backlog import build_backlog_stats, fetch_backlog_stats

from factories import make_issue

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def test_build_backlog_stats_buckets():
    issues = [
        make_issue(5, created_at="2026-10-16T09:00:00Z", labels=["YakShaver"]),
        make_issue(4, created_at="2026-10-01T09:00:00Z", closed_at="2026-10-02T09:00:00Z", labels=["bug"]),
        make_issue(3, created_at="2026-09-20T09:00:00Z", labels=["yakshaver"]),
        make_issue(2, created_at="2026-08-01T09:00:00Z", closed_at="2026-10-10T09:00:00Z", labels=["YakShaver"]),
        make_issue(1, created_at="2026-08-01T09:00:00Z", closed_at="2026-08-05T09:00:00Z"),
    ]

    stats = build_backlog_stats("octo-org/dashboard", issues, NOW)

    assert stats.since == datetime(2026, 9, 17, 12, 0, tzinfo=timezone.utc)
    assert stats.new_pbis.count == 3
    assert [i.number for i in stats.new_pbis.issues] == [5, 4, 3]
    # Exact label match, and only among new issues
    assert [i.number for i in stats.labeled_pbis.issues] == [5]
    assert [i.number for i in stats.completed_pbis.issues] == [4, 2]
    assert stats.completed_pbis.issues[0].closed_at is not None


def test_build_backlog_stats_window_boundary_is_inclusive():
    issues = [make_issue(1, created_at="2026-09-17T12:00:00Z")]
    stats = build_backlog_stats("o/r", issues, NOW, window_days=30)
    assert stats.new_pbis.count == 1


def test_build_backlog_stats_custom_label_and_window():
    issues = [
        make_issue(2, created_at="2026-10-15T00:00:00Z", labels=["triage"]),
        make_issue(1, created_at="2026-10-01T00:00:00Z", labels=["triage"]),
    ]
    stats = build_backlog_stats("o/r", issues, NOW, window_days=7, label="triage")
    assert stats.label == "triage"
    assert [i.number for i in stats.labeled_pbis.issues] == [2]


def test_fetch_backlog_stats_requests_window(mock_client):
    mock_client.list_issues.return_value = [make_issue(1, created_at="2026-10-16T00:00:00Z")]

    stats = fetch_backlog_stats(mock_client, "octo-org", "dashboard", now=NOW, window_days=30, label="YakShaver")

    kwargs = mock_client.list_issues.call_args.kwargs
    assert kwargs["state"] == "all"
    assert kwargs["sort"] == "created"
    assert kwargs["direction"] == "desc"
    assert kwargs["since"] == "2026-09-17T12:00:00Z"
    assert stats.repository == "octo-org/dashboard"
    assert stats.new_pbis.count == 1
