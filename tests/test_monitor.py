"""
Tests for the batch quality monitor.
"""

import asyncio
from datetime import datetime, timedelta

import pytest

from content_quality.core.improvement.improver import ContentImprover
from content_quality.core.models.improvement import ImproveOptions
from content_quality.core.models.monitor import QualityRecord, QualityStats
from content_quality.core.monitoring.monitor import QualityMonitor


BODY = ' '.join(["apartment", "balcony", "kitchen", "garden", "parking", "elevator", "heating", "terrace"])


def record(item_id, score, **extra):
    return QualityRecord(id=item_id, title=f"Item {item_id}", quality_score=score, **extra)


def test_assess_batch_keeps_order():
    """Test one record per input, in order, with a score."""
    monitor = QualityMonitor()
    records = [
        {"id": 1, "title": "First flat", "slug": "first", "content": "<p>The flat is bright.</p>"},
        {"id": "2", "title": "Second flat", "content": "<p>In conclusion, a dream home.</p>", "type": "listing"},
    ]

    results = monitor.assess_batch(records)

    assert [r.id for r in results] == ["1", "2"]
    assert results[1].type == "listing"
    assert all(0 <= r.quality_score <= 100 for r in results)
    assert all(r.error is None for r in results)


def test_assess_record_failure_becomes_zero_score():
    """Test a failing assessment yields a zero-score record with the error."""
    monitor = QualityMonitor()

    result = monitor.assess_record({"id": "9", "title": "Broken", "content": "<p>x</p>", "meta": 123})

    assert result.quality_score == 0
    assert result.error


def test_assess_batch_checks_duplicates_within_batch():
    """Test the rest of the batch serves as corpus when enabled."""
    records = [
        {"id": "a", "title": "A", "content": f"<p>{BODY}</p>"},
        {"id": "b", "title": "B", "content": f"<p>{BODY}</p>"},
    ]

    plain = QualityMonitor().assess_batch(records)
    checked = QualityMonitor(check_duplicates=True).assess_batch(records)

    assert checked[0].quality_score < plain[0].quality_score
    assert "uniqueness" in {issue.type for issue in checked[0].quality_issues}


def test_to_storage():
    """Test the write-back payload."""
    payload = record("1", 80).to_storage()
    assert set(payload) == {"quality_score", "quality_issues", "updated_at"}
    assert payload["quality_score"] == 80


def test_compute_stats():
    """Test the score distribution and the average over non-zero scores."""
    monitor = QualityMonitor(pass_score=70)
    records = [record("1", 90), record("2", 60), record("3", 40), record("4", 0)]

    stats = monitor.compute_stats(records)

    assert stats.total == 4
    assert stats.high_quality == 1
    assert stats.medium_quality == 1
    assert stats.low_quality == 2
    assert stats.average_score == pytest.approx(63.3)
    assert stats.needs_review == 3


def test_compute_stats_empty():
    """Test an empty batch."""
    stats = QualityMonitor().compute_stats([])
    assert stats.total == 0
    assert stats.average_score == 0.0


def test_low_quality_items():
    """Test small batches are listed in full, larger ones filtered, worst first."""
    monitor = QualityMonitor(pass_score=70)

    small = [record("1", 90), record("2", 30), record("3", 60)]
    assert [r.id for r in monitor.low_quality_items(small)] == ["2", "3", "1"]

    large = [record(str(i), 10 * i) for i in range(11)]
    listed = monitor.low_quality_items(large)
    assert [r.quality_score for r in listed] == [0, 10, 20, 30, 40, 50, 60]
    assert len(monitor.low_quality_items(large, limit=3)) == 3


def test_trend():
    """Test the trend direction between the last two snapshots."""
    monitor = QualityMonitor()
    assert monitor.trend().snapshots == 0

    start = datetime(2024, 1, 1)
    monitor.record_snapshot(QualityStats(total=1, average_score=60.0), start)
    assert monitor.trend().snapshots == 1
    assert monitor.trend().previous_average is None

    monitor.record_snapshot(QualityStats(total=1, average_score=70.0), start + timedelta(days=1))
    trend = monitor.trend()
    assert trend.direction == "up"
    assert trend.delta == 10.0

    monitor.record_snapshot(QualityStats(total=1, average_score=70.2), start + timedelta(days=2))
    assert monitor.trend().direction == "flat"


def test_history_is_bounded():
    """Test old snapshots are dropped."""
    monitor = QualityMonitor(history_size=2)
    for average in (10.0, 20.0, 30.0):
        monitor.record_snapshot(QualityStats(total=1, average_score=average))

    assert monitor.trend().previous_average == 20.0
    assert monitor.trend().snapshots == 2


def test_check_alerts():
    """Test item alerts, failure alerts and the batch-average alert."""
    monitor = QualityMonitor(alert_threshold=50)
    records = [record("1", 20), record("2", 45), record("3", 0, error="boom"), record("4", 70)]

    alerts = monitor.check_alerts(records)
    by_item = {alert.item_id: alert for alert in alerts if alert.item_id}

    assert by_item["1"].severity == "high"
    assert by_item["2"].severity == "medium"
    assert "boom" in by_item["3"].message
    assert "4" not in by_item
    assert any(alert.item_id is None for alert in alerts)


def test_build_report_accepts_dicts():
    """Test a report from plain dicts records a snapshot."""
    monitor = QualityMonitor()
    report = monitor.build_report([
        {"id": "1", "quality_score": 80},
        {"id": "2", "quality_score": 40},
    ])

    assert report.stats.total == 2
    assert report.stats.average_score == 60.0
    assert report.low_quality_items[0].id == "2"
    assert report.trend.snapshots == 1


def test_improve_batch_requires_improver():
    """Test improving without an improver is a usage error."""
    with pytest.raises(ValueError):
        asyncio.run(QualityMonitor().improve_batch([{"id": "1", "content": "x"}]))


def test_improve_batch():
    """Test improvement records, including a failing item."""

    class FlakyImprover(ContentImprover):
        async def improve(self, content, title, options=None):
            if title == "fail":
                raise RuntimeError("improver crashed")
            return await super().improve(content, title, options)

    monitor = QualityMonitor(improver=FlakyImprover())
    records = [
        {"id": "1", "title": "A flat", "content": "<p>[image: kitchen] A bright flat near the park.</p>"},
        {"id": "2", "title": "fail", "content": "<p>x</p>"},
    ]

    results = asyncio.run(monitor.improve_batch(records, ImproveOptions(min_score=95)))

    assert [r.id for r in results] == ["1", "2"]
    assert "[image" not in results[0].content
    assert results[0].used_remote_enhancer is False
    assert results[1].content is None
    assert "crashed" in results[1].error


def test_snapshot_default_time_is_utc():
    """Test snapshots taken without a time are stamped in UTC."""
    monitor = QualityMonitor()
    monitor.record_snapshot(QualityStats(total=1, average_score=50.0))

    taken_at = monitor.history[-1][0]
    assert taken_at.tzinfo is not None
    assert taken_at.utcoffset() == timedelta(0)
