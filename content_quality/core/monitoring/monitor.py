"""
Batch quality monitoring.

This module runs the aggregator and the improver over batches of
stored items and turns the results into write-back records,
statistics, alerts and a score trend. It never touches storage:
callers load the records and persist what it returns.
"""

import asyncio
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Optional, Iterable, List, Dict, Any, Union

from ..models.improvement import ImproveOptions
from ..models.monitor import (
    ImprovementRecord,
    MonitorReport,
    QualityAlert,
    QualityRecord,
    QualityStats,
    QualityTrend
)
from ..models.quality import Severity
from ..scoring.aggregator import assess_quality


logger = logging.getLogger(__name__)

HIGH_QUALITY_SCORE = 70
MEDIUM_QUALITY_SCORE = 50
CRITICAL_SCORE = 30
SMALL_BATCH = 10
TREND_TOLERANCE = 0.5

Scored = Union[QualityRecord, Dict[str, Any]]


def _score_of(record: Scored) -> int:
    if isinstance(record, QualityRecord):
        return record.quality_score
    return int(record.get('quality_score') or 0)


def _id_of(record: Scored) -> str:
    if isinstance(record, QualityRecord):
        return record.id
    return str(record.get('id', ''))


class QualityMonitor:
    """
    Batch driver over the quality pipeline.

    Score history is kept per instance; nothing is shared between
    monitors.
    """

    def __init__(
        self,
        improver=None,
        alert_threshold: int = 50,
        pass_score: int = HIGH_QUALITY_SCORE,
        delay_between_items: float = 0.0,
        history_size: int = 30,
        check_duplicates: bool = False,
        low_quality_limit: int = 100
    ):
        """
        Initialize the monitor.

        Args:
            improver: ContentImprover used by improve_batch
            alert_threshold: Score below which an alert is raised
            pass_score: Score below which an item needs review
            delay_between_items: Seconds to wait between remote improvement calls
            history_size: Number of average-score snapshots to keep
            check_duplicates: Compare each item against the rest of the batch
            low_quality_limit: Maximum items listed in a report
        """
        self.improver = improver
        self.alert_threshold = alert_threshold
        self.pass_score = pass_score
        self.delay_between_items = delay_between_items
        self.check_duplicates = check_duplicates
        self.low_quality_limit = low_quality_limit
        self.history = deque(maxlen=history_size)

    def assess_record(self, record: Dict[str, Any], corpus: Optional[Iterable] = None) -> QualityRecord:
        """Score one stored item; failures become a zero-score record."""
        item_id = str(record.get('id', ''))
        base = {
            'id': item_id,
            'title': record.get('title') or '',
            'slug': record.get('slug') or '',
            'type': record.get('type') or 'article',
        }

        try:
            score = assess_quality(
                record.get('content') or '',
                record.get('title') or '',
                meta=record.get('meta'),
                corpus=corpus
            )
        except Exception as e:
            logger.error(f"Quality assessment failed for item {item_id}: {str(e)}")
            return QualityRecord(**base, quality_score=0, error=str(e))

        return QualityRecord(**base, quality_score=score.overall, quality_issues=score.issues)

    def assess_batch(
        self,
        records: List[Dict[str, Any]],
        corpus: Optional[List[Dict[str, Any]]] = None
    ) -> List[QualityRecord]:
        """
        Score every record.

        Args:
            records: Items shaped {id, title, slug, content, ...}
            corpus: Items to check uniqueness against; when omitted and
                check_duplicates is set, the rest of the batch is used

        Returns:
            One QualityRecord per input record, in input order
        """
        results = []

        for index, record in enumerate(records):
            item_corpus = corpus
            if item_corpus is None and self.check_duplicates:
                item_corpus = [
                    {k: other.get(k) for k in ('id', 'title', 'slug', 'content')}
                    for i, other in enumerate(records) if i != index
                ]
            results.append(self.assess_record(record, item_corpus))

        failed = sum(1 for r in results if r.error)
        logger.info(f"Assessed {len(results)} items ({failed} failed)")
        return results

    async def improve_batch(
        self,
        records: List[Dict[str, Any]],
        options: Optional[ImproveOptions] = None
    ) -> List[ImprovementRecord]:
        """
        Improve every record in order, pacing remote calls.

        Args:
            records: Items shaped {id, title, slug, content, ...}
            options: Improvement options shared by all items

        Returns:
            One ImprovementRecord per input record
        """
        if self.improver is None:
            raise ValueError("QualityMonitor needs an improver for improve_batch")

        results = []
        pace = self.delay_between_items > 0 and getattr(self.improver, 'enhancer', None) is not None

        for index, record in enumerate(records):
            if pace and index > 0:
                await asyncio.sleep(self.delay_between_items)

            item_id = str(record.get('id', ''))
            base = {'id': item_id, 'title': record.get('title') or '', 'slug': record.get('slug') or ''}

            try:
                improved = await self.improver.improve(
                    record.get('content') or '',
                    record.get('title') or '',
                    options
                )
            except Exception as e:
                logger.error(f"Improvement failed for item {item_id}: {str(e)}")
                results.append(ImprovementRecord(**base, error=str(e)))
                continue

            results.append(ImprovementRecord(
                **base,
                content=improved.content,
                original_score=improved.original_score.overall,
                improved_score=improved.improved_score.overall,
                improvements=improved.improvements,
                used_remote_enhancer=improved.used_remote_enhancer
            ))

        improved_count = sum(1 for r in results if r.improved_score > r.original_score)
        logger.info(f"Improved {improved_count} of {len(results)} items")
        return results

    def compute_stats(self, records: List[Scored]) -> QualityStats:
        """Score distribution over records."""
        scores = [_score_of(r) for r in records]
        scored = [s for s in scores if s > 0]

        return QualityStats(
            total=len(scores),
            high_quality=sum(1 for s in scores if s >= HIGH_QUALITY_SCORE),
            medium_quality=sum(1 for s in scores if MEDIUM_QUALITY_SCORE <= s < HIGH_QUALITY_SCORE),
            low_quality=sum(1 for s in scores if s < MEDIUM_QUALITY_SCORE),
            average_score=round(sum(scored) / len(scored), 1) if scored else 0.0,
            needs_review=sum(1 for s in scores if s < self.pass_score)
        )

    def low_quality_items(self, records: List[Scored], limit: Optional[int] = None) -> List[Scored]:
        """
        Items that need attention, worst first.

        Small batches (10 items or fewer) are listed in full.
        """
        limit = self.low_quality_limit if limit is None else limit
        if len(records) <= SMALL_BATCH:
            selected = list(records)
        else:
            selected = [r for r in records if _score_of(r) < self.pass_score]

        return sorted(selected, key=_score_of)[:limit]

    def record_snapshot(self, stats: QualityStats, taken_at: Optional[datetime] = None):
        """Remember the batch average for trend reporting."""
        self.history.append((taken_at or datetime.now(timezone.utc), stats.average_score))

    def trend(self) -> QualityTrend:
        """Average-score change between the last two snapshots."""
        if not self.history:
            return QualityTrend()

        current = self.history[-1][1]
        if len(self.history) < 2:
            return QualityTrend(current_average=current, snapshots=1)

        previous = self.history[-2][1]
        delta = round(current - previous, 1)
        if delta > TREND_TOLERANCE:
            direction = "up"
        elif delta < -TREND_TOLERANCE:
            direction = "down"
        else:
            direction = "flat"

        return QualityTrend(
            current_average=current,
            previous_average=previous,
            delta=delta,
            direction=direction,
            snapshots=len(self.history)
        )

    def check_alerts(self, records: List[Scored], stats: Optional[QualityStats] = None) -> List[QualityAlert]:
        """Alerts for low-scoring items, failed assessments and a low batch average."""
        alerts = []

        for record in records:
            score = _score_of(record)
            error = record.error if isinstance(record, QualityRecord) else record.get('error')
            if error:
                alerts.append(QualityAlert(
                    severity=Severity.MEDIUM,
                    message=f"Quality assessment failed: {error}",
                    item_id=_id_of(record),
                    score=score
                ))
            elif score < self.alert_threshold:
                alerts.append(QualityAlert(
                    severity=Severity.HIGH if score < CRITICAL_SCORE else Severity.MEDIUM,
                    message=f"Quality score {score} is below {self.alert_threshold}",
                    item_id=_id_of(record),
                    score=score
                ))

        stats = stats or self.compute_stats(records)
        if stats.total and stats.average_score < self.alert_threshold:
            alerts.append(QualityAlert(
                severity=Severity.HIGH,
                message=f"Average quality score {stats.average_score} is below {self.alert_threshold}",
                score=stats.average_score
            ))

        if alerts:
            logger.warning(f"Raised {len(alerts)} quality alerts")

        return alerts

    def build_report(self, records: List[Scored]) -> MonitorReport:
        """
        Statistics, worst items, alerts and trend for one batch.

        Also records a trend snapshot.
        """
        quality_records = [
            r if isinstance(r, QualityRecord) else QualityRecord(**r)
            for r in records
        ]

        stats = self.compute_stats(quality_records)
        self.record_snapshot(stats)

        return MonitorReport(
            stats=stats,
            low_quality_items=self.low_quality_items(quality_records),
            alerts=self.check_alerts(quality_records, stats),
            trend=self.trend()
        )
