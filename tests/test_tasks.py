"""
Tests for the Celery batch tasks, run eagerly in-process.
"""

import pytest

from content_quality.core.services import build_services
from content_quality.tasks import quality as quality_tasks
from content_quality.utils.config import TestingConfig


@pytest.fixture(autouse=True)
def local_services(monkeypatch):
    monkeypatch.setattr(quality_tasks, '_services', build_services(TestingConfig()))


def test_assess_batch_task():
    """Test the assessment task returns write-back records and a report."""
    records = [
        {"id": 1, "title": "Bright flat", "content": "<p>The flat is bright and quiet.</p>"},
        {"id": 2, "title": "Dream home", "content": "<p>In conclusion, this is a dream home.</p>"},
    ]

    result = quality_tasks.assess_batch_task.apply(args=[records]).get()

    assert result['status'] == 'completed'
    assert [r['id'] for r in result['records']] == ["1", "2"]
    assert result['report']['stats']['total'] == 2


def test_assess_batch_task_checks_duplicates():
    """Test the duplicate check switch reaches the monitor."""
    body = "<p>apartment balcony kitchen garden parking elevator</p>"
    records = [{"id": "a", "title": "A", "content": body}, {"id": "b", "title": "B", "content": body}]

    result = quality_tasks.assess_batch_task.apply(args=[records], kwargs={"check_duplicates": True}).get()
    issue_types = {issue['type'] for issue in result['records'][0]['quality_issues']}

    assert "uniqueness" in issue_types
