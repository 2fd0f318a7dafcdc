"""
Tests for the Flask API.
"""

import pytest

from content_quality.api.app import create_app


LOW_QUALITY = "<p>[image: kitchen] In conclusion, this is a dream home.</p>"


@pytest.fixture
def app():
    return create_app('testing')


@pytest.fixture
def client(app):
    return app.test_client()


def test_root_and_docs(client):
    """Test service information endpoints."""
    root = client.get('/')
    assert root.status_code == 200
    assert root.get_json()["service"] == "content-quality"

    docs = client.get('/api/v1/docs')
    assert docs.status_code == 200
    assert "assess" in docs.get_json()["endpoints"]["quality"]


def test_health_endpoints(client):
    """Test liveness, readiness and the detailed report."""
    assert client.get('/api/v1/health').get_json()["status"] == "healthy"
    assert client.get('/api/v1/health/live').get_json()["status"] == "alive"
    assert client.get('/api/v1/health/ready').status_code == 200

    detailed = client.get('/api/v1/health/detailed')
    data = detailed.get_json()
    assert detailed.status_code == 200
    assert data["components"]["pipeline"]["status"] == "healthy"
    assert data["components"]["remote_enhancer"] == {"status": "disabled", "reason": "disabled by configuration"}


def test_not_found_is_json(client):
    """Test unknown routes return a JSON error."""
    response = client.get('/api/v1/unknown')
    assert response.status_code == 404
    assert response.get_json()["error_code"] == "NOT_FOUND"


def test_method_not_allowed_is_json(client):
    """Test wrong methods return a JSON error."""
    response = client.get('/api/v1/quality/assess')
    assert response.status_code == 405
    assert response.get_json()["error_code"] == "METHOD_NOT_ALLOWED"


def test_request_id_header(client):
    """Test every response carries a request id."""
    response = client.get('/api/v1/health')
    assert response.headers.get('X-Request-ID', '').startswith('req_')


def test_assess(client):
    """Test scoring content."""
    response = client.post('/api/v1/quality/assess', json={
        "content": LOW_QUALITY,
        "title": "Dream home",
        "meta": {"description": "A flat", "keywords": "flat, home"},
        "corpus": [{"id": 1, "title": "Old", "content": "dream home kitchen conclusion"}]
    })
    data = response.get_json()

    assert response.status_code == 200
    assert 0 <= data["overall"] <= 100
    assert data["duplicate_check_performed"] is True
    assert data["uniqueness"] == 50
    assert any(issue["type"] == "ai_pattern" for issue in data["issues"])


def test_assess_validation_error(client):
    """Test missing content is rejected with field details."""
    response = client.post('/api/v1/quality/assess', json={"content": "", "title": "x"})
    data = response.get_json()

    assert response.status_code == 400
    assert data["error"] == "validation_error"
    assert data["validation_errors"][0]["field"] == "content"


def test_assess_requires_json(client):
    """Test non-JSON bodies are rejected."""
    response = client.post('/api/v1/quality/assess', data="content", content_type="text/plain")
    assert response.status_code == 400
    assert response.get_json()["error_code"] == "INVALID_CONTENT_TYPE"

    response = client.post('/api/v1/quality/assess', json=["not", "an", "object"])
    assert response.status_code == 400
    assert response.get_json()["error_code"] == "INVALID_REQUEST"


def test_improve(client):
    """Test local improvement through the API."""
    response = client.post('/api/v1/quality/improve', json={
        "content": LOW_QUALITY,
        "title": "Dream home",
        "options": {"min_score": 95, "use_remote": True}
    })
    data = response.get_json()

    assert response.status_code == 200
    assert "[image" not in data["content"]
    assert data["used_remote_enhancer"] is False
    assert "still_low" in data["stages"]
    assert data["stages"][-1] == "done"


def test_improve_rejects_bad_options(client):
    """Test option bounds are validated."""
    response = client.post('/api/v1/quality/improve', json={
        "content": LOW_QUALITY,
        "options": {"min_score": 150}
    })
    assert response.status_code == 400
    assert response.get_json()["validation_errors"][0]["field"] == "options.min_score"


def test_check_falls_back_to_local(client):
    """Test the quality check without a remote enhancer."""
    response = client.post('/api/v1/quality/check', json={
        "content": LOW_QUALITY,
        "title": "Dream home",
        "keywords": "flat, home"
    })
    data = response.get_json()

    assert response.status_code == 200
    assert data["source"] == "local"


def test_stats(client):
    """Test a report over scored and unscored records."""
    response = client.post('/api/v1/quality/stats', json={"records": [
        {"id": "1", "title": "Good", "quality_score": 85},
        {"id": "2", "title": "Unscored", "content": LOW_QUALITY},
    ]})
    data = response.get_json()

    assert response.status_code == 200
    assert data["stats"]["total"] == 2
    assert len(data["low_quality_items"]) == 2
    assert data["trend"]["snapshots"] >= 1


def test_stats_rejects_bad_records(client):
    """Test records without ids or with invalid scores are rejected."""
    assert client.post('/api/v1/quality/stats', json={"records": [{"title": "x"}]}).status_code == 400
    assert client.post('/api/v1/quality/stats', json={"records": []}).status_code == 400
    assert client.post('/api/v1/quality/stats', json={
        "records": [{"id": "1", "quality_score": 150}]
    }).status_code == 400


def test_sanitize(client):
    """Test the sanitizer endpoint."""
    response = client.post('/api/v1/content/sanitize', json={
        "html": '<p onclick="x()">Hi</p><script>alert(1)</script><img src="/a.jpg" alt="a">',
        "options": {"allow_images": False}
    })
    html = response.get_json()["html"]

    assert response.status_code == 200
    assert html == "<p>Hi</p>"


def test_render(client):
    """Test rendering Markdown with format detection."""
    response = client.post('/api/v1/content/render', json={
        "content": "# Title\n\n| A | B |\n|---|---|\n| 1 | 2 |"
    })
    data = response.get_json()

    assert response.status_code == 200
    assert data["format"] == "markdown"
    assert "<h1>Title</h1>" in data["html"]
    assert '<div class="table-scroll overflow-x-auto"><table>' in data["html"]


def test_render_with_explicit_format(client):
    """Test an explicit format skips detection."""
    response = client.post('/api/v1/content/render', json={
        "content": "Line one\nLine two",
        "options": {"format": "plain", "wrap_tables": False}
    })
    data = response.get_json()

    assert data["format"] == "plain"
    assert data["html"] == "<p>Line one<br/>Line two</p>"


def test_validate(client):
    """Test HTML validation through the API."""
    response = client.post('/api/v1/content/validate', json={"html": "<p>Open paragraph"})
    data = response.get_json()

    assert response.status_code == 200
    assert data["is_valid"] is False
    assert data["fixed_html"] == "<p>Open paragraph</p>"
