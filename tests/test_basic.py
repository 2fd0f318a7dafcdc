"""
Basic tests for Content Quality.

This module contains basic tests to verify the package structure,
the configuration and the core data models.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from content_quality.core.models.content import ContentFormat, CorpusItem, RenderOptions, SEOMeta
from content_quality.core.models.errors import ErrorResponse, RemoteServiceError, ValidationError
from content_quality.core.models.improvement import ImproveOptions
from content_quality.utils.config import TestingConfig, get_config, validate_config


def test_config_loading():
    """Test configuration loading."""
    config = get_config('testing')

    assert config.TESTING is True
    assert config.DEBUG is True
    assert config.LOG_LEVEL == 'CRITICAL'
    assert config.REMOTE_ENHANCER_ENABLED is False
    assert config.RATELIMIT_ENABLED is False


def test_unknown_config_falls_back_to_development():
    """Test an unknown name yields the development configuration."""
    config = get_config('staging')
    assert config.DEBUG is True
    assert config.LOG_LEVEL == 'DEBUG'


def test_validate_config():
    """Test configuration validation."""
    assert validate_config(TestingConfig()) == []

    config = TestingConfig()
    config.QUALITY_MIN_SCORE = 120
    config.REMOTE_ENHANCER_ENABLED = True
    config.REMOTE_ENHANCER_API_KEY = None
    config.REMOTE_ENHANCER_PROVIDER = 'openai'

    errors = validate_config(config)
    assert any("QUALITY_MIN_SCORE" in error for error in errors)
    assert any("REMOTE_ENHANCER_API_KEY" in error for error in errors)


def test_imports():
    """Test that all modules can be imported."""
    # Core
    from content_quality.core.processing.renderer import render_content
    from content_quality.core.scoring.aggregator import assess_quality
    from content_quality.core.improvement.improver import ContentImprover
    from content_quality.core.monitoring.monitor import QualityMonitor
    from content_quality.core.services import build_services

    # Integrations
    from content_quality.integrations.llm.enhancer import RemoteEnhancer
    from content_quality.integrations.llm.client import LLMClient

    # API and tasks
    from content_quality.api.app import create_app
    from content_quality.tasks.celery_app import celery_app

    assert all([render_content, assess_quality, ContentImprover, QualityMonitor, build_services,
                RemoteEnhancer, LLMClient, create_app, celery_app])


def test_package_exports():
    """Test the names re-exported from the package root."""
    import content_quality
    from content_quality import detect_format, escape_unsafe_html, render_content, sanitize_html

    for name in content_quality.__all__:
        assert getattr(content_quality, name) is not None

    assert escape_unsafe_html("<b>") == "&lt;b&gt;"
    assert detect_format("# Title\n\nSome text") == "markdown"
    assert render_content("<p>Hi</p>") == "<p>Hi</p>"
    assert "<script" not in sanitize_html("<p>a</p><script>x()</script>")


def test_build_services_without_enhancer():
    """Test the service bundle for a configuration without a remote enhancer."""
    from content_quality.core.services import build_services

    services = build_services(TestingConfig())

    assert services['enhancer'] is None
    assert services['improver'].enhancer is None
    assert services['monitor'].improver is services['improver']
    assert services['quality_service'].enhancer is None


def test_seo_meta_keywords():
    """Test keyword strings are split."""
    assert SEOMeta(keywords="flat, kadikoy , ").keywords == ["flat", "kadikoy"]
    assert SEOMeta(keywords=None).keywords == []


def test_corpus_item_coerces_ids():
    """Test numeric ids become strings."""
    assert CorpusItem(id=7, content="x").id == "7"


def test_render_options():
    """Test render options accept format names."""
    options = RenderOptions(format="markdown", allow_images=False)

    assert ContentFormat(options.format) == ContentFormat.MARKDOWN
    assert options.sanitize_options().allow_images is False

    with pytest.raises(PydanticValidationError):
        RenderOptions(format="docx")


def test_improve_options():
    """Test improvement option bounds and the remote context."""
    assert ImproveOptions().min_score == 50
    assert ImproveOptions(category="rentals").context() == {"category": "rentals"}

    with pytest.raises(PydanticValidationError):
        ImproveOptions(min_score=-1)


def test_errors():
    """Test error types and the error response."""
    error = ValidationError("Title is required", field="title")
    assert error.error_code == "VALIDATION_ERROR"
    assert error.details["field"] == "title"

    remote = RemoteServiceError("No answer", service="remote_enhancer")
    response = ErrorResponse.from_exception(remote, status=503)
    assert response.status == 503
    assert response.error == "RemoteServiceError"
    assert response.details == {"service": "remote_enhancer"}


def test_validation_error_hides_value():
    """Test a rejected value is not echoed in the error details."""
    error = ValidationError("Content too long", field="content", value="<p>" + "x" * 5000 + "</p>")
    assert "value" not in error.details
    assert ErrorResponse.from_exception(error, status=400).field == "content"


def test_celery_app_factory():
    """Test the Celery app routes batch tasks to the quality queue."""
    from content_quality.tasks.celery_app import create_celery_app

    app = create_celery_app(TestingConfig())
    assert app.main == 'content_quality'
    assert app.conf.broker_url == 'memory://'
    assert app.conf.task_routes['content_quality.tasks.quality.*'] == {'queue': 'quality'}
    assert app.conf.task_default_queue == 'quality'


def test_structured_logger_bind():
    """Test bound context is merged into each record."""
    from content_quality.utils.logging import get_logger

    logger = get_logger('content_quality.tests', task_id='abc').bind(items=3)
    assert logger.context == {'task_id': 'abc', 'items': 3}
    assert logger.logger.name == 'content_quality.tests'
