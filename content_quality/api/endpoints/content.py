"""
Content API endpoints for Content Quality.

This module exposes the processing passes on their own: sanitizing,
rendering raw content to display HTML and validating HTML structure.
"""

import logging

from flask import Blueprint, jsonify

from ...core.models.content import ContentFormat, RenderOptions
from ...core.processing.format_detector import detect_format
from ...core.processing.renderer import render_content, strip_code_fences
from ...core.processing.sanitizer import sanitize_html
from ...core.scoring.html_validation import validate_html_structure
from ..limiter import limiter
from ..schemas.quality import SanitizeRequestSchema, RenderRequestSchema, ValidateRequestSchema
from .quality import load_body


logger = logging.getLogger(__name__)

# Create blueprint
content_bp = Blueprint('content', __name__, url_prefix='/api/v1')


@content_bp.route('/content/sanitize', methods=['POST'])
@limiter.limit("300 per minute")
def sanitize():
    """
    Sanitize HTML against the allow-list.

    Expected JSON body:
    {
        "html": "<p>Untrusted markup</p>",
        "options": {"allow_images": true, "strict": false}
    }
    """
    body, error = load_body(SanitizeRequestSchema)
    if error:
        return error

    html = sanitize_html(body.html, body.options)
    return jsonify({"html": html}), 200


@content_bp.route('/content/render', methods=['POST'])
@limiter.limit("300 per minute")
def render():
    """Render raw content of any supported format to display HTML."""
    body, error = load_body(RenderRequestSchema)
    if error:
        return error

    options = body.options or RenderOptions()
    fmt = ContentFormat(options.format)
    if fmt == ContentFormat.AUTO:
        fmt = detect_format(strip_code_fences(body.content))

    html = render_content(body.content, options)
    return jsonify({"html": html, "format": fmt.value}), 200


@content_bp.route('/content/validate', methods=['POST'])
@limiter.limit("300 per minute")
def validate():
    """Structural HTML validation with a repaired copy when errors are found."""
    body, error = load_body(ValidateRequestSchema)
    if error:
        return error

    result = validate_html_structure(body.html)
    if not result.is_valid:
        logger.debug(f"HTML validation found {len(result.errors)} errors")

    return jsonify(result.model_dump(mode='json')), 200
