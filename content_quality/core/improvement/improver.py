"""
Content improvement orchestration.

This module raises the quality of low-scoring content. Deterministic
local fixes always run first; the remote enhancer is asked for a
rewrite only when the local result is still below the target score,
and its answer is kept only if it scores at least as well. Content
that already meets the target is returned untouched.
"""

import logging
import re
from typing import Optional, List, Tuple

from ..models.content import ContentFormat
from ..models.improvement import ImprovedContent, ImprovementStage, ImproveOptions
from ..models.quality import QualityScore
from ..processing.cleaner import clean_content, remove_empty_sections
from ..processing.converter import to_html
from ..processing.format_detector import detect_format
from ..processing.renderer import process_html
from ..processing.sanitizer import sanitize_html
from ..processing.structure import normalize_structure
from ..processing.tag_repair import DEFAULT_PLACEHOLDER_SRC, repair_tags
from ..scoring.aggregator import assess_quality
from .fallback import score_with_fallback


logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r'<h[1-6]\b', re.IGNORECASE)
FIRST_PARAGRAPH_PATTERN = re.compile(r'^\s*<p\b[^>]*>(.*?)</p>', re.IGNORECASE | re.DOTALL)
INNER_TAG_PATTERN = re.compile(r'<[^>]+>')
MAX_HEADING_LENGTH = 80


def promote_heading(html: str) -> str:
    """Turn a short opening paragraph into an <h2> when there is no heading at all."""
    if not html or HEADING_PATTERN.search(html):
        return html

    match = FIRST_PARAGRAPH_PATTERN.match(html)
    if not match:
        return html

    text = INNER_TAG_PATTERN.sub('', match.group(1)).strip()
    if not text or len(text) > MAX_HEADING_LENGTH:
        return html

    return f"<h2>{text}</h2>" + html[match.end():]


class ContentImprover:
    """
    Improves content in at most one local and one remote step.

    The enhancer is optional; without one the improver is purely
    local and deterministic.
    """

    def __init__(self, enhancer=None, placeholder_src: str = DEFAULT_PLACEHOLDER_SRC):
        """
        Initialize the improver.

        Args:
            enhancer: Object with an async rewrite(content, title, context), or None
            placeholder_src: Image path used when repairing images
        """
        self.enhancer = enhancer
        self.placeholder_src = placeholder_src

    def score(self, content: str, title: str) -> QualityScore:
        return assess_quality(content, title)

    def apply_local_fixes(self, content: str, options: ImproveOptions) -> Tuple[str, List[str]]:
        """
        Run the deterministic fixes.

        Returns:
            (fixed content, notes for the fixes that changed something)
        """
        notes: List[str] = []
        current = content

        fmt = detect_format(current)
        if fmt != ContentFormat.HTML:
            converted = to_html(current, fmt)
            if converted != current:
                notes.append(f"Converted {fmt.value} content to HTML")
                current = converted

        if options.remove_ai_patterns:
            cleaned = clean_content(current)
            if cleaned != current:
                notes.append("Removed AI placeholders, repeated sentences and stock phrases")
                current = cleaned

        repaired = repair_tags(current, placeholder_src=self.placeholder_src)
        if repaired != current:
            notes.append("Repaired broken HTML tags, images and links")
            current = repaired

        if options.fix_readability:
            normalized = remove_empty_sections(normalize_structure(current)).strip()
            if normalized != current:
                notes.append("Normalized paragraphs and whitespace")
                current = normalized

        if options.fix_seo:
            promoted = promote_heading(current)
            if promoted != current:
                notes.append("Promoted the opening line to an H2 heading")
                current = promoted

        return sanitize_html(current), notes

    async def improve(
        self,
        content: str,
        title: str,
        options: Optional[ImproveOptions] = None
    ) -> ImprovedContent:
        """
        Improve content until it meets options.min_score, if possible.

        Args:
            content: Raw or HTML content
            title: Content title
            options: Improvement options

        Returns:
            ImprovedContent; remote failures are never raised
        """
        options = options or ImproveOptions()
        content = content or ''
        stages = [ImprovementStage.EVALUATE]

        original_score = self.score(content, title)
        if original_score.overall >= options.min_score:
            stages += [ImprovementStage.ALREADY_GOOD, ImprovementStage.DONE]
            return ImprovedContent(
                content=content,
                original_score=original_score,
                improved_score=original_score,
                improvements=[],
                used_remote_enhancer=False,
                stages=stages
            )

        local_content, improvements = self.apply_local_fixes(content, options)
        stages.append(ImprovementStage.LOCAL_FIX_APPLIED)
        local_score = self.score(local_content, title)

        final_content, final_score, used_remote = local_content, local_score, False

        if local_score.overall >= options.min_score:
            stages.append(ImprovementStage.MEETS_THRESHOLD)
        else:
            stages.append(ImprovementStage.STILL_LOW)

            if options.use_remote and self.enhancer is not None:
                stages.append(ImprovementStage.REMOTE_REWRITE)
                rewritten, from_remote = await score_with_fallback(
                    lambda: self.enhancer.rewrite(local_content, title, options.context()),
                    lambda: None,
                    operation="Remote rewrite"
                )

                processed = process_html(rewritten, placeholder_src=self.placeholder_src) if from_remote else ''
                if processed:
                    remote_score = self.score(processed, title)
                    if remote_score.overall >= local_score.overall:
                        final_content, final_score, used_remote = processed, remote_score, True
                        improvements.append("Rewrote the content with the remote enhancer")
                    else:
                        logger.info(
                            f"Discarded remote rewrite scoring {remote_score.overall} "
                            f"(local {local_score.overall})"
                        )
                elif from_remote:
                    logger.warning("Remote rewrite was empty after processing; keeping local result")

        stages += [ImprovementStage.RESCORED, ImprovementStage.DONE]

        logger.info(
            f"Improved '{title}': {original_score.overall} -> {final_score.overall} "
            f"({'remote' if used_remote else 'local'})"
        )

        return ImprovedContent(
            content=final_content,
            original_score=original_score,
            improved_score=final_score,
            improvements=improvements,
            used_remote_enhancer=used_remote,
            stages=stages
        )


async def improve_content(
    content: str,
    title: str,
    options: Optional[ImproveOptions] = None,
    enhancer=None
) -> ImprovedContent:
    """
    Improve content with a one-off ContentImprover.

    Args:
        content: Raw or HTML content
        title: Content title
        options: Improvement options
        enhancer: Optional remote enhancer

    Returns:
        ImprovedContent
    """
    return await ContentImprover(enhancer=enhancer).improve(content, title, options)
