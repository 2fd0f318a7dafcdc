"""
Remote enhancer backed by an LLM.

This module asks a language model to score, check or rewrite content.
Every call has a hard timeout, and every answer is validated before
it is trusted: anything unusable raises RemoteServiceError so that the
caller can fall back to the local result.
"""

import asyncio
import json
import logging
import re
from typing import Optional, Dict, Any, List, Union

from pydantic import ValidationError as PydanticValidationError

from ...core.models.content import SEOMeta
from ...core.models.errors import RemoteServiceError
from ...core.models.quality import HumanLikeScore, QualityIssue, RemoteQualityReport, SEOReport
from ...core.processing.renderer import strip_code_fences
from . import prompts
from .client import LLMClient


logger = logging.getLogger(__name__)

SERVICE_NAME = "remote_enhancer"
JSON_FORMAT = {"type": "json_object"}

FENCED_JSON_PATTERN = re.compile(r'```(?:json)?\s*(\{.*?\})\s*```', re.DOTALL | re.IGNORECASE)
OBJECT_PATTERN = re.compile(r'\{.*\}', re.DOTALL)


def parse_json_answer(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object out of a model answer.

    Accepts a bare object, an object in a fenced code block, or the
    outermost {...} span inside prose.

    Raises:
        RemoteServiceError: If no JSON object can be parsed
    """
    if not text or not text.strip():
        raise RemoteServiceError("Empty answer from remote enhancer", service=SERVICE_NAME)

    candidates = [text.strip()]
    fenced = FENCED_JSON_PATTERN.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    braces = OBJECT_PATTERN.search(text)
    if braces:
        candidates.append(braces.group(0))

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise RemoteServiceError("Remote enhancer answer is not a JSON object", service=SERVICE_NAME)


def _require(data: Dict[str, Any], *keys: str):
    missing = [key for key in keys if key not in data]
    if missing:
        raise RemoteServiceError(
            f"Remote enhancer answer is missing keys: {', '.join(missing)}",
            service=SERVICE_NAME
        )


def _score(value: Any) -> int:
    try:
        return max(0, min(100, int(round(float(value)))))
    except (TypeError, ValueError):
        raise RemoteServiceError(f"Invalid score in remote answer: {value!r}", service=SERVICE_NAME)


def _issues(raw: Any) -> List[QualityIssue]:
    """Keep the issues that fit the local issue model, drop the rest."""
    issues = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict):
            continue
        try:
            issues.append(QualityIssue(
                type=item.get("type"),
                severity=str(item.get("severity", "")).lower(),
                message=str(item.get("message", "")),
                suggestion=item.get("suggestion") or None
            ))
        except PydanticValidationError:
            logger.debug(f"Dropped remote issue with unknown type or severity: {item.get('type')}")
    return issues


def _strings(raw: Any) -> List[str]:
    return [str(item) for item in raw if item] if isinstance(raw, list) else []


class RemoteEnhancer:
    """
    LLM-backed quality checks and rewrites.

    One instance is built per process (see create_remote_enhancer) and
    injected into the components that use it.
    """

    def __init__(self, llm_client: LLMClient, timeout: float = 30.0):
        """
        Initialize the enhancer.

        Args:
            llm_client: Client used for every request
            timeout: Hard limit for one call, in seconds
        """
        self.llm_client = llm_client
        self.timeout = timeout

    async def _ask(
        self,
        prompt: str,
        system_prompt: str,
        temperature: float,
        max_tokens: int,
        json_answer: bool
    ) -> str:
        response = await asyncio.wait_for(
            self.llm_client.generate(
                prompt=prompt,
                system_prompt=system_prompt,
                temperature=temperature,
                max_tokens=max_tokens,
                response_format=JSON_FORMAT if json_answer else None
            ),
            timeout=self.timeout
        )
        return response.content

    async def check_quality(
        self,
        content: str,
        title: str,
        context: Optional[Dict[str, Any]] = None
    ) -> RemoteQualityReport:
        """
        Ask the model for a quality report.

        Args:
            content: Content HTML
            title: Content title
            context: Optional category and keywords

        Returns:
            RemoteQualityReport with source "remote"

        Raises:
            RemoteServiceError: On an unusable answer
            LLMError: On provider failure
            asyncio.TimeoutError: When the call exceeds the timeout
        """
        context = context or {}
        prompt = prompts.QUALITY_PROMPT.format(
            title=title,
            category=context.get("category") or "General",
            keywords=", ".join(context.get("keywords") or []) or "None",
            content=prompts.truncate(content, prompts.QUALITY_CONTENT_LIMIT)
        )

        data = parse_json_answer(await self._ask(
            prompt, prompts.QUALITY_SYSTEM_PROMPT, temperature=0.3, max_tokens=2000, json_answer=True
        ))
        _require(data, "score")

        score = _score(data["score"])
        return RemoteQualityReport(
            score=score,
            passed=bool(data.get("passed", score >= 70)),
            issues=_issues(data.get("issues")),
            suggestions=_strings(data.get("suggestions")),
            ai_generated=bool(data.get("aiGenerated", data.get("ai_generated", False))),
            human_like_score=_score(data.get("humanLikeScore", data.get("human_like_score", 0))),
            seo_score=_score(data.get("seoScore", data.get("seo_score", 0))),
            source="remote"
        )

    async def check_seo(
        self,
        content: str,
        title: str,
        meta: Union[SEOMeta, Dict[str, Any], None] = None
    ) -> SEOReport:
        """
        Ask the model for an SEO report.

        Raises:
            RemoteServiceError: On an unusable answer
        """
        if meta is None:
            meta = SEOMeta()
        elif not isinstance(meta, SEOMeta):
            meta = SEOMeta(**meta)

        prompt = prompts.SEO_PROMPT.format(
            title=title or "None",
            description=meta.description or "None",
            keywords=", ".join(meta.keywords) or "None",
            content=prompts.truncate(content, prompts.SEO_CONTENT_LIMIT)
        )

        data = parse_json_answer(await self._ask(
            prompt, prompts.SEO_SYSTEM_PROMPT, temperature=0.3, max_tokens=1500, json_answer=True
        ))
        _require(data, "score")

        score = _score(data["score"])
        try:
            density = max(0.0, min(100.0, float(data.get("keywordDensity", 0) or 0)))
        except (TypeError, ValueError):
            density = 0.0

        return SEOReport(
            score=score,
            passed=score >= 70,
            issues=_issues(data.get("issues")),
            suggestions=_strings(data.get("suggestions")),
            keyword_density=density,
            meta_description_length=len(meta.description or ""),
            title_length=len(title or "")
        )

    async def check_human_like(self, content: str) -> HumanLikeScore:
        """
        Ask the model whether content reads as human-written.

        Raises:
            RemoteServiceError: On an unusable answer
        """
        prompt = prompts.HUMAN_LIKE_PROMPT.format(
            content=prompts.truncate(content, prompts.HUMAN_LIKE_CONTENT_LIMIT)
        )

        data = parse_json_answer(await self._ask(
            prompt, prompts.HUMAN_LIKE_SYSTEM_PROMPT, temperature=0.3, max_tokens=500, json_answer=True
        ))
        _require(data, "score")

        score = _score(data["score"])
        return HumanLikeScore(
            score=score,
            is_human_like=score >= 70,
            indicators=_strings(data.get("indicators")),
            source="remote"
        )

    async def rewrite(
        self,
        content: str,
        title: str,
        context: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Ask the model to rewrite content.

        Returns:
            Rewritten HTML, unprocessed

        Raises:
            RemoteServiceError: When the answer is empty
        """
        context = context or {}
        prompt = prompts.REWRITE_PROMPT.format(
            title=title,
            category=context.get("category") or "General",
            keywords=", ".join(context.get("keywords") or []) or "None",
            content=prompts.truncate(content, prompts.REWRITE_CONTENT_LIMIT)
        )

        answer = await self._ask(
            prompt, prompts.REWRITE_SYSTEM_PROMPT, temperature=0.7, max_tokens=8000, json_answer=False
        )
        rewritten = strip_code_fences((answer or "").strip()).strip()
        if not rewritten:
            raise RemoteServiceError("Remote enhancer returned an empty rewrite", service=SERVICE_NAME)

        logger.info(f"Remote rewrite received ({len(content or '')} -> {len(rewritten)} chars)")
        return rewritten


def create_remote_enhancer(config) -> Optional[RemoteEnhancer]:
    """
    Build the remote enhancer from configuration.

    Args:
        config: Config object with the REMOTE_ENHANCER_* settings

    Returns:
        RemoteEnhancer, or None when disabled or no API key is set
    """
    if not getattr(config, "REMOTE_ENHANCER_ENABLED", False):
        logger.info("Remote enhancer disabled")
        return None

    api_key = getattr(config, "REMOTE_ENHANCER_API_KEY", None)
    provider = getattr(config, "REMOTE_ENHANCER_PROVIDER", "openai")
    if not api_key and provider != "ollama":
        logger.warning("Remote enhancer enabled but no API key configured; using local scoring only")
        return None

    timeout = getattr(config, "REMOTE_ENHANCER_TIMEOUT", 30)
    llm_client = LLMClient(
        default_provider=provider,
        default_model=getattr(config, "REMOTE_ENHANCER_MODEL", "gpt-4o-mini"),
        api_key=api_key,
        base_url=getattr(config, "REMOTE_ENHANCER_BASE_URL", None),
        timeout=timeout,
        max_retries=getattr(config, "REMOTE_ENHANCER_MAX_RETRIES", 2),
        rate_limit_per_minute=getattr(config, "REMOTE_ENHANCER_RATE_LIMIT", 60)
    )

    logger.info(f"Remote enhancer configured: {provider}/{llm_client.default_model}")
    return RemoteEnhancer(llm_client, timeout=timeout)
