"""
Duplicate content detection.

This module compares a candidate against existing items using the
Jaccard similarity of their significant-word sets.
"""

import logging
from typing import Iterable, Union, Dict, Any, List

from ..models.content import CorpusItem
from ..models.quality import DuplicateReport, SimilarItem
from ..processing.text import jaccard, word_set


logger = logging.getLogger(__name__)

SIMILARITY_FLOOR = 0.3
DUPLICATE_THRESHOLD = 0.7
MAX_SIMILAR = 5


def _as_item(item: Union[CorpusItem, Dict[str, Any]]) -> CorpusItem:
    if isinstance(item, CorpusItem):
        return item
    return CorpusItem(**{k: v for k, v in item.items() if v is not None})


def detect_duplicate_content(
    text: str,
    corpus: Iterable[Union[CorpusItem, Dict[str, Any]]]
) -> DuplicateReport:
    """
    Compare text against a corpus of existing items.

    Args:
        text: Candidate content
        corpus: Items shaped {id, title, slug, content}

    Returns:
        DuplicateReport with the top 5 items above 0.3 similarity
    """
    candidate = word_set(text or '')
    if not candidate:
        return DuplicateReport()

    similar: List[SimilarItem] = []
    for raw in corpus or []:
        item = _as_item(raw)
        similarity = jaccard(candidate, word_set(item.content))
        if similarity > SIMILARITY_FLOOR:
            similar.append(SimilarItem(
                id=item.id,
                title=item.title,
                slug=item.slug,
                similarity=similarity
            ))

    similar.sort(key=lambda s: s.similarity, reverse=True)
    top = similar[0].similarity if similar else 0.0

    if top > DUPLICATE_THRESHOLD:
        logger.info(f"Possible duplicate of item {similar[0].id} (similarity {top:.2f})")

    return DuplicateReport(
        is_duplicate=top > DUPLICATE_THRESHOLD,
        similarity=top,
        similar_articles=similar[:MAX_SIMILAR]
    )
