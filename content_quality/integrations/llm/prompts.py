"""
Prompt templates for the remote enhancer.

Content is truncated before it is placed in a prompt; the limits
below are per request type.
"""

QUALITY_CONTENT_LIMIT = 4000
REWRITE_CONTENT_LIMIT = 6000
SEO_CONTENT_LIMIT = 3000
HUMAN_LIKE_CONTENT_LIMIT = 2000

QUALITY_SYSTEM_PROMPT = (
    "You are a content quality expert. You analyze real-estate blog articles and "
    "write detailed quality reports. Articles may be in Turkish or English."
)

QUALITY_PROMPT = """Analyze the article below and produce a quality report.

Title: {title}
Category: {category}
Keywords: {keywords}

Content:
{content}

Criteria:
1. SEO compliance (keyword use, meta information, structure)
2. Readability (sentence length, word choice, flow)
3. Content quality (information value, depth, originality)
4. Likelihood of machine authorship (generic phrases, repetition, placeholders)
5. Human-likeness (naturalness, personal tone, originality)
6. Structure and formatting (headings, paragraphs, lists)

Return JSON:
{{
  "score": 0-100,
  "passed": true/false,
  "issues": [
    {{
      "type": "ai_pattern|seo|readability|structure|engagement|uniqueness",
      "severity": "low|medium|high",
      "message": "What is wrong",
      "suggestion": "How to fix it"
    }}
  ],
  "suggestions": ["Suggestion 1", "Suggestion 2"],
  "aiGenerated": true/false,
  "humanLikeScore": 0-100,
  "seoScore": 0-100
}}

Return only JSON."""

REWRITE_SYSTEM_PROMPT = (
    "You are a content editor. You rewrite real-estate blog articles so they are "
    "higher quality, SEO friendly and easy to read, keeping the original language."
)

REWRITE_PROMPT = """Improve the article below.

Title: {title}
Category: {category}
Keywords: {keywords}

Current content:
{content}

Requirements:
1. Remove machine-writing patterns (generic phrases, repetition, placeholders)
2. Optimize for SEO (use the keywords naturally)
3. Improve readability (short sentences, simple words)
4. Make the text sound natural and human-written
5. Improve structure (headings, paragraphs, lists)
6. Keep every fact from the original

Return HTML using <h2>, <h3>, <p> and <ul><li> tags.
Return only the improved content."""

SEO_SYSTEM_PROMPT = "You are an SEO expert. You check blog articles for SEO compliance."

SEO_PROMPT = """Check the SEO compliance of the article below.

Title: {title}
Meta description: {description}
Keywords: {keywords}

Content:
{content}

Criteria:
1. Title length (30-60 characters)
2. Meta description length (120-155 characters)
3. Keyword use (natural, not stuffed)
4. Heading structure (H2, H3)
5. Content length (300+ words)
6. Image alt text
7. Internal links

Return JSON:
{{
  "score": 0-100,
  "passed": true/false,
  "issues": [
    {{
      "type": "seo",
      "severity": "low|medium|high",
      "message": "What is wrong",
      "suggestion": "How to fix it"
    }}
  ],
  "suggestions": ["Suggestion 1", "Suggestion 2"],
  "keywordDensity": 0-100
}}

Return only JSON."""

HUMAN_LIKE_SYSTEM_PROMPT = (
    "You are a content analyst. You judge whether a text reads as if a person wrote it."
)

HUMAN_LIKE_PROMPT = """Analyze whether the text below reads as human-written.

{content}

Criteria:
1. Generic machine-writing phrases
2. Repeated content
3. Natural language use
4. Personal tone
5. Originality

Return JSON:
{{
  "score": 0-100,
  "indicators": ["Indicator 1", "Indicator 2"]
}}

Return only JSON."""


def truncate(content: str, limit: int) -> str:
    """Cut content to limit characters, marking the cut with an ellipsis."""
    content = content or ""
    if len(content) <= limit:
        return content
    return content[:limit] + "..."
