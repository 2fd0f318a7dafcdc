"""
Markdown and plain-text conversion.

This module promotes Markdown or plain text to the HTML shape the
rest of the pipeline expects. The Markdown converter is line based
and handles the constructs AI writers actually produce: pipe tables,
ATX headings, emphasis, links and images, flat lists and rules.
"""

import logging
import re
from typing import List

from ..models.content import ContentFormat
from .entities import decode_entities
from .format_detector import detect_format


logger = logging.getLogger(__name__)

TABLE_SEPARATOR_PATTERN = re.compile(r'^\s*\|?\s*:?-{3,}:?\s*(?:\|\s*:?-{3,}:?\s*)*\|?\s*$')
HEADING_PATTERN = re.compile(r'^(#{1,3})\s+(.+?)\s*#*\s*$', re.MULTILINE)
BOLD_PATTERNS = [
    re.compile(r'\*\*(?=\S)(.+?)(?<=\S)\*\*'),
    re.compile(r'__(?=\S)(.+?)(?<=\S)__'),
]
ITALIC_PATTERNS = [
    re.compile(r'(?<![*\w])\*(?=[^\s*])(.+?)(?<=[^\s*])\*(?![*\w])'),
    re.compile(r'(?<![_\w])_(?=[^\s_])(.+?)(?<=[^\s_])_(?![_\w])'),
]
IMAGE_PATTERN = re.compile(r'!\[([^\]]*)\]\(([^)\s]+)(?:\s+"([^"]*)")?\)')
LINK_PATTERN = re.compile(r'\[([^\]]+)\]\(([^)\s]+)(?:\s+"([^"]*)")?\)')
BULLET_PATTERN = re.compile(r'^\s*[-*+]\s+(.+)$')
NUMBERED_PATTERN = re.compile(r'^\s*\d+[.)]\s+(.+)$')
RULE_PATTERN = re.compile(r'^\s*(?:-{3,}|\*{3,}|_{3,})\s*$')
BLOCK_START_PATTERN = re.compile(
    r'^<(?:p|div|h[1-6]|ul|ol|li|table|blockquote|pre|section|article|figure|hr|img)\b',
    re.IGNORECASE
)
PARAGRAPH_SPLIT_PATTERN = re.compile(r'\n\s*\n')


def to_html(text: str, fmt: ContentFormat = ContentFormat.AUTO) -> str:
    """
    Convert content of the given format to HTML.

    Args:
        text: Raw content
        fmt: Content format; AUTO detects it

    Returns:
        HTML (unrepaired, unsanitized)
    """
    if not text or not text.strip():
        return ''

    fmt = ContentFormat(fmt)
    if fmt == ContentFormat.AUTO:
        fmt = detect_format(text)

    if fmt == ContentFormat.HTML_ESCAPED:
        return decode_entities(text)
    if fmt == ContentFormat.MARKDOWN:
        return markdown_to_html(text)
    if fmt == ContentFormat.PLAIN:
        return plain_to_html(text)
    return text


def plain_to_html(text: str) -> str:
    """Blank lines separate paragraphs; single newlines become <br>."""
    if not text or not text.strip():
        return ''

    normalized = text.replace('\r\n', '\n').replace('\r', '\n').strip()
    paragraphs = []
    for block in PARAGRAPH_SPLIT_PATTERN.split(normalized):
        lines = [line.strip() for line in block.split('\n') if line.strip()]
        if lines:
            paragraphs.append(f"<p>{'<br>'.join(lines)}</p>")

    return '\n'.join(paragraphs)


def markdown_to_html(text: str) -> str:
    """Convert Markdown, tables first so table rows are never itemized."""
    if not text or not text.strip():
        return ''

    lines = text.replace('\r\n', '\n').replace('\r', '\n').split('\n')
    converted = '\n'.join(_convert_tables(lines))

    converted = HEADING_PATTERN.sub(
        lambda m: f"<h{len(m.group(1))}>{m.group(2)}</h{len(m.group(1))}>",
        converted
    )
    converted = convert_inline(converted)

    return '\n'.join(_convert_blocks(converted.split('\n')))


def convert_inline(text: str) -> str:
    """Emphasis, images and links."""
    for pattern in BOLD_PATTERNS:
        text = pattern.sub(r'<strong>\1</strong>', text)
    for pattern in ITALIC_PATTERNS:
        text = pattern.sub(r'<em>\1</em>', text)

    text = IMAGE_PATTERN.sub(_render_image, text)
    text = LINK_PATTERN.sub(_render_link, text)
    return text


def _render_image(match) -> str:
    alt, src, title = match.group(1), match.group(2), match.group(3)
    title_attr = f' title="{title}"' if title else ''
    return f'<img src="{src}" alt="{alt}"{title_attr}>'


def _render_link(match) -> str:
    label, href, title = match.group(1), match.group(2), match.group(3)
    title_attr = f' title="{title}"' if title else ''
    return f'<a href="{href}"{title_attr}>{label}</a>'


def _split_row(line: str) -> List[str]:
    stripped = line.strip()
    if stripped.startswith('|'):
        stripped = stripped[1:]
    if stripped.endswith('|'):
        stripped = stripped[:-1]
    return [cell.strip() for cell in stripped.split('|')]


def _render_table(header: List[str], rows: List[List[str]]) -> str:
    head = ''.join(f"<th>{cell}</th>" for cell in header)
    body = ''.join(
        '<tr>' + ''.join(f"<td>{cell}</td>" for cell in row) + '</tr>'
        for row in rows
    )
    return f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"


def _convert_tables(lines: List[str]) -> List[str]:
    out: List[str] = []
    i = 0

    while i < len(lines):
        line = lines[i]
        if (
            '|' in line
            and i + 1 < len(lines)
            and '|' in lines[i + 1]
            and TABLE_SEPARATOR_PATTERN.match(lines[i + 1])
        ):
            header = _split_row(line)
            rows = []
            i += 2
            while i < len(lines) and '|' in lines[i] and lines[i].strip():
                rows.append(_split_row(lines[i]))
                i += 1
            out.append(_render_table(header, rows))
            continue

        out.append(line)
        i += 1

    return out


def _convert_blocks(lines: List[str]) -> List[str]:
    """Wrap list runs in <ul>/<ol> and bare lines in <p>."""
    out: List[str] = []
    current_list = None

    for line in lines:
        bullet = BULLET_PATTERN.match(line)
        numbered = None if bullet else NUMBERED_PATTERN.match(line)
        kind = 'ul' if bullet else 'ol' if numbered else None

        if kind != current_list:
            if current_list:
                out.append(f"</{current_list}>")
            if kind:
                out.append(f"<{kind}>")
            current_list = kind

        if kind:
            out.append(f"<li>{(bullet or numbered).group(1).strip()}</li>")
            continue

        stripped = line.strip()
        if not stripped:
            continue
        if RULE_PATTERN.match(stripped):
            out.append('<hr>')
        elif BLOCK_START_PATTERN.match(stripped):
            out.append(stripped)
        else:
            out.append(f"<p>{stripped}</p>")

    if current_list:
        out.append(f"</{current_list}>")

    return out
