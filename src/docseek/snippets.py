# Docseek – In-process document search for retrieval-augmented prompts
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""Snippet extraction: the text window where query words cluster best."""
import re

from .scoring import split_query

ELLIPSIS = "..."
CLEAN_CUT_RATIO = 0.7
_WHITESPACE_RE = re.compile(r"\s+")


def _best_window(content: str, terms: list[str], max_length: int) -> tuple[int, int] | None:
    """(start, end) of the best window, offsets into *content*."""
    half = max_length // 2
    best: tuple[int, int] | None = None
    best_score = 0

    for term in terms:
        # lookahead keeps overlapping occurrences; offsets stay in the original text
        for m in re.finditer(f"(?={re.escape(term)})", content, re.IGNORECASE):
            pos = m.start()
            start = max(0, pos - half)
            end = min(len(content), pos + half)
            window = content[start:end].lower()
            score = 1 + sum(2 for other in terms if other != term and other in window)
            if score > best_score:
                best_score = score
                best = (start, end)

    return best


def _clean_end(content: str, start: int, end: int, max_length: int) -> int:
    """Move *end* back to a sentence or word boundary when it splits a word."""
    if end >= len(content) or not (content[end - 1].isalnum() and content[end].isalnum()):
        return end
    text = content[start:end]
    cut_point = max(text.rfind("。") + 1, text.rfind(". ") + 1, text.rfind(" "))
    if cut_point > max_length * CLEAN_CUT_RATIO:
        return start + cut_point
    return end


def extract_snippet(content: str, query: str, max_length: int = 400) -> str:
    """Excerpt of at most *max_length* characters plus ellipsis markers."""
    terms = [t for t in split_query(query) if len(t) > 1]
    window = _best_window(content, terms, max_length)
    start, end = window if window else (0, min(len(content), max_length))
    end = _clean_end(content, start, end, max_length)

    snippet = _WHITESPACE_RE.sub(" ", content[start:end]).strip()
    if content[:start].strip():
        snippet = ELLIPSIS + snippet
    if content[end:].strip():
        snippet = snippet + ELLIPSIS
    return snippet
