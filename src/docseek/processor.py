# Docseek – In-process document search for retrieval-augmented prompts
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Raw text -> Document (title, type, sections, keywords, summary).

All derivations are pure functions of the file name and content, so a
rebuild over unchanged files always produces identical documents.

Sections come from two independent splits that are concatenated:
- heading split: "# ", "## ", "### " lines start a new "heading\\nbody" chunk
- paragraph split: blank-line separated blocks above a minimum length
"""
import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from .config import Config

DocumentType = Literal["text", "markdown", "pdf"]

_TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_HEADING_SPLIT_RE = re.compile(r"^(#{1,3})\s+(.+)$", re.MULTILINE)
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_HEADING_MARKER_RE = re.compile(r"#+\s+")

_KEYWORD_PATTERNS = [
    re.compile(r"[ぁ-んァ-ン一-龯]{2,}"),
    re.compile(r"[a-zA-Z]{2,}"),
    re.compile(r"[0-9]+[年月日]"),
    re.compile(r"[0-9]+[億万千]"),
]
_WORD_SPLIT_RE = re.compile(r"[\s　、。，．,.]+")

MAX_TITLE_LINE = 100


@dataclass
class Document:
    id: str
    title: str
    content: str
    file_path: str
    type: DocumentType
    sections: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    summary: str = ""

    def to_dict(self, include_content: bool = False) -> dict:
        d = {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "summary": self.summary,
            "keywords": list(self.keywords),
            "sections": len(self.sections),
            "char_count": len(self.content),
        }
        if include_content:
            d["content"] = self.content
        return d


def extract_title(filename: str, content: str) -> str:
    match = _TITLE_RE.search(content)
    if match:
        return match.group(1).strip()

    first_line = content.split("\n")[0].strip()
    if first_line and len(first_line) < MAX_TITLE_LINE:
        return first_line

    return Path(filename).stem


def detect_type(filename: str) -> DocumentType:
    suffix = Path(filename).suffix.lower()
    if suffix == ".md":
        return "markdown"
    if suffix == ".pdf":
        return "pdf"
    return "text"


def extract_sections(content: str, min_paragraph_chars: int = 30) -> list[str]:
    sections: list[str] = []

    if "#" in content:
        # re.split with two groups: [preamble, level, heading, body, level, heading, body, ...]
        parts = _HEADING_SPLIT_RE.split(content)
        preamble = parts[0]
        if preamble.strip():
            sections.append(preamble.strip())
        for i in range(1, len(parts), 3):
            heading = parts[i + 1].strip()
            body = parts[i + 2].strip()
            chunk = f"{heading}\n{body}".strip()
            if chunk:
                sections.append(chunk)

    for paragraph in _PARAGRAPH_SPLIT_RE.split(content):
        paragraph = paragraph.strip()
        if len(paragraph) > min_paragraph_chars:
            sections.append(paragraph)

    return list(dict.fromkeys(sections))


def extract_keywords(text: str, limit: int = 30) -> list[str]:
    """Top *limit* tokens by frequency; ties keep first-seen order."""
    lowered = text.lower()
    tokens: list[str] = []

    for pattern in _KEYWORD_PATTERNS:
        tokens.extend(pattern.findall(lowered))

    tokens.extend(w for w in _WORD_SPLIT_RE.split(lowered) if len(w) >= 2)

    counts: Counter[str] = Counter()
    for token in tokens:
        token = token.strip()
        if len(token) >= 2:
            counts[token] += 1

    # Counter preserves insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return [keyword for keyword, _ in ranked[:limit]]


def generate_summary(content: str, length: int = 200) -> str:
    cleaned = _HEADING_MARKER_RE.sub("", content).strip()
    if len(cleaned) > length:
        return cleaned[:length] + "..."
    return cleaned


def build_document(path: Path, content: str, config: Config | None = None) -> Document:
    config = config or Config()
    path = Path(path)
    return Document(
        id=path.name,
        title=extract_title(path.name, content),
        content=content,
        file_path=str(path),
        type=detect_type(path.name),
        sections=extract_sections(content, config.min_paragraph_chars),
        keywords=extract_keywords(content, config.keyword_limit),
        summary=generate_summary(content, config.summary_chars),
    )
