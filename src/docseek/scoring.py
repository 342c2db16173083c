# Docseek – In-process document search for retrieval-augmented prompts
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Relevance scoring – additive, hand-weighted signals per document.

Signals (all weights fixed):
- full query in content / title
- each query word in content (+ repetition bonus) / title
- curated aliases for role and name queries (Vocabulary)
- "who" questions boosted by known name tokens
- section-level exact and partial matches
- lexical overlap similarity (token + character-bigram containment)

The alias vocabulary is data, not code: pass a JSON file via
Config.vocabulary_path to swap in organisation-specific names and roles.
"""
import json
import re
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, field_validator

from .processor import Document

EXACT_CONTENT_WEIGHT = 2.0
EXACT_TITLE_WEIGHT = 1.5
WORD_CONTENT_WEIGHT = 0.8
REPEAT_WEIGHT = 0.1
REPEAT_CAP = 0.5
WORD_TITLE_WEIGHT = 0.5
SECTION_EXACT_WEIGHT = 0.6
SECTION_WORD_WEIGHT = 0.2
SECTION_PARTIAL_MIN = 0.4
SIMILARITY_WEIGHT = 0.3
INCLUSION_THRESHOLD = 0.01
MAX_RELEVANT_SECTIONS = 3

_QUERY_SPLIT_RE = re.compile(r"[\s　、。，．,.|]+")
_SEGMENT_RE = re.compile(r"[あ-んア-ン一-龯a-zA-Z0-9]+")


# ── Vocabulary ───────────────────────────────────────


class AliasEntry(BaseModel):
    term: str
    weight: float = 1.5


class Vocabulary(BaseModel):
    """Trigger term -> aliases, plus the name list used for "who" questions."""
    aliases: dict[str, list[AliasEntry]] = {}
    exact_bonus: float = 0.5
    who_terms: list[str] = ["誰", "だれ", "who"]
    who_weight: float = 0.8
    names: list[str] = []

    @field_validator("aliases", mode="before")
    @classmethod
    def _normalize_aliases(cls, value):
        """Lower-case triggers; plain strings become entries ({"ceo": ["ceo", "社長"]})."""
        aliases = {}
        for trigger, entries in (value or {}).items():
            aliases.setdefault(trigger.lower(), []).extend(
                {"term": e} if isinstance(e, str) else e for e in entries
            )
        return aliases

    @classmethod
    def from_mapping(cls, data: dict) -> "Vocabulary":
        return cls.model_validate(data)


DEFAULT_VOCABULARY = Vocabulary.from_mapping({"aliases": {
    "代表": ["代表取締役", "代表", "ceo", "社長", "創業"],
    "取締役": ["代表取締役", "取締役", "director"],
    "cto": ["cto", "技術責任者", "最高技術責任者"],
    "ceo": ["ceo", "代表取締役", "社長"],
    "アドバイザー": ["アドバイザー", "advisor", "顧問"],
    "顧問": ["顧問", "アドバイザー", "advisor", "技術顧問"],
    "社長": ["社長", "ceo", "代表取締役", "代表"],
    "創業": ["創業", "founder", "立ち上げ"],
    "founder": ["founder", "創業", "co-founder"],
    "director": ["director", "取締役"],
    "advisor": ["advisor", "adviser", "顧問"],
}})


def load_vocabulary(path: str | Path = "") -> Vocabulary:
    """Vocabulary from a JSON file, or the built-in role table if *path* is empty."""
    if not path:
        return DEFAULT_VOCABULARY
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return Vocabulary.from_mapping(data)


# ── Tokenizing & similarity ──────────────────────────


def split_query(text: str) -> list[str]:
    return [w for w in _QUERY_SPLIT_RE.split(text.lower()) if w]


def tokenize(text: str) -> list[str]:
    """Word-ish runs (len >= 2) plus character bigrams of runs longer than 4."""
    tokens: list[str] = []
    for segment in _SEGMENT_RE.findall(text):
        if len(segment) >= 2:
            tokens.append(segment)
        if len(segment) > 4:
            for i in range(len(segment) - 1):
                bigram = segment[i:i + 2]
                if bigram not in tokens:
                    tokens.append(bigram)
    return tokens


def lexical_similarity(query: str, content: str) -> float:
    query_terms = tokenize(query.lower())
    if not query_terms:
        return 0.0
    content = content.lower()

    common = 0
    total = 0.0
    for term in query_terms:
        if len(term) <= 1 or term not in content:
            continue
        common += 1
        total += 2 + content.count(term) * 0.5

    if common == 0:
        return 0.0
    return min(total / len(query_terms), 1.0)


def text_similarity(a: str, b: str) -> float:
    """Jaccard similarity over tokenize() sets."""
    tokens_a = set(tokenize(a.lower()))
    tokens_b = set(tokenize(b.lower()))
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    return len(tokens_a & tokens_b) / len(union)


# ── Document scoring ─────────────────────────────────


@dataclass
class ScoreBreakdown:
    score: float = 0.0
    matched_keywords: list[str] = field(default_factory=list)
    relevant_sections: list[str] = field(default_factory=list)

    def match(self, term: str):
        if term not in self.matched_keywords:
            self.matched_keywords.append(term)


def _is_who_question(query_lower: str, query_words: list[str], who_terms: list[str]) -> bool:
    for term in who_terms:
        term = term.lower()
        # Latin terms must be whole words ("who" but not "whole")
        if term.isascii():
            if term in query_words:
                return True
        elif term in query_lower:
            return True
    return False


def score_document(
    query: str,
    document: Document,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    section_max_chars: int = 400,
) -> ScoreBreakdown:
    result = ScoreBreakdown()
    query_lower = query.lower()
    content = document.content.lower()
    title = document.title.lower()

    if query_lower in content:
        result.score += EXACT_CONTENT_WEIGHT
    if query_lower in title:
        result.score += EXACT_TITLE_WEIGHT

    query_words = split_query(query)
    words = [w for w in query_words if len(w) > 1]

    for word in words:
        if word in content:
            result.score += WORD_CONTENT_WEIGHT
            result.match(word)
            occurrences = content.count(word)
            if occurrences > 1:
                result.score += min(occurrences * REPEAT_WEIGHT, REPEAT_CAP)
        if word in title:
            result.score += WORD_TITLE_WEIGHT

    for trigger, entries in vocabulary.aliases.items():
        if trigger not in query_lower:
            continue
        for entry in entries:
            alias = entry.term.lower()
            if alias in content:
                result.score += entry.weight
                result.match(alias)
                if alias == trigger:
                    result.score += vocabulary.exact_bonus

    if vocabulary.names and _is_who_question(query_lower, query_words, vocabulary.who_terms):
        for name in vocabulary.names:
            name = name.lower()
            if name in content:
                result.score += vocabulary.who_weight
                result.match(name)

    for section in document.sections:
        section_lower = section.lower()
        if query_lower in section_lower:
            result.score += SECTION_EXACT_WEIGHT
            if len(result.relevant_sections) < MAX_RELEVANT_SECTIONS:
                result.relevant_sections.append(section[:section_max_chars])
            continue
        partial = sum(SECTION_WORD_WEIGHT for w in words if w in section_lower)
        if partial > SECTION_PARTIAL_MIN:
            result.score += partial
            if len(result.relevant_sections) < MAX_RELEVANT_SECTIONS:
                result.relevant_sections.append(section[:section_max_chars])

    result.score += lexical_similarity(query, document.content) * SIMILARITY_WEIGHT
    return result
