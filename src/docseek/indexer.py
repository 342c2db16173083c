# Docseek – In-process document search for retrieval-augmented prompts
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Documents directory -> Documents -> keyword index -> ranked search results

The index is an immutable snapshot. index_documents() builds a complete new
snapshot and swaps the reference only when the build succeeded, so:
- searches running during a rebuild see the old (complete) index
- a rebuild that fails (e.g. directory gone) keeps the previous index

Rebuilds on one engine are serialized by a lock; searches take no lock.
"""
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import Config
from .processor import Document, build_document
from .readers import iter_documents, extract_text
from .scoring import (
    INCLUSION_THRESHOLD,
    Vocabulary,
    load_vocabulary,
    score_document,
    text_similarity,
)
from .snippets import extract_snippet

KEYWORD_OVERLAP_WEIGHT = 0.1
TITLE_SIMILARITY_WEIGHT = 0.3


class NotIndexedError(RuntimeError):
    """search() was called before any successful index_documents()."""

    def __init__(self, message: str = "Documents not indexed yet"):
        super().__init__(message)


@dataclass(frozen=True)
class SearchIndex:
    documents: tuple[Document, ...] = ()
    keyword_index: dict[str, frozenset[str]] = field(default_factory=dict)
    is_indexed: bool = False


@dataclass
class SearchResult:
    document: Document
    score: float
    snippet: str
    relevant_sections: list[str] = field(default_factory=list)
    matched_keywords: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.document.id,
            "title": self.document.title,
            "type": self.document.type,
            "snippet": self.snippet,
            "score": round(self.score, 4),
            "matched_keywords": self.matched_keywords,
            "relevant_sections": self.relevant_sections,
            "summary": self.document.summary,
        }


def build_index(documents: list[Document]) -> SearchIndex:
    keyword_ids: dict[str, set[str]] = {}
    for doc in documents:
        for keyword in doc.keywords:
            keyword_ids.setdefault(keyword, set()).add(doc.id)
    return SearchIndex(
        documents=tuple(documents),
        keyword_index={k: frozenset(v) for k, v in keyword_ids.items()},
        is_indexed=True,
    )


class SearchEngine:
    def __init__(self, config: Config | None = None, vocabulary: Vocabulary | None = None):
        self.config = config or Config()
        self.vocabulary = vocabulary or load_vocabulary(self.config.vocabulary_path)
        self._index = SearchIndex()
        self._build_lock = threading.Lock()

    # ── Indexing ─────────────────────────────────────────

    def index_documents(self, directory: str | Path | None = None) -> dict:
        """Full rebuild from the files directly inside *directory*.

        Raises OSError if the directory cannot be listed; the current index
        is left untouched in that case. Unreadable files are skipped."""
        docs_path = Path(directory if directory is not None else self.config.docs_path)

        with self._build_lock:
            files = list(iter_documents(docs_path))
            print(f"Indexing {docs_path}: {len(files)} files")

            documents: list[Document] = []
            skipped = 0
            for doc_file in files:
                content = extract_text(doc_file)
                if not content:
                    skipped += 1
                    continue
                documents.append(build_document(doc_file, content, self.config))

            index = build_index(documents)
            self._index = index

        result = {
            "status": "success",
            "files_indexed": len(index.documents),
            "files_skipped": skipped,
            "keywords_total": len(index.keyword_index),
            "docs_path": str(docs_path),
        }
        print(
            f"Index: {len(index.documents)} documents ({skipped} skipped) -> "
            f"{len(index.keyword_index)} keywords"
        )
        return result

    # ── Search ───────────────────────────────────────────

    def search(self, query: str, limit: Optional[int] = None) -> list[SearchResult]:
        index = self._index
        if not index.is_indexed:
            raise NotIndexedError()
        if not query or not query.strip():
            raise ValueError("query must be a non-empty string")
        limit = self.config.search_limit if limit is None else limit

        results: list[SearchResult] = []
        for doc in index.documents:
            breakdown = score_document(
                query, doc, self.vocabulary, self.config.section_max_chars,
            )
            if breakdown.score <= INCLUSION_THRESHOLD:
                continue
            results.append(SearchResult(
                document=doc,
                score=breakdown.score,
                snippet=extract_snippet(doc.content, query, self.config.snippet_max_chars),
                relevant_sections=breakdown.relevant_sections,
                matched_keywords=breakdown.matched_keywords,
            ))

        results.sort(key=lambda r: r.score, reverse=True)
        return results[:max(limit, 0)]

    # ── Documents ────────────────────────────────────────

    def get_documents(self) -> tuple[Document, ...]:
        return self._index.documents

    def get_document(self, document_id: str) -> Optional[Document]:
        for doc in self._index.documents:
            if doc.id == document_id:
                return doc
        return None

    def get_similar_documents(self, document_id: str, limit: Optional[int] = None) -> list[Document]:
        """Related documents by shared keywords and title overlap, best first."""
        index = self._index
        limit = self.config.similar_limit if limit is None else limit
        target = next((d for d in index.documents if d.id == document_id), None)
        if target is None:
            return []

        target_keywords = set(target.keywords)
        scored: list[tuple[Document, float]] = []
        for doc in index.documents:
            if doc.id == document_id:
                continue
            score = len(target_keywords.intersection(doc.keywords)) * KEYWORD_OVERLAP_WEIGHT
            score += text_similarity(target.title, doc.title) * TITLE_SIMILARITY_WEIGHT
            if score > 0:
                scored.append((doc, score))

        scored.sort(key=lambda item: item[1], reverse=True)
        return [doc for doc, _ in scored[:max(limit, 0)]]

    # ── Stats ────────────────────────────────────────────

    def is_ready(self) -> bool:
        return self._index.is_indexed

    def get_stats(self) -> dict:
        index = self._index
        type_counts: dict[str, int] = {}
        for doc in index.documents:
            type_counts[doc.type] = type_counts.get(doc.type, 0) + 1
        return {
            "totalDocuments": len(index.documents),
            "totalKeywords": len(index.keyword_index),
            "isIndexed": index.is_indexed,
            "documentTypes": type_counts,
        }
