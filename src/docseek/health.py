# Docseek – In-process document search for retrieval-augmented prompts
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Index and search status shared by the engine manager and the HTTP API.

One lock guards a flat dict; status returns a copy with derived averages.
"""
import threading
from datetime import datetime, timezone


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class HealthTracker:
    def __init__(self):
        self._lock = threading.Lock()
        self._data = {
            "started_at": _now(),

            # index builds
            "index_builds": 0,
            "index_failures": 0,
            "last_index_at": None,
            "last_index_ok": False,
            "last_index_documents": 0,
            "last_index_skipped": 0,
            "last_index_keywords": 0,
            "last_index_ms": None,
            "last_index_error": None,

            # queries
            "searches_total": 0,
            "searches_hits": 0,
            "searches_misses": 0,
            "search_results_total": 0,
            "search_ms_total": 0.0,
            "last_search_at": None,
        }

    def record_index(
        self,
        ok: bool,
        documents: int = 0,
        keywords: int = 0,
        skipped: int = 0,
        elapsed_ms: float | None = None,
        error: str | None = None,
    ):
        """A failed build keeps the previous document/keyword counts."""
        with self._lock:
            d = self._data
            d["last_index_at"] = _now()
            d["last_index_ok"] = ok
            d["last_index_error"] = error
            d["last_index_ms"] = elapsed_ms
            if ok:
                d["index_builds"] += 1
                d["last_index_documents"] = documents
                d["last_index_keywords"] = keywords
                d["last_index_skipped"] = skipped
            else:
                d["index_failures"] += 1

    def record_search(self, results: int, elapsed_ms: float = 0.0):
        with self._lock:
            d = self._data
            d["searches_total"] += 1
            d["searches_hits" if results else "searches_misses"] += 1
            d["search_results_total"] += results
            d["search_ms_total"] += elapsed_ms
            d["last_search_at"] = _now()

    @property
    def status(self) -> dict:
        with self._lock:
            snapshot = dict(self._data)
        total = snapshot["searches_total"]
        snapshot["avg_search_ms"] = round(snapshot["search_ms_total"] / total, 3) if total else None
        snapshot["avg_results"] = round(snapshot["search_results_total"] / total, 3) if total else None
        return snapshot

    @property
    def is_healthy(self) -> bool:
        """Healthy once the most recent build succeeded."""
        with self._lock:
            return self._data["last_index_ok"]
