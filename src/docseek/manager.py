# Docseek – In-process document search for retrieval-augmented prompts
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Engine lifecycle – one shared SearchEngine per manager handle.

The engine is built lazily on first use. force_reindex() builds a brand-new
engine and swaps it in only after indexing succeeded, so concurrent searches
always hold either the old or the new complete engine.

Rebuilds are serialized. A caller that had to wait while another rebuild
started *after* its own request reuses that result instead of scanning the
directory again (the newer scan already reflects its file changes).
"""
import threading
import time
from typing import Optional

from .config import Config
from .health import HealthTracker
from .indexer import SearchEngine
from .scoring import Vocabulary, load_vocabulary


class EngineManager:
    def __init__(
        self,
        config: Config,
        health: HealthTracker | None = None,
        vocabulary: Vocabulary | None = None,
    ):
        self.config = config
        self.health = health
        self.vocabulary = vocabulary or load_vocabulary(config.vocabulary_path)
        self._engine: Optional[SearchEngine] = None
        self._rebuild_lock = threading.Lock()
        self._builds_started = 0
        self._last_built = 0
        self._last_index_time = 0.0

    @property
    def last_index_time(self) -> float:
        """Epoch seconds of the last successful build (0.0 if none yet)."""
        return self._last_index_time

    @property
    def engine(self) -> Optional[SearchEngine]:
        """Current engine without triggering a build."""
        return self._engine

    def get_engine(self) -> SearchEngine:
        engine = self._engine
        if engine is not None:
            return engine
        with self._rebuild_lock:
            if self._engine is None:
                print("Creating search engine ...")
                self._build()
            return self._engine

    def force_reindex(self) -> SearchEngine:
        """Rebuild from the docs directory, e.g. after an upload or delete."""
        ticket = self._builds_started
        with self._rebuild_lock:
            if self._last_built > ticket:
                return self._engine
            print("Forced re-index ...")
            return self._build()

    def _build(self) -> SearchEngine:
        self._builds_started += 1
        seq = self._builds_started
        engine = SearchEngine(self.config, self.vocabulary)
        started = time.perf_counter()
        try:
            result = engine.index_documents(self.config.docs_path)
        except Exception as e:
            if self.health:
                self.health.record_index(
                    ok=False,
                    elapsed_ms=(time.perf_counter() - started) * 1000,
                    error=str(e),
                )
            print(f"Index build failed: {e}")
            raise

        self._engine = engine
        self._last_built = seq
        self._last_index_time = time.time()
        if self.health:
            self.health.record_index(
                ok=True,
                documents=result["files_indexed"],
                keywords=result["keywords_total"],
                skipped=result["files_skipped"],
                elapsed_ms=(time.perf_counter() - started) * 1000,
            )
        return engine
