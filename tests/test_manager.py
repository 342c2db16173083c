"""Tests for the EngineManager lifecycle."""
import shutil
import threading

import pytest

from docseek.config import Config
from docseek.indexer import SearchEngine
from docseek.manager import EngineManager


@pytest.fixture
def manager(config, health):
    return EngineManager(config, health)


class TestGetEngine:
    def test_lazy(self, manager):
        assert manager.engine is None
        assert manager.last_index_time == 0.0

    def test_builds_on_first_use(self, manager):
        engine = manager.get_engine()
        assert isinstance(engine, SearchEngine)
        assert engine.is_ready()
        assert engine.get_stats()["totalDocuments"] == 3
        assert manager.last_index_time > 0

    def test_reuses_instance(self, manager):
        assert manager.get_engine() is manager.get_engine()

    def test_concurrent_first_use_builds_once(self, manager):
        engines: list[SearchEngine] = []

        def worker():
            engines.append(manager.get_engine())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len({id(e) for e in engines}) == 1
        assert manager.health.status["index_builds"] == 1

    def test_missing_directory_raises_then_recovers(self, tmp_path, health):
        docs = tmp_path / "later"
        manager = EngineManager(Config(docs_path=str(docs)), health)
        with pytest.raises(FileNotFoundError):
            manager.get_engine()
        assert health.status["last_index_ok"] is False
        assert manager.engine is None

        docs.mkdir()
        (docs / "x.md").write_text("# X\n\nnow present")
        assert manager.get_engine().get_stats()["totalDocuments"] == 1


class TestForceReindex:
    def test_replaces_engine(self, manager, tmp_docs):
        first = manager.get_engine()
        (tmp_docs / "new.md").write_text("# New\n\nJust uploaded.")
        second = manager.force_reindex()
        assert second is not first
        assert second.get_stats()["totalDocuments"] == 4
        assert manager.get_engine() is second
        # the old engine is still a complete index for in-flight searches
        assert first.get_stats()["totalDocuments"] == 3

    def test_without_prior_engine(self, manager):
        engine = manager.force_reindex()
        assert engine.is_ready()

    def test_failure_keeps_previous_engine(self, manager, tmp_docs, health):
        first = manager.get_engine()
        shutil.rmtree(tmp_docs)
        with pytest.raises(FileNotFoundError):
            manager.force_reindex()
        assert manager.get_engine() is first
        assert first.search("weather")[0].document.id == "b.txt"
        assert health.status["last_index_ok"] is False
        assert health.status["last_index_error"]
        assert health.status["index_failures"] == 1

    def test_records_health(self, manager, health):
        manager.force_reindex()
        status = health.status
        assert status["last_index_ok"] is True
        assert status["last_index_documents"] == 3
        assert status["last_index_keywords"] > 0
        assert status["last_index_skipped"] == 1
        assert status["last_index_ms"] >= 0

    def test_sequential_calls_each_rebuild(self, manager):
        a = manager.force_reindex()
        b = manager.force_reindex()
        assert a is not b

    def test_concurrent_rebuilds_serialized(self, manager, health):
        manager.get_engine()
        results: list[SearchEngine] = []
        errors: list[Exception] = []

        def worker():
            try:
                results.append(manager.force_reindex())
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []
        assert len(results) == 6
        assert all(r.get_stats()["totalDocuments"] == 3 for r in results)
        # 1 initial build + at most one per caller, usually fewer (coalesced)
        assert 2 <= health.status["index_builds"] <= 7
        assert manager.get_engine() in results
