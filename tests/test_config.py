"""Tests for Config loading and persistence."""
import json

from docseek.config import Config


class TestDefaults:
    def test_values(self):
        config = Config()
        assert config.docs_path == "public/documents"
        assert config.search_limit == 5
        assert config.keyword_limit == 30
        assert config.vocabulary_path == ""

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("DOCSEEK_SEARCH_LIMIT", "9")
        monkeypatch.setenv("DOCSEEK_DOCS_PATH", "/srv/docs")
        config = Config()
        assert config.search_limit == 9
        assert config.docs_path == "/srv/docs"


class TestLoadSave:
    def test_missing_file_uses_defaults(self, tmp_path):
        config = Config.load(tmp_path / "config.json")
        assert config.search_limit == 5

    def test_file_overrides(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"search_limit": 7, "docs_path": "", "unknown_key": 1}))
        config = Config.load(path)
        assert config.search_limit == 7
        # empty strings are ignored
        assert config.docs_path == "public/documents"
        assert not hasattr(config, "unknown_key")

    def test_corrupt_file_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert Config.load(path).search_limit == 5

    def test_roundtrip(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        Config(search_limit=11, docs_path="/tmp/docs").save(path)
        loaded = Config.load(path)
        assert loaded.search_limit == 11
        assert loaded.docs_path == "/tmp/docs"


class TestSafeDict:
    def test_docs_path_resolved(self, tmp_path):
        d = Config(docs_path=str(tmp_path)).to_safe_dict()
        assert d["docs_path"] == str(tmp_path.resolve())
        assert d["web_port"] == 8080
