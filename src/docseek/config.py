# Docseek – In-process document search for retrieval-augmented prompts
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Central configuration – configurable via:
1. Environment variables (DOCSEEK_ prefix)
2. .env file
3. /data/config.json (written by Config.save())
"""
import json
from pathlib import Path
from pydantic_settings import BaseSettings

CONFIG_FILE = Path("/data/config.json")


class Config(BaseSettings):
    # ── Documents ────────────────────────────────
    docs_path: str = "public/documents"

    # ── Processing ───────────────────────────────
    keyword_limit: int = 30
    min_paragraph_chars: int = 30
    summary_chars: int = 200

    # ── Search ───────────────────────────────────
    search_limit: int = 5
    similar_limit: int = 3
    snippet_max_chars: int = 400
    section_max_chars: int = 400
    vocabulary_path: str = ""

    # ── Server ───────────────────────────────────
    web_host: str = "0.0.0.0"
    web_port: int = 8080

    class Config:
        env_prefix = "DOCSEEK_"
        env_file = ".env"

    @classmethod
    def load(cls, config_file: Path = CONFIG_FILE) -> "Config":
        """Load config: ENV -> .env -> config.json overrides."""
        config = cls()

        if config_file.exists():
            try:
                overrides = json.loads(config_file.read_text())
                for key, value in overrides.items():
                    if hasattr(config, key) and value != "":
                        setattr(config, key, value)
            except Exception as e:
                print(f"Warning: Config file error: {e}")

        return config

    def save(self, config_file: Path = CONFIG_FILE):
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(
            json.dumps(self.model_dump(), indent=2, default=str)
        )

    def to_safe_dict(self) -> dict:
        """Config for display (resolved docs path)."""
        d = self.model_dump()
        d["docs_path"] = str(Path(self.docs_path).resolve())
        return d
