# Docseek – In-process document search for retrieval-augmented prompts
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Entry point: python -m docseek

Builds the index once, then serves the HTTP API with uvicorn.
"""
import uvicorn

from .config import Config
from .health import HealthTracker
from .manager import EngineManager
from .web import create_web_app


def main():
    config = Config.load()
    health = HealthTracker()
    manager = EngineManager(config, health)

    print(f"Initial indexing {config.docs_path} ...")
    try:
        engine = manager.get_engine()
        print(f"Done: {engine.get_stats()}")
    except OSError as e:
        print(f"Warning: Initial indexing failed: {e}")

    web_app = create_web_app(config, manager, health)
    print(f"Web API running on http://{config.web_host}:{config.web_port}")
    uvicorn.run(
        web_app, host=config.web_host, port=config.web_port,
        log_level="warning",
    )


if __name__ == "__main__":
    main()
