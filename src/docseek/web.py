# Docseek – In-process document search for retrieval-augmented prompts
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
HTTP backend (FastAPI) – search, document listing, upload/delete + reindex.

All state (config, engine manager, health) is injected via create_web_app().
"""
import re
import time
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from . import __version__, readers
from .config import Config
from .health import HealthTracker
from .indexer import NotIndexedError, SearchEngine
from .manager import EngineManager

UPLOAD_EXTENSIONS = {".md", ".txt"}


class SearchRequest(BaseModel):
    query: str = Field(min_length=1)
    limit: Optional[int] = Field(default=None, ge=1, le=50)


class DocumentUpload(BaseModel):
    filename: str
    content: str


def check_filename(name: str) -> str:
    """Rejects anything that could leave the docs dir; the name is not changed."""
    if not name.strip() or "/" in name or "\\" in name or ".." in name or name.startswith("."):
        raise ValueError(f"Invalid filename: {name!r}")
    return name


def safe_filename(name: str) -> str:
    """Upload name with whitespace runs stored as underscores."""
    return check_filename(re.sub(r"\s+", "_", name.strip()))


def create_web_app(
    config: Config,
    manager: EngineManager,
    health: HealthTracker | None = None,
) -> FastAPI:
    """Factory: returns a FastAPI app that serves the shared engine."""

    app = FastAPI(
        title="Docseek",
        description="Document search for retrieval-augmented prompts",
    )
    docs_path = Path(config.docs_path)

    def engine_or_503() -> SearchEngine:
        try:
            return manager.get_engine()
        except OSError as e:
            raise HTTPException(status_code=503, detail=f"Index unavailable: {e}")

    def reindex() -> dict:
        try:
            engine = manager.force_reindex()
        except OSError as e:
            raise HTTPException(status_code=500, detail=f"Reindex failed: {e}")
        return engine.get_stats()

    # ── Health ───────────────────────────────────────

    @app.get("/health")
    async def health_check():
        engine = manager.engine
        status = health.status if health else {}
        return {
            "status": "ok" if (not health or health.is_healthy) else "degraded",
            "version": __version__,
            "ready": bool(engine and engine.is_ready()),
            "documents": len(engine.get_documents()) if engine else 0,
            "last_index_at": status.get("last_index_at"),
            "last_index_ok": status.get("last_index_ok"),
        }

    @app.get("/api/health")
    async def health_detail():
        return health.status if health else {}

    # ── API Endpoints ────────────────────────────────

    @app.get("/api/config")
    async def get_config():
        return {"config": config.to_safe_dict()}

    @app.get("/api/stats")
    async def get_stats():
        stats = engine_or_503().get_stats()
        stats["lastIndexTime"] = manager.last_index_time
        return stats

    @app.get("/api/documents")
    async def list_documents():
        engine = engine_or_503()
        return {
            "documents": [
                {"id": d.id, "title": d.title, "type": d.type}
                for d in engine.get_documents()
            ],
        }

    @app.get("/api/files")
    async def list_files():
        """Everything in the docs directory, including files the index skips."""
        engine = manager.engine
        indexed = {d.id for d in engine.get_documents()} if engine else set()
        files = readers.list_files(docs_path)
        for f in files:
            f["indexed"] = f["name"] in indexed
        return {"files": files}

    @app.get("/api/documents/{document_id}")
    async def get_document(document_id: str):
        doc = engine_or_503().get_document(document_id)
        if doc is None:
            raise HTTPException(status_code=404, detail="Document not found")
        return doc.to_dict(include_content=True)

    @app.get("/api/documents/{document_id}/similar")
    async def similar_documents(document_id: str, limit: Optional[int] = None):
        engine = engine_or_503()
        if engine.get_document(document_id) is None:
            raise HTTPException(status_code=404, detail="Document not found")
        similar = engine.get_similar_documents(document_id, limit)
        return {
            "id": document_id,
            "similar": [{"id": d.id, "title": d.title, "type": d.type} for d in similar],
        }

    @app.post("/api/search")
    async def search(req: SearchRequest):
        engine = engine_or_503()
        started = time.perf_counter()
        try:
            results = engine.search(req.query, req.limit)
        except NotIndexedError as e:
            raise HTTPException(status_code=503, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if health:
            health.record_search(len(results), (time.perf_counter() - started) * 1000)
        return {
            "query": req.query,
            "count": len(results),
            "results": [r.to_dict() for r in results],
        }

    @app.post("/api/reindex")
    async def trigger_reindex():
        return {"status": "success", "stats": reindex()}

    @app.post("/api/documents")
    async def upload_document(doc: DocumentUpload):
        try:
            filename = safe_filename(doc.filename)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if Path(filename).suffix.lower() not in UPLOAD_EXTENSIONS:
            raise HTTPException(status_code=400, detail="Only .md and .txt files can be uploaded")

        docs_path.mkdir(parents=True, exist_ok=True)
        (docs_path / filename).write_text(doc.content, encoding="utf-8")
        return {
            "status": "success",
            "filename": filename,
            "original_name": doc.filename,
            "size": len(doc.content.encode("utf-8")),
            "stats": reindex(),
        }

    @app.delete("/api/documents/{filename}")
    async def delete_document(filename: str):
        try:
            filename = check_filename(filename)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        target = docs_path / filename
        if not target.is_file():
            raise HTTPException(status_code=404, detail="File not found")
        target.unlink()
        return {"status": "success", "filename": filename, "stats": reindex()}

    return app
