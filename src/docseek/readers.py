# Docseek – In-process document search for retrieval-augmented prompts
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""
Document loader – lists a flat directory of documents and returns their text.

Supported: .md, .txt (read as UTF-8), .pdf (recognised, content skipped)
"""
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

SUPPORTED_EXTENSIONS: set[str] = {".md", ".txt", ".pdf"}


def extract_text(filepath: Path) -> str | None:
    """Read *filepath* and return its text, or None if it has no usable content."""
    suffix = filepath.suffix.lower()
    handler = _HANDLERS.get(suffix)
    if handler is None:
        return None
    try:
        return handler(filepath)
    except Exception as exc:
        print(f"Warning: could not read {filepath}: {exc}")
        return None


def iter_documents(directory: Path) -> Iterator[Path]:
    """Yield supported files directly inside *directory*, sorted by name.

    Raises FileNotFoundError / NotADirectoryError / PermissionError when the
    directory itself cannot be listed. The listing happens eagerly, before the
    first file is yielded."""
    directory = Path(directory)
    entries = sorted(directory.iterdir(), key=lambda p: p.name)
    return (
        p for p in entries
        if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
    )


def list_files(directory: Path) -> list[dict]:
    """Every regular file directly inside *directory*, indexed or not.

    A missing directory lists as empty. Uploaded names have spaces stored as
    underscores; original_name reverses that for display."""
    directory = Path(directory)
    entries = sorted(directory.iterdir(), key=lambda p: p.name) if directory.is_dir() else []
    files = []
    for path in entries:
        if not path.is_file():
            continue
        st = path.stat()
        created = getattr(st, "st_birthtime", st.st_ctime)
        files.append({
            "name": path.name,
            "original_name": path.name.replace("_", " "),
            "size": st.st_size,
            "created_at": datetime.fromtimestamp(created, timezone.utc).isoformat(),
            "updated_at": datetime.fromtimestamp(st.st_mtime, timezone.utc).isoformat(),
            "supported": path.suffix.lower() in SUPPORTED_EXTENSIONS,
        })
    return files


# ── Per-format handlers ──────────────────────────────


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _read_pdf(path: Path) -> None:
    # PDF parsing is not supported; the file is known but yields nothing.
    return None


_HANDLERS: dict[str, callable] = {
    ".md": _read_text,
    ".txt": _read_text,
    ".pdf": _read_pdf,
}