# Docseek – In-process document search for retrieval-augmented prompts
# Copyright (c) 2026 4rce.com Digital Technologies GmbH.
# Use of this software is governed by the Business Source License 1.1. See LICENSE.md.

"""Tests for the document loader."""

import pytest

from docseek.readers import SUPPORTED_EXTENSIONS, extract_text, iter_documents, list_files


@pytest.fixture
def tmp(tmp_path):
    return tmp_path


class TestSupportedExtensions:
    def test_three_formats(self):
        assert SUPPORTED_EXTENSIONS == {".md", ".txt", ".pdf"}

    def test_unsupported_returns_none(self, tmp):
        f = tmp / "data.xlsx"
        f.write_text("some data")
        assert extract_text(f) is None

    def test_nonexistent_file_returns_none(self, tmp):
        assert extract_text(tmp / "ghost.md") is None


class TestExtractText:
    def test_markdown_passthrough(self, tmp):
        f = tmp / "readme.md"
        f.write_text("# Hello\n\nWorld", encoding="utf-8")
        assert extract_text(f) == "# Hello\n\nWorld"

    def test_text_passthrough(self, tmp):
        f = tmp / "notes.txt"
        f.write_text("These are my notes.\nLine two.", encoding="utf-8")
        assert extract_text(f) == "These are my notes.\nLine two."

    def test_uppercase_extension(self, tmp):
        f = tmp / "NOTES.TXT"
        f.write_text("upper", encoding="utf-8")
        assert extract_text(f) == "upper"

    def test_japanese_utf8(self, tmp):
        f = tmp / "会社.md"
        f.write_text("# 会社概要\n\n代表取締役 田野", encoding="utf-8")
        assert "代表取締役" in extract_text(f)

    def test_pdf_recognised_but_empty(self, tmp):
        f = tmp / "report.pdf"
        f.write_bytes(b"%PDF-1.4")
        assert extract_text(f) is None

    def test_invalid_utf8_is_skipped_with_warning(self, tmp, capsys):
        f = tmp / "broken.txt"
        f.write_bytes(b"\xff\xfe\xfa invalid")
        assert extract_text(f) is None
        assert "Warning: could not read" in capsys.readouterr().out


class TestIterDocuments:
    def test_filters_and_sorts(self, tmp):
        for name in ["b.md", "a.txt", "c.pdf", "d.png", "e.docx"]:
            (tmp / name).write_text("x")
        names = [p.name for p in iter_documents(tmp)]
        assert names == ["a.txt", "b.md", "c.pdf"]

    def test_not_recursive(self, tmp):
        (tmp / "sub").mkdir()
        (tmp / "sub" / "nested.md").write_text("# Nested")
        (tmp / "top.md").write_text("# Top")
        assert [p.name for p in iter_documents(tmp)] == ["top.md"]

    def test_directory_named_like_document_skipped(self, tmp):
        (tmp / "folder.md").mkdir()
        assert list(iter_documents(tmp)) == []

    def test_missing_directory_raises_immediately(self, tmp):
        with pytest.raises(FileNotFoundError):
            iter_documents(tmp / "missing")

    def test_file_instead_of_directory_raises(self, tmp):
        f = tmp / "plain.txt"
        f.write_text("x")
        with pytest.raises(NotADirectoryError):
            iter_documents(f)

    def test_empty_directory(self, tmp):
        assert list(iter_documents(tmp)) == []


class TestListFiles:
    def test_lists_every_file_with_metadata(self, tmp):
        (tmp / "Q3_report.md").write_text("# Q3")
        (tmp / "scan.pdf").write_bytes(b"%PDF")
        (tmp / "empty.txt").write_text("")
        (tmp / "image.png").write_bytes(b"\x89PNG")
        (tmp / "sub").mkdir()

        files = list_files(tmp)
        assert [f["name"] for f in files] == ["Q3_report.md", "empty.txt", "image.png", "scan.pdf"]
        report = files[0]
        assert report["original_name"] == "Q3 report.md"
        assert report["size"] == 4
        assert report["supported"] is True
        assert report["created_at"] and report["updated_at"]
        assert files[1]["size"] == 0
        assert files[2]["supported"] is False

    def test_missing_directory_is_empty(self, tmp):
        assert list_files(tmp / "missing") == []
