import pytest

from docseek.config import Config
from docseek.health import HealthTracker


@pytest.fixture
def tmp_docs(tmp_path):
    """Flat documents directory with markdown, text and a skipped pdf."""
    docs = tmp_path / "documents"
    docs.mkdir()
    (docs / "a.md").write_text("# Company Overview\n\nOur CEO is Jane Doe.\n")
    (docs / "b.txt").write_text("Unrelated content about weather.\n")
    (docs / "handbook.md").write_text(
        "# Employee Handbook\n\n"
        "## Vacation Policy\n\n"
        "Employees receive twenty days of paid vacation every year, "
        "requested through the HR portal at least two weeks in advance.\n\n"
        "## Remote Work\n\n"
        "Remote work is allowed three days per week with manager approval "
        "and a stable internet connection.\n"
    )
    (docs / "scan.pdf").write_bytes(b"%PDF-1.4 not parsed")
    (docs / "image.png").write_bytes(b"\x89PNG")
    return docs


@pytest.fixture
def config(tmp_docs):
    return Config(docs_path=str(tmp_docs))


@pytest.fixture
def health():
    return HealthTracker()
