"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Make the package importable without installing it
  - Isolate Settings from any local .env file
  - Provide sample documents shared by chunking and citation tests

Collaborators:
  - pytest: Test framework
  - citation_core.crosscutting.config: Settings (env isolation)
  - citation_core.domain: ProcessedDocument, DocumentPage

Notes:
  - Fixtures are auto-discovered by pytest
  - All tests are pure unit tests (no IO, no network)
"""

import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from citation_core.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from citation_core.domain import DocumentPage, ProcessedDocument  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Sample documents
# ============================================================================

FEES_DOCUMENT = (
    "# Fees\n\nThe license fee is $2,000 for Master license.\n\n# Notes\n\nSee section 3."
)

TABLE_DOCUMENT = (
    "# Fee Schedule\n\n"
    "The following table lists the annual fees.\n\n"
    "| License Type | Annual Fee | Renewal |\n"
    "|--------------|------------|---------|\n"
    "| Master | $2,000 | Yearly |\n"
    "| Journeyman | $500 | Biennial |\n\n"
    "All fees are non-refundable once an application has been submitted."
)


def long_paragraph(sentences: int = 60) -> str:
    """Single paragraph of numbered sentences (~50 chars each)."""
    return " ".join(
        f"Sentence number {i} describes a compliance rule." for i in range(sentences)
    )


@pytest.fixture
def make_paragraph():
    return long_paragraph


@pytest.fixture
def fees_document() -> str:
    return FEES_DOCUMENT


@pytest.fixture
def table_document() -> str:
    return TABLE_DOCUMENT


@pytest.fixture
def multi_page_document() -> ProcessedDocument:
    """R: Three pages joined with a single newline, with markdown headers."""
    pages = [
        DocumentPage(
            page_number=1,
            text="# Licensing\n\nContractors must hold a valid license issued by the state board before starting any work.\n",
        ),
        DocumentPage(
            page_number=2,
            text="## Renewal\n\nLicenses must be renewed every two years. Late renewals incur a penalty of fifty dollars.\n",
        ),
        DocumentPage(
            page_number=3,
            text="## Penalties\n\nWorking without a license is a misdemeanor punishable by fines up to five thousand dollars.",
        ),
    ]
    return ProcessedDocument(text="\n".join(p.text for p in pages), pages=pages)
