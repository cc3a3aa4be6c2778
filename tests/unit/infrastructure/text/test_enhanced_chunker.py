"""
Name: Enhanced Chunker Unit Tests

Responsibilities:
  - Verify chunk offsets point back to the exact document text
  - Verify size limits, tail handling and forced progress
  - Verify context, page number and section title metadata
  - Verify option validation and input type checks

Collaborators:
  - citation_core.infrastructure.text.enhanced_chunker: Module being tested
  - conftest.py: sample documents
"""

import logging

import pytest

from citation_core.crosscutting.exceptions import (
    CitationCoreError,
    InvalidInputError,
    InvalidOptionsError,
)
from citation_core.domain import ChunkType, ProcessedDocument
from citation_core.infrastructure.text import (
    ChunkingOptions,
    EnhancedChunker,
    create_enhanced_chunks,
)
from citation_core.infrastructure.text.enhanced_chunker import (
    find_paragraph_boundary,
    find_sentence_boundary,
)


def _assert_exact_offsets(document: str, chunks) -> None:
    for chunk in chunks:
        assert document[chunk.original_start_char : chunk.original_end_char] == chunk.text


@pytest.mark.unit
class TestCreateEnhancedChunks:
    """Test suite for create_enhanced_chunks on small documents."""

    def test_small_document_keeps_sections_whole(self, fees_document):
        """R: Blocks shorter than max_chunk_size become one chunk each."""
        chunks = create_enhanced_chunks(fees_document)

        assert [c.text for c in chunks] == [
            "# Fees",
            "The license fee is $2,000 for Master license.",
            "# Notes",
            "See section 3.",
        ]
        assert [c.chunk_index for c in chunks] == [0, 1, 2, 3]
        assert [c.chunk_type for c in chunks] == [
            ChunkType.SECTION_HEADER,
            ChunkType.PARAGRAPH,
            ChunkType.SECTION_HEADER,
            ChunkType.PARAGRAPH,
        ]
        assert [c.section_title for c in chunks] == ["Fees", "Fees", "Notes", "Notes"]
        assert all(c.page_number == 1 for c in chunks)
        _assert_exact_offsets(fees_document, chunks)

    def test_context_is_trimmed_surrounding_text(self, fees_document):
        """R: Context before/after is the stripped text around the chunk."""
        chunks = create_enhanced_chunks(fees_document)

        assert chunks[0].context_before is None
        assert chunks[1].context_before == "# Fees"
        assert chunks[1].context_after == "# Notes\n\nSee section 3."
        assert chunks[-1].context_after is None

    def test_zero_context_radius_disables_context(self, fees_document):
        """R: context_radius=0 stores no context at all."""
        chunks = create_enhanced_chunks(
            fees_document, ChunkingOptions(context_radius=0)
        )

        assert all(c.context_before is None for c in chunks)
        assert all(c.context_after is None for c in chunks)

    @pytest.mark.parametrize("text", ["", "   \n\n  \n"])
    def test_empty_document_yields_no_chunks(self, text):
        """R: Empty or whitespace-only text has nothing to chunk."""
        assert create_enhanced_chunks(text) == []

    def test_accepts_processed_document(self, fees_document):
        """R: A ProcessedDocument and its raw text chunk identically."""
        from_doc = create_enhanced_chunks(ProcessedDocument.from_text(fees_document))
        from_str = create_enhanced_chunks(fees_document)

        assert from_doc == from_str


@pytest.mark.unit
class TestLongSections:
    """Test suite for sections longer than max_chunk_size."""

    def test_splits_on_sentence_endings(self, make_paragraph):
        """R: Long paragraphs are cut right after a sentence ending."""
        text = make_paragraph(60)

        chunks = create_enhanced_chunks(text)

        assert len(chunks) > 1
        for chunk in chunks:
            assert 100 <= len(chunk.text) <= 1200
            assert chunk.text.endswith(".")
        _assert_exact_offsets(text, chunks)

    def test_chunks_cover_document_in_order(self, make_paragraph):
        """R: Consecutive chunks only skip the whitespace between them."""
        text = make_paragraph(60)

        chunks = create_enhanced_chunks(text)

        for prev, nxt in zip(chunks, chunks[1:]):
            assert nxt.original_start_char >= prev.original_end_char
            assert nxt.original_start_char - prev.original_end_char <= 1
        assert chunks[0].original_start_char == 0
        assert chunks[-1].original_end_char == len(text)

    def test_text_without_boundaries_uses_fixed_windows(self):
        """R: Without sentence endings the cut falls on chunk_size."""
        text = "A" * 3000

        chunks = create_enhanced_chunks(text)

        assert [c.original_start_char for c in chunks] == [0, 800, 1600, 2400]
        assert chunks[-1].original_end_char == 3000

    def test_short_tail_is_merged_into_previous_chunk(self):
        """R: A tail shorter than min_chunk_size joins the previous chunk."""
        text = "A" * 1650

        chunks = create_enhanced_chunks(text)

        assert [(c.original_start_char, c.original_end_char) for c in chunks] == [
            (0, 800),
            (800, 1650),
        ]

    def test_short_tail_is_dropped_when_merge_exceeds_max(self):
        """R: The tail is discarded if merging would exceed max_chunk_size."""
        options = ChunkingOptions(chunk_size=1000, max_chunk_size=1000)

        chunks = create_enhanced_chunks("A" * 2050, options)

        assert [(c.original_start_char, c.original_end_char) for c in chunks] == [
            (0, 1000),
            (1000, 2000),
        ]

    def test_sentence_preservation_can_be_disabled(self, make_paragraph):
        """R: With preserve flags off, windows are cut at chunk_size."""
        text = make_paragraph(60)
        options = ChunkingOptions(preserve_sentences=False, preserve_paragraphs=False)

        chunks = create_enhanced_chunks(text, options)

        assert chunks[0].text == text[:800].strip()
        assert chunks[1].original_start_char == 800

    def test_paragraph_flag_does_not_change_section_cuts(self, make_paragraph):
        """R: Sections carry no blank lines, so cuts follow sentence endings only."""
        text = make_paragraph(60) + "\n\n" + make_paragraph(40)

        with_paragraphs = create_enhanced_chunks(
            text, ChunkingOptions(preserve_paragraphs=True)
        )
        without_paragraphs = create_enhanced_chunks(
            text, ChunkingOptions(preserve_paragraphs=False)
        )

        assert [c.to_metadata() for c in with_paragraphs] == [
            c.to_metadata() for c in without_paragraphs
        ]
        assert len(with_paragraphs) > 2


@pytest.mark.unit
class TestPagesAndSections:
    """Test suite for page and section metadata."""

    def test_page_numbers_follow_page_ranges(self, multi_page_document):
        """R: Each chunk reports the page containing its start offset."""
        chunks = create_enhanced_chunks(multi_page_document)

        assert [c.page_number for c in chunks] == [1, 1, 2, 2, 3, 3]
        _assert_exact_offsets(multi_page_document.text, chunks)

    def test_section_title_is_latest_header(self, multi_page_document):
        """R: Paragraphs inherit the title of the header above them."""
        chunks = create_enhanced_chunks(multi_page_document)

        renewal = next(c for c in chunks if c.text.startswith("Licenses"))
        assert renewal.section_title == "Renewal"
        assert [c.section_title for c in chunks] == [
            "Licensing",
            "Licensing",
            "Renewal",
            "Renewal",
            "Penalties",
            "Penalties",
        ]

    def test_to_metadata_omits_missing_values(self, fees_document):
        """R: Metadata is flat and never contains None values."""
        first = create_enhanced_chunks(fees_document)[0]

        meta = first.to_metadata()

        assert meta["chunk_type"] == "section_header"
        assert meta["original_start_char"] == 0
        assert "context_before" not in meta
        assert None not in meta.values()


@pytest.mark.unit
class TestValidation:
    """Test suite for options and input validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"chunk_size": 0},
            {"min_chunk_size": 900},
            {"chunk_size": 1300},
            {"context_radius": -1},
            {"max_chunk_size": -5},
        ],
    )
    def test_invalid_options_raise(self, kwargs):
        """R: Inconsistent options fail when the options are built."""
        with pytest.raises(InvalidOptionsError) as exc_info:
            ChunkingOptions(**kwargs)

        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.error_code == "INVALID_OPTIONS"

    def test_non_text_document_raises(self):
        """R: Anything other than ProcessedDocument or str is rejected."""
        with pytest.raises(InvalidInputError) as exc_info:
            create_enhanced_chunks(123)

        assert isinstance(exc_info.value, TypeError)
        assert isinstance(exc_info.value, CitationCoreError)


@pytest.mark.unit
class TestEnhancedChunker:
    """Test suite for the EnhancedChunker service."""

    def test_chunker_uses_its_options(self, fees_document):
        """R: The service applies the options it was built with."""
        chunker = EnhancedChunker(ChunkingOptions(context_radius=0))

        chunks = chunker.chunk(fees_document)

        assert len(chunks) == 4
        assert chunks[1].context_before is None

    def test_default_options(self):
        """R: Without options the defaults are used."""
        assert EnhancedChunker().options == ChunkingOptions()

    def test_logs_chunk_summary(self, fees_document, caplog):
        """R: Every run logs how many chunks were produced."""
        with caplog.at_level(logging.INFO, logger="citation-core"):
            EnhancedChunker().chunk(fees_document)

        records = [r for r in caplog.records if r.getMessage() == "Chunks con contexto creados"]
        assert len(records) == 1
        assert records[0].chunk_count == 4
        assert records[0].header_count == 2


@pytest.mark.unit
class TestBoundaryHelpers:
    """Test suite for sentence and paragraph boundary detection."""

    def test_sentence_boundary_after_period(self):
        """R: The cut lands right after '. '."""
        text = "A" * 150 + ". " + "B" * 200

        assert find_sentence_boundary(text, 0, 200, 100) == 152

    def test_sentence_boundary_defaults_to_target(self):
        """R: Without sentence endings the target is returned."""
        assert find_sentence_boundary("A" * 400, 0, 200, 100) == 200

    def test_sentence_boundary_respects_min_size(self):
        """R: Endings that would leave a chunk below min_size are ignored."""
        text = "A" * 50 + ". " + "A" * 300

        assert find_sentence_boundary(text, 0, 200, 100) == 200

    def test_paragraph_boundary_after_blank_line(self):
        """R: The cut lands right after the blank line."""
        text = "A" * 150 + "\n\n" + "B" * 200

        assert find_paragraph_boundary(text, 0, 200, 100) == 152

    def test_paragraph_boundary_defaults_to_target(self):
        """R: Without blank lines the target is returned."""
        assert find_paragraph_boundary("A" * 400, 0, 200, 100) == 200
