"""
citation-core: chunking con contexto + localización difusa de citas.

Entrada de ingesta:   create_enhanced_chunks(document, options)
Entrada de búsqueda:  find_text_in_document / find_multiple_citations
"""

from .application import (
    FuzzyCitationLocator,
    FuzzyCitationOptions,
    PreparedDocument,
    citations_for_chunk,
    find_multiple_citations,
    find_text_in_document,
    get_text_context,
    prepare_document,
)
from .crosscutting.exceptions import (
    CitationCoreError,
    InvalidEntityError,
    InvalidInputError,
    InvalidOptionsError,
)
from .domain import (
    ChunkType,
    CitationFragment,
    CitationPosition,
    DocumentPage,
    EnhancedChunk,
    MatchResult,
    MatchStrategy,
    ProcessedDocument,
    TextContext,
)
from .infrastructure.text import ChunkingOptions, EnhancedChunker, create_enhanced_chunks

__version__ = "0.1.0"

__all__ = [
    "ChunkType",
    "ChunkingOptions",
    "CitationCoreError",
    "CitationFragment",
    "CitationPosition",
    "DocumentPage",
    "EnhancedChunk",
    "EnhancedChunker",
    "FuzzyCitationLocator",
    "FuzzyCitationOptions",
    "InvalidEntityError",
    "InvalidInputError",
    "InvalidOptionsError",
    "MatchResult",
    "MatchStrategy",
    "PreparedDocument",
    "ProcessedDocument",
    "TextContext",
    "citations_for_chunk",
    "create_enhanced_chunks",
    "find_multiple_citations",
    "find_text_in_document",
    "get_text_context",
    "prepare_document",
]
