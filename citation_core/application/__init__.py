"""
===============================================================================
APPLICATION LAYER (Public API / Exports)
===============================================================================

Expone los puntos de entrada estables del localizador de citas:
  - find_text_in_document / find_multiple_citations
  - FuzzyCitationLocator + FuzzyCitationOptions
  - helpers: get_text_context, citations_for_chunk, prepare_document
===============================================================================
"""

from .fuzzy_citation import (
    FuzzyCitationLocator,
    FuzzyCitationOptions,
    citations_for_chunk,
    find_multiple_citations,
    find_text_in_document,
    get_text_context,
    prepare_document,
)
from .matching_strategies import PreparedDocument

__all__ = [
    "FuzzyCitationLocator",
    "FuzzyCitationOptions",
    "PreparedDocument",
    "citations_for_chunk",
    "find_multiple_citations",
    "find_text_in_document",
    "get_text_context",
    "prepare_document",
]
