"""Utilidades de texto (chunking con contexto, markdown, normalización)."""

from .enhanced_chunker import EnhancedChunker, create_enhanced_chunks
from .markdown import extract_headers, find_table_regions, split_into_sections
from .models import ChunkingOptions, MarkdownHeader, TextSection
from .normalize import NormalizedText, clean_text, normalize_for_matching

__all__ = [
    "create_enhanced_chunks",
    "EnhancedChunker",
    "ChunkingOptions",
    "MarkdownHeader",
    "TextSection",
    "extract_headers",
    "find_table_regions",
    "split_into_sections",
    "NormalizedText",
    "clean_text",
    "normalize_for_matching",
]
