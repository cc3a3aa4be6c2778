"""
===============================================================================
CRC CARD — infrastructure/text/enhanced_chunker.py
===============================================================================

Componente:
  Chunking con preservación de contexto (markdown-aware)

Responsabilidades:
  - Partir un documento procesado en chunks ordenados para embeddings.
  - Respetar límites naturales (bloques, oraciones, párrafos).
  - Adjuntar metadata para relocalizar el chunk más tarde:
      * offsets exactos sobre el texto completo
      * contexto antes/después
      * página y título de sección
  - Exponer:
      * create_enhanced_chunks(...) -> list[EnhancedChunk]
      * EnhancedChunker (servicio con opciones validadas)

Colaboradores:
  - infrastructure/text/markdown.py (headers, bloques, páginas)
  - infrastructure/text/models.py (ChunkingOptions, TextSection)
  - domain/entities.py (ProcessedDocument, EnhancedChunk)

Decisiones:
  - Función pura: sin IO, sin estado compartido.
  - Offsets exactos: documento[start:end] == chunk.text.
  - Cola corta de una sección larga: se une al chunk anterior si entra en
    max_chunk_size (evita perder texto); si no, se descarta.
===============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from ...crosscutting.exceptions import InvalidInputError
from ...crosscutting.logger import logger
from ...domain.entities import ChunkType, EnhancedChunk, ProcessedDocument
from .markdown import (
    extract_headers,
    find_page_number,
    find_section_title,
    split_into_sections,
)
from .models import ChunkingOptions, TextSection

_SENTENCE_END: Final[re.Pattern] = re.compile(r"[.!?]+\s+")

# Ventanas de búsqueda de cortes alrededor del objetivo (caracteres).
_SENTENCE_LOOKBACK: Final[int] = 200
_SENTENCE_LOOKAHEAD: Final[int] = 50
_PARAGRAPH_LOOKBACK: Final[int] = 300
_PARAGRAPH_LOOKAHEAD: Final[int] = 100

_KIND_TO_CHUNK_TYPE: Final[dict[str, ChunkType]] = {
    "section": ChunkType.SECTION_HEADER,
    "list": ChunkType.LIST_ITEM,
    "table": ChunkType.TABLE,
    "paragraph": ChunkType.PARAGRAPH,
}


@dataclass(frozen=True, slots=True)
class _Span:
    """Chunk todavía sin metadata (offsets absolutos)."""

    text: str
    start: int
    end: int
    chunk_type: ChunkType


def find_sentence_boundary(text: str, start: int, target: int, min_size: int) -> int:
    """
    Último fin de oración (`.!?` + whitespace) cerca de `target`.

    Acepta cortes en [start + min_size, target + 50], buscando desde
    target - 200. Si no hay, devuelve `target`.
    """
    search_start = max(start, target - min(_SENTENCE_LOOKBACK, target - start))
    region = text[search_start : target + 2 * _SENTENCE_LOOKAHEAD]

    best = target
    for m in _SENTENCE_END.finditer(region):
        pos = search_start + m.end()
        if start + min_size <= pos <= target + _SENTENCE_LOOKAHEAD:
            best = pos
    return best


def find_paragraph_boundary(text: str, start: int, target: int, min_size: int) -> int:
    """
    Primer `\\n\\n` en la ventana [target - 300, target + 150).

    Se acepta si el corte queda en [start + min_size, target + 100].
    Si no, devuelve `target`.
    """
    search_start = max(start, target - min(_PARAGRAPH_LOOKBACK, target - start))
    region = text[search_start : target + _PARAGRAPH_LOOKAHEAD + 50]

    idx = region.find("\n\n")
    if idx != -1:
        pos = search_start + idx + 2
        if start + min_size <= pos <= target + _PARAGRAPH_LOOKAHEAD:
            return pos
    return target


def _chunk_section(section: TextSection, options: ChunkingOptions) -> list[_Span]:
    text = section.text
    base = section.start_position
    chunk_type = _KIND_TO_CHUNK_TYPE[section.kind]

    # Caso corto: la sección entera es un chunk.
    if len(text) <= options.max_chunk_size:
        return [_Span(text, base, section.end_position, chunk_type)]

    spans: list[_Span] = []
    current = 0
    total = len(text)

    while current < total:
        end = min(current + options.chunk_size, total)

        if options.preserve_sentences and end < total:
            sentence_end = find_sentence_boundary(
                text, current, end, options.min_chunk_size
            )
            if sentence_end > current + options.min_chunk_size:
                end = sentence_end

        # El corte por párrafo se prueba después y puede pisar al de oración.
        # split_into_sections ya corta en `\n\s*\n`: una sección nunca trae
        # "\n\n", así que desde create_enhanced_chunks este paso no cambia el corte.
        if options.preserve_paragraphs and end < total:
            paragraph_end = find_paragraph_boundary(
                text, current, end, options.min_chunk_size
            )
            if paragraph_end > current + options.min_chunk_size:
                end = paragraph_end

        end = min(end, total)
        piece = text[current:end]
        stripped = piece.strip()

        if len(stripped) >= options.min_chunk_size:
            start = base + current + (len(piece) - len(piece.lstrip()))
            spans.append(_Span(stripped, start, start + len(stripped), chunk_type))
        elif stripped and end == total and spans:
            spans[-1] = _merge_tail(spans[-1], section, end, options)

        # Garantiza progreso.
        current = end if end > current else current + 1

    return spans


def _merge_tail(
    previous: _Span, section: TextSection, tail_end: int, options: ChunkingOptions
) -> _Span:
    """Une la cola corta al chunk anterior si el resultado entra en max_chunk_size."""
    rel_start = previous.start - section.start_position
    merged = section.text[rel_start:tail_end].rstrip()
    if len(merged) > options.max_chunk_size:
        return previous
    return _Span(merged, previous.start, previous.start + len(merged), previous.chunk_type)


def _context_before(full_text: str, position: int, radius: int) -> str | None:
    if radius <= 0:
        return None
    return full_text[max(0, position - radius) : position].strip() or None


def _context_after(full_text: str, position: int, radius: int) -> str | None:
    if radius <= 0:
        return None
    return full_text[position : position + radius].strip() or None


def create_enhanced_chunks(
    document: ProcessedDocument | str,
    options: ChunkingOptions | None = None,
) -> list[EnhancedChunk]:
    """
    Parte el documento en chunks con contexto.

    Pasos:
      1. headers markdown (para section_title)
      2. bloques por línea en blanco (section | list | table | paragraph)
      3. chunking por bloque con cortes en oraciones/párrafos
      4. contexto, página, sección e índice correlativo
    """
    if isinstance(document, str):
        document = ProcessedDocument.from_text(document)
    if not isinstance(document, ProcessedDocument):
        raise InvalidInputError("document", "ProcessedDocument | str", document)
    if not isinstance(document.text, str):
        raise InvalidInputError("document.text", "str", document.text)

    opts = options or ChunkingOptions()
    full_text = document.text

    headers = extract_headers(full_text)
    sections = split_into_sections(full_text)

    chunks: list[EnhancedChunk] = []
    for section in sections:
        for span in _chunk_section(section, opts):
            chunks.append(
                EnhancedChunk(
                    text=span.text,
                    chunk_index=len(chunks),
                    original_start_char=span.start,
                    original_end_char=span.end,
                    chunk_type=span.chunk_type,
                    context_before=_context_before(
                        full_text, span.start, opts.context_radius
                    ),
                    context_after=_context_after(
                        full_text, span.end, opts.context_radius
                    ),
                    page_number=find_page_number(span.start, document.pages),
                    section_title=find_section_title(span.start, headers),
                )
            )

    logger.info(
        "Chunks con contexto creados",
        extra={
            "chunk_count": len(chunks),
            "section_count": len(sections),
            "header_count": len(headers),
            "document_chars": len(full_text),
        },
    )
    return chunks


class EnhancedChunker:
    """
    Servicio de chunking con contexto.

    Diseño:
      - Opciones validadas al construir (fail-fast).
      - Sin estado mutable: una instancia puede compartirse entre threads.
    """

    def __init__(self, options: ChunkingOptions | None = None) -> None:
        self.options = options or ChunkingOptions()

    def chunk(self, document: ProcessedDocument | str) -> list[EnhancedChunk]:
        return create_enhanced_chunks(document, self.options)
