"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del core (ProcessedDocument, EnhancedChunk, MatchResult,
    CitationFragment, CitationPosition)

Responsabilidades:
    - Definir las estructuras que cruzan la frontera del core
      (entrada de ingesta, salida de chunking, entrada/salida de citas).
    - Mantener invariantes simples (rangos ordenados, confidence en [0, 1]).
      Violarlos levanta InvalidEntityError.
    - Serializar a dict para quien persiste metadata (vector store).

Colaboradores:
    - infrastructure/text/enhanced_chunker.py: produce EnhancedChunk.
    - application/fuzzy_citation.py: produce MatchResult / CitationPosition.
    - Llamadores externos (ingesta, búsqueda, UI de resaltado).
    - crosscutting/exceptions.py: InvalidEntityError.

Principios:
    - Sin dependencias a DB/HTTP/vector stores.
    - Inmutables (frozen): se crean una vez y no se mutan.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Final, List, Optional

from ..crosscutting.exceptions import InvalidEntityError

_MIN_CONFIDENCE: Final[float] = 0.0
_MAX_CONFIDENCE: Final[float] = 1.0


def _check_span(entity: str, start: int, end: int) -> None:
    if start < 0 or end < start:
        raise InvalidEntityError(entity, f"Rango inválido: [{start}, {end})")


def _check_confidence(entity: str, value: float) -> None:
    if not (_MIN_CONFIDENCE <= value <= _MAX_CONFIDENCE):
        raise InvalidEntityError(
            entity,
            f"Confidence must be between {_MIN_CONFIDENCE} and {_MAX_CONFIDENCE}, "
            f"got {value}"
        )


# ---------------------------------------------------------------------------
# Documento procesado (entrada del chunking)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DocumentPage:
    """Texto de una página tal como lo entrega el extractor."""

    page_number: int
    text: str


@dataclass(frozen=True)
class ProcessedDocument:
    """
    Documento ya extraído/normalizado a markdown.

    Notas:
      - `pages` puede venir vacío (extractores sin desglose por página).
      - Se asume que las páginas concatenadas con un separador de 1 carácter
        reproducen (aproximadamente) `text`.
    """

    text: str
    pages: List[DocumentPage] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> "ProcessedDocument":
        """Documento de una sola página (útil para texto plano/scrapes)."""
        return cls(text=text, pages=[DocumentPage(page_number=1, text=text)])


# ---------------------------------------------------------------------------
# Chunks
# ---------------------------------------------------------------------------


class ChunkType(str, Enum):
    """Clasificación informativa del chunk (no afecta el matching)."""

    PARAGRAPH = "paragraph"
    SECTION_HEADER = "section_header"
    LIST_ITEM = "list_item"
    TABLE = "table"
    MIXED = "mixed"


@dataclass(frozen=True, slots=True)
class EnhancedChunk:
    """
    Chunk con posición y contexto para relocalizarlo más tarde.

    Invariantes:
      - 0 <= original_start_char < original_end_char <= len(documento)
      - documento[original_start_char:original_end_char] == text
    """

    text: str
    chunk_index: int
    original_start_char: int
    original_end_char: int
    chunk_type: ChunkType = ChunkType.PARAGRAPH
    context_before: Optional[str] = None
    context_after: Optional[str] = None
    page_number: Optional[int] = None
    section_title: Optional[str] = None

    def __post_init__(self) -> None:
        _check_span("EnhancedChunk", self.original_start_char, self.original_end_char)
        if self.original_start_char == self.original_end_char:
            raise InvalidEntityError("EnhancedChunk", "Un chunk no puede ser vacío")

    def to_metadata(self) -> Dict[str, Any]:
        """
        Metadata plana para guardar junto al embedding.

        Los vector stores no aceptan null: se omiten los campos None.
        """
        raw: Dict[str, Any] = {
            "text": self.text,
            "chunk_index": self.chunk_index,
            "original_start_char": self.original_start_char,
            "original_end_char": self.original_end_char,
            "chunk_type": self.chunk_type.value,
            "context_before": self.context_before,
            "context_after": self.context_after,
            "page_number": self.page_number,
            "section_title": self.section_title,
        }
        return {k: v for k, v in raw.items() if v is not None}


# ---------------------------------------------------------------------------
# Matching / citas
# ---------------------------------------------------------------------------


class MatchStrategy(str, Enum):
    """Paso de la cascada que produjo el match."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    TABLE = "table"
    SENTENCE = "sentence"


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Mejor span encontrado para un texto buscado (offsets sobre el original)."""

    text: str
    start_index: int
    end_index: int
    confidence: float
    strategy: MatchStrategy

    def __post_init__(self) -> None:
        _check_span("MatchResult", self.start_index, self.end_index)
        _check_confidence("MatchResult", self.confidence)


@dataclass(frozen=True)
class CitationFragment:
    """Resultado de búsqueda a relocalizar: chunk + contexto guardado."""

    chunk_text: str
    context_before: Optional[str] = None
    context_after: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def search_text(self) -> str:
        """contextBefore + chunk + contextAfter, omitiendo partes vacías."""
        parts = [self.context_before, self.chunk_text, self.context_after]
        return " ".join(p for p in parts if p)

    @classmethod
    def from_chunk(cls, chunk: EnhancedChunk) -> "CitationFragment":
        return cls(
            chunk_text=chunk.text,
            context_before=chunk.context_before,
            context_after=chunk.context_after,
        )


@dataclass(frozen=True, slots=True)
class CitationPosition:
    """
    Span resaltable para la UI.

    matched_text: lo que realmente se encontró en el documento.
    highlight_text: el chunk original que el llamador quiere resaltar.
    """

    start_index: int
    end_index: int
    confidence: float
    matched_text: str
    highlight_text: str

    def __post_init__(self) -> None:
        _check_span("CitationPosition", self.start_index, self.end_index)
        _check_confidence("CitationPosition", self.confidence)

    def overlaps(self, start: int, end: int) -> bool:
        """True si [start, end) se intersecta con este span (incluye contención)."""
        return start < self.end_index and end > self.start_index

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_index": self.start_index,
            "end_index": self.end_index,
            "confidence": round(self.confidence, 4),
            "matched_text": self.matched_text,
            "highlight_text": self.highlight_text,
        }


@dataclass(frozen=True, slots=True)
class TextContext:
    """Texto alrededor de un span (y dónde empieza/termina ese contexto)."""

    before: str
    after: str
    before_index: int
    after_index: int
