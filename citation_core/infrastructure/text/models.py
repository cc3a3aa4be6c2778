"""
===============================================================================
CRC CARD — infrastructure/text/models.py
===============================================================================

Modelos:
  ChunkingOptions (configuración validada)
  MarkdownHeader (header detectado en el documento)
  TextSection (bloque separado por línea en blanco)

Responsabilidades:
  - Representar opciones de chunking con validación fail-fast.
  - Transportar la estructura markdown detectada con offsets reales.

Colaboradores:
  - infrastructure/text/markdown.py
  - infrastructure/text/enhanced_chunker.py
  - crosscutting/config.py (Settings -> ChunkingOptions)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from ...crosscutting.exceptions import InvalidOptionsError

if TYPE_CHECKING:
    from ...crosscutting.config import Settings

SectionKind = Literal["section", "paragraph", "list", "table"]


@dataclass(frozen=True)
class ChunkingOptions:
    """
    Opciones del motor de chunking.

    Diseño:
      - chunk_size: tamaño objetivo de cada ventana (caracteres).
      - context_radius: caracteres de contexto guardados antes/después.
      - min_chunk_size: candidatos más cortos (tras strip) se descartan.
      - max_chunk_size: secciones de hasta este tamaño quedan enteras.
    """

    chunk_size: int = 800
    context_radius: int = 300
    preserve_sentences: bool = True
    preserve_paragraphs: bool = True
    min_chunk_size: int = 100
    max_chunk_size: int = 1200

    def __post_init__(self) -> None:
        for name in ("chunk_size", "min_chunk_size", "max_chunk_size"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise InvalidOptionsError(name, value, "debe ser un entero > 0")
        if not isinstance(self.context_radius, int) or self.context_radius < 0:
            raise InvalidOptionsError(
                "context_radius", self.context_radius, "debe ser un entero >= 0"
            )
        if self.min_chunk_size > self.chunk_size:
            raise InvalidOptionsError(
                "min_chunk_size", self.min_chunk_size, "no puede superar chunk_size"
            )
        if self.chunk_size > self.max_chunk_size:
            raise InvalidOptionsError(
                "chunk_size", self.chunk_size, "no puede superar max_chunk_size"
            )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ChunkingOptions":
        return cls(
            chunk_size=settings.chunk_size,
            context_radius=settings.chunk_context_radius,
            preserve_sentences=settings.preserve_sentences,
            preserve_paragraphs=settings.preserve_paragraphs,
            min_chunk_size=settings.min_chunk_size,
            max_chunk_size=settings.max_chunk_size,
        )


@dataclass(frozen=True, slots=True)
class MarkdownHeader:
    """Header `#..######` con su posición (línea sin indentación)."""

    title: str
    level: int
    start_position: int
    end_position: int


@dataclass(frozen=True, slots=True)
class TextSection:
    """
    Bloque de texto entre líneas en blanco.

    start_position es el offset del texto YA recortado dentro del documento:
    documento[start_position:start_position + len(text)] == text
    """

    text: str
    kind: SectionKind
    start_position: int

    @property
    def end_position(self) -> int:
        return self.start_position + len(self.text)
