"""
===============================================================================
CRC CARD — infrastructure/text/markdown.py
===============================================================================

Componente:
  Análisis de estructura markdown (headers, bloques, tablas, páginas)

Responsabilidades:
  - Detectar headers `#..######` con su offset real.
  - Separar el documento en bloques por línea en blanco, con offsets exactos
    y un tipo grueso (section | list | table | paragraph).
  - Detectar regiones de tabla (corridas de líneas que empiezan con `|`).
  - Resolver título de sección y número de página para un offset.

Colaboradores:
  - infrastructure/text/models.py (MarkdownHeader, TextSection)
  - infrastructure/text/enhanced_chunker.py
  - application/matching_strategies.py (regiones de tabla)

Notas:
  - Todo es determinístico y de una sola pasada (sin loops con contador).
===============================================================================
"""

from __future__ import annotations

import bisect
import re
from typing import Final, Iterator, Sequence

from ...domain.entities import DocumentPage
from .models import MarkdownHeader, SectionKind, TextSection

_MD_HEADER: Final[re.Pattern] = re.compile(r"^(#{1,6})\s+(.+)$")
_PARAGRAPH_BREAK: Final[re.Pattern] = re.compile(r"\n\s*\n")
_BULLET_ITEM: Final[re.Pattern] = re.compile(r"^\s*[-*+]\s+")
_NUMBERED_ITEM: Final[re.Pattern] = re.compile(r"^\s*\d+\.\s+")

# Guardrails para documentos patológicos (miles de `|` sueltos).
MAX_TABLE_REGIONS: Final[int] = 100
MAX_TABLE_ROWS: Final[int] = 50


def _iter_lines(text: str) -> Iterator[tuple[int, str]]:
    """(offset, línea) para cada línea, sin el `\\n` final."""
    pos = 0
    for line in text.split("\n"):
        yield pos, line
        pos += len(line) + 1


def extract_headers(text: str) -> list[MarkdownHeader]:
    """Headers markdown en orden de documento."""
    headers: list[MarkdownHeader] = []
    for line_start, line in _iter_lines(text):
        stripped = line.strip()
        m = _MD_HEADER.match(stripped)
        if not m:
            continue
        start = line_start + (len(line) - len(line.lstrip()))
        headers.append(
            MarkdownHeader(
                title=m.group(2).strip(),
                level=len(m.group(1)),
                start_position=start,
                end_position=start + len(stripped),
            )
        )
    return headers


def classify_section(text: str) -> SectionKind:
    if _MD_HEADER.match(text.split("\n", 1)[0].strip()):
        return "section"
    if _BULLET_ITEM.match(text) or _NUMBERED_ITEM.match(text):
        return "list"
    if sum(1 for line in text.split("\n") if "|" in line) >= 2:
        return "table"
    return "paragraph"


def split_into_sections(text: str) -> list[TextSection]:
    """
    Parte el documento por líneas en blanco (`\\n\\s*\\n`).

    Cada sección guarda el texto recortado y su offset real, así
    documento[s.start_position:s.end_position] == s.text.
    """
    sections: list[TextSection] = []
    last = 0

    def _emit(piece_start: int, piece_end: int) -> None:
        piece = text[piece_start:piece_end]
        stripped = piece.strip()
        if not stripped:
            return
        lead = len(piece) - len(piece.lstrip())
        sections.append(
            TextSection(
                text=stripped,
                kind=classify_section(stripped),
                start_position=piece_start + lead,
            )
        )

    for m in _PARAGRAPH_BREAK.finditer(text):
        _emit(last, m.start())
        last = m.end()
    _emit(last, len(text))

    return sections


def find_section_title(
    position: int, headers: Sequence[MarkdownHeader]
) -> str | None:
    """Header más reciente con start_position <= position (o None)."""
    starts = [h.start_position for h in headers]
    idx = bisect.bisect_right(starts, position)
    if idx == 0:
        return None
    return headers[idx - 1].title


def find_page_number(position: int, pages: Sequence[DocumentPage]) -> int:
    """
    Página cuyo rango acumulado contiene `position`.

    Las páginas se concatenan con un separador de 1 carácter. El fin de página
    es inclusivo (el separador cuenta para la página anterior). Sin páginas o
    sin match -> 1.
    """
    current = 0
    for page in pages:
        page_end = current + len(page.text)
        if current <= position <= page_end:
            return page.page_number
        current = page_end + 1
    return 1


def find_table_regions(text: str) -> list[tuple[int, int]]:
    """
    Regiones [start, end) de tabla: corridas de líneas que empiezan con `|`.

    Una sola pasada por líneas. Corridas de más de MAX_TABLE_ROWS filas se
    parten en varias regiones; se devuelven como máximo MAX_TABLE_REGIONS.
    """
    regions: list[tuple[int, int]] = []
    region_start: int | None = None
    region_end = 0
    rows = 0

    for line_start, line in _iter_lines(text):
        body = line.lstrip()
        if body.startswith("|"):
            if region_start is None:
                region_start = line_start + (len(line) - len(body))
                rows = 0
            region_end = line_start + len(line.rstrip())
            rows += 1
            if rows < MAX_TABLE_ROWS:
                continue

        if region_start is not None:
            regions.append((region_start, region_end))
            region_start = None
            if len(regions) >= MAX_TABLE_REGIONS:
                return regions

    if region_start is not None:
        regions.append((region_start, region_end))

    return regions
