"""
===============================================================================
TARJETA CRC — application/matching_strategies.py
===============================================================================

Módulo:
    Estrategias de matching de la cascada de citas

Responsabilidades:
    - exact_match: substring exacto sobre texto normalizado (confidence 1.0).
    - sliding_window_match: ventana deslizante con ratio de caracteres
      alineados (barato, NO es edit distance).
    - table_match: fracción de celdas `|` encontradas en regiones de tabla.
    - sentence_match: similitud de oración completa (rapidfuzz, sin case).
    - PreparedDocument: documento normalizado una vez y reutilizable.

Colaboradores:
    - infrastructure/text/normalize.py (NormalizedText + mapa de offsets)
    - infrastructure/text/markdown.py (regiones de tabla)
    - application/fuzzy_citation.py (orquesta la cascada)

Invariantes:
    - Funciones puras: mismo input -> mismo output.
    - Offsets devueltos siempre sobre el documento ORIGINAL y dentro de
      [0, len(documento)].
    - Sólo exact_match reporta confidence 1.0.
    - Aceptación: score >= 1 - threshold (threshold = disimilitud máxima).
===============================================================================
"""

from __future__ import annotations

import operator
import re
from functools import cached_property
from typing import Final, NamedTuple

from rapidfuzz import fuzz, process, utils

from ..domain.entities import MatchResult, MatchStrategy
from ..infrastructure.text.markdown import find_table_regions
from ..infrastructure.text.normalize import (
    NormalizedText,
    clean_text,
    normalize_for_matching,
)

# Un match no exacto nunca llega a 1.0.
MAX_FUZZY_CONFIDENCE: Final[float] = 0.99

_WINDOW_GROWTH: Final[float] = 1.2
_WINDOW_STEP_RATIO: Final[float] = 0.1
_MIN_SENTENCE_CHARS: Final[int] = 10
_SENTENCE_BODY: Final[re.Pattern] = re.compile(r"[^.!?]+")


class Sentence(NamedTuple):
    """Oración con su rango en el texto normalizado."""

    text: str
    start: int
    end: int


class PreparedDocument:
    """
    Documento original + su versión normalizada (calculada una sola vez).

    Oraciones y regiones de tabla se calculan perezosamente y se cachean:
    quien busca muchos fragmentos en el mismo documento no re-normaliza.
    """

    def __init__(self, document_text: str) -> None:
        self.original = document_text
        self.normalized: NormalizedText = normalize_for_matching(document_text)

    def __len__(self) -> int:
        return len(self.original)

    @cached_property
    def sentences(self) -> list[Sentence]:
        return split_into_sentences(self.normalized.text)

    @cached_property
    def table_regions(self) -> list[tuple[int, int]]:
        return find_table_regions(self.original)

    def result(
        self,
        norm_start: int,
        norm_end: int,
        confidence: float,
        strategy: MatchStrategy,
    ) -> MatchResult:
        """MatchResult en coordenadas del original a partir de un rango normalizado."""
        start, end = self.normalized.to_original_span(norm_start, norm_end)
        return MatchResult(
            text=self.original[start:end],
            start_index=start,
            end_index=end,
            confidence=confidence,
            strategy=strategy,
        )


def aligned_similarity(a: str, b: str) -> float:
    """
    Caracteres iguales en la misma posición / longitud mayor.

    No es edit distance: un corrimiento de un carácter tira el score.
    """
    if a == b:
        return 1.0
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return sum(map(operator.eq, a, b)) / longest


def split_into_sentences(text: str) -> list[Sentence]:
    """Parte por `.!?`, recorta y descarta fragmentos de <= 10 caracteres."""
    sentences: list[Sentence] = []
    for m in _SENTENCE_BODY.finditer(text):
        body = m.group(0)
        stripped = body.strip()
        if len(stripped) <= _MIN_SENTENCE_CHARS:
            continue
        start = m.start() + (len(body) - len(body.lstrip()))
        sentences.append(Sentence(stripped, start, start + len(stripped)))
    return sentences


# ---------------------------------------------------------------------------
# Estrategias
# ---------------------------------------------------------------------------


def exact_match(search: NormalizedText, document: PreparedDocument) -> MatchResult | None:
    idx = document.normalized.text.find(search.text)
    if idx == -1:
        return None
    return document.result(idx, idx + len(search.text), 1.0, MatchStrategy.EXACT)


def sliding_window_match(
    search: NormalizedText, document: PreparedDocument, threshold: float
) -> MatchResult | None:
    """
    Ventana de max(L, 1.2 L) que avanza en pasos del 10% de la ventana.

    Gana la primera ventana con el mejor score (>= 1 - threshold).
    """
    needle = search.text
    haystack = document.normalized.text
    search_len = len(needle)

    window = min(max(search_len, int(search_len * _WINDOW_GROWTH)), len(haystack))
    if search_len == 0 or window < search_len:
        return None
    step = max(1, int(window * _WINDOW_STEP_RATIO))

    min_score = 1 - threshold
    best_score = 0.0
    best_start = -1

    for i in range(0, len(haystack) - window + 1, step):
        score = aligned_similarity(needle, haystack[i : i + window])
        if score > best_score and score >= min_score:
            best_score = score
            best_start = i

    if best_start < 0:
        return None
    return document.result(
        best_start,
        best_start + window,
        min(best_score, MAX_FUZZY_CONFIDENCE),
        MatchStrategy.FUZZY,
    )


def looks_like_table(search: NormalizedText) -> bool:
    return "|" in search.text or "--" in search.text


def table_match(
    search: NormalizedText, document: PreparedDocument, threshold: float
) -> MatchResult | None:
    """
    Score de región = celdas del texto buscado presentes (case-insensitive).

    Las regiones se normalizan igual que el texto buscado antes de comparar.
    """
    cells = [c.strip().lower() for c in search.text.split("|")]
    cells = [c for c in cells if c]
    if not cells:
        return None

    min_score = 1 - threshold
    best_score = 0.0
    best_region: tuple[int, int] | None = None

    for start, end in document.table_regions:
        region = clean_text(document.original[start:end]).lower()
        found = sum(1 for cell in cells if cell in region)
        score = found / len(cells)
        if score > best_score and score >= min_score:
            best_score = score
            best_region = (start, end)

    if best_region is None:
        return None

    start, end = best_region
    return MatchResult(
        text=document.original[start:end],
        start_index=start,
        end_index=end,
        confidence=min(best_score, MAX_FUZZY_CONFIDENCE),
        strategy=MatchStrategy.TABLE,
    )


def sentence_match(
    search: NormalizedText, document: PreparedDocument, threshold: float
) -> MatchResult | None:
    """
    Mejor oración según rapidfuzz `ratio` (0..100), sin distinguir mayúsculas
    ni puntuación (`utils.default_process`).

    `ratio` compara las dos cadenas completas: una oración que cubre sólo una
    parte del texto buscado (p.ej. la oración del contexto) puntúa bajo.
    confidence = ratio / 100.
    """
    sentences = document.sentences
    if not sentences:
        return None

    best = process.extractOne(
        search.text,
        [s.text for s in sentences],
        scorer=fuzz.ratio,
        processor=utils.default_process,
        score_cutoff=(1 - threshold) * 100,
    )
    if best is None:
        return None

    _, score, index = best
    sentence = sentences[index]
    return document.result(
        sentence.start,
        sentence.end,
        min(score / 100, MAX_FUZZY_CONFIDENCE),
        MatchStrategy.SENTENCE,
    )
