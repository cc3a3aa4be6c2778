"""
===============================================================================
TARJETA CRC — application/fuzzy_citation.py
===============================================================================

Class:
    FuzzyCitationLocator (+ funciones find_text_in_document /
    find_multiple_citations)

Responsibilities:
    - Relocalizar un fragmento recuperado del vector store dentro del texto
      completo del documento, sin depender de offsets guardados.
    - Cascada de estrategias, de la más precisa a la más laxa:
        exact -> fuzzy (ventana) -> table -> sentence
    - Resolver varios fragmentos en spans SIN solapamiento (el primero
      aceptado gana) y devolverlos ordenados por posición.
    - Servicio puro (sin IO, sin estado mutable).

Collaborators:
    - application/matching_strategies.py: estrategias + PreparedDocument
    - infrastructure/text/normalize.py: normalización con mapa de offsets
    - domain.entities: MatchResult, CitationFragment, CitationPosition

Política de errores:
    - "No encontrado" y "texto muy corto" -> None (resultado normal).
    - Tipos/opciones inválidos -> InvalidInputError / InvalidOptionsError.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

from ..crosscutting.exceptions import InvalidInputError, InvalidOptionsError
from ..crosscutting.logger import logger
from ..domain.entities import (
    CitationFragment,
    CitationPosition,
    MatchResult,
    TextContext,
)
from ..infrastructure.text.normalize import normalize_for_matching
from .matching_strategies import (
    PreparedDocument,
    exact_match,
    looks_like_table,
    sentence_match,
    sliding_window_match,
    table_match,
)

if TYPE_CHECKING:
    from ..crosscutting.config import Settings

_PREVIEW_CHARS = 100


@dataclass(frozen=True)
class FuzzyCitationOptions:
    """
    threshold:
      Disimilitud máxima aceptada (0.0 exacto ... 1.0 cualquier cosa).
      Un candidato se acepta si similitud >= 1 - threshold.
    context_radius:
      Informativo (radio por defecto para get_text_context).
    min_match_length:
      Textos normalizados más cortos se rechazan (None) por poco confiables.
    """

    threshold: float = 0.3
    context_radius: int = 200
    min_match_length: int = 20

    def __post_init__(self) -> None:
        if isinstance(self.threshold, bool) or not isinstance(
            self.threshold, (int, float)
        ):
            raise InvalidOptionsError("threshold", self.threshold, "debe ser numérico")
        if not 0.0 <= self.threshold <= 1.0:
            raise InvalidOptionsError(
                "threshold", self.threshold, "debe estar entre 0 y 1"
            )
        if not isinstance(self.context_radius, int) or self.context_radius < 0:
            raise InvalidOptionsError(
                "context_radius", self.context_radius, "debe ser un entero >= 0"
            )
        if not isinstance(self.min_match_length, int) or self.min_match_length < 0:
            raise InvalidOptionsError(
                "min_match_length", self.min_match_length, "debe ser un entero >= 0"
            )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "FuzzyCitationOptions":
        return cls(
            threshold=settings.citation_threshold,
            context_radius=settings.citation_context_radius,
            min_match_length=settings.min_match_length,
        )


def prepare_document(document_text: str) -> PreparedDocument:
    """Normaliza el documento una vez para reutilizarlo en varias búsquedas."""
    if not isinstance(document_text, str):
        raise InvalidInputError("document_text", "str", document_text)
    return PreparedDocument(document_text)


def _as_prepared(document: str | PreparedDocument) -> PreparedDocument:
    if isinstance(document, PreparedDocument):
        return document
    return prepare_document(document)


def find_text_in_document(
    search_text: str,
    document_text: str | PreparedDocument,
    options: FuzzyCitationOptions | None = None,
) -> MatchResult | None:
    """
    Mejor span de `document_text` para `search_text`, o None.

    Determinístico: sin aleatoriedad ni estado oculto.
    """
    if not isinstance(search_text, str):
        raise InvalidInputError("search_text", "str", search_text)

    opts = options or FuzzyCitationOptions()
    document = _as_prepared(document_text)
    search = normalize_for_matching(search_text)

    if not search.text or len(search) < opts.min_match_length:
        logger.debug(
            "Texto de búsqueda demasiado corto para un match confiable",
            extra={"search_chars": len(search), "min_match_length": opts.min_match_length},
        )
        return None

    match = exact_match(search, document)
    if match is None:
        match = sliding_window_match(search, document, opts.threshold)
    if match is None and looks_like_table(search):
        match = table_match(search, document, opts.threshold)
    if match is None:
        match = sentence_match(search, document, opts.threshold)

    if match is None:
        logger.warning(
            "Sin match aceptable para el texto buscado",
            extra={
                "search_preview": search.text[:_PREVIEW_CHARS],
                "threshold": opts.threshold,
            },
        )
        return None

    logger.debug(
        "Match encontrado",
        extra={
            "strategy": match.strategy.value,
            "confidence": round(match.confidence, 4),
            "start_index": match.start_index,
            "end_index": match.end_index,
        },
    )
    return match


def _as_fragment(item: CitationFragment | Mapping[str, Any]) -> CitationFragment:
    if isinstance(item, CitationFragment):
        return item
    if isinstance(item, Mapping) and isinstance(item.get("chunk_text"), str):
        return CitationFragment(
            chunk_text=item["chunk_text"],
            context_before=item.get("context_before"),
            context_after=item.get("context_after"),
            metadata=dict(item.get("metadata") or {}),
        )
    raise InvalidInputError("fragments[]", "CitationFragment | {chunk_text: str}", item)


def find_multiple_citations(
    fragments: Iterable[CitationFragment | Mapping[str, Any]],
    document_text: str | PreparedDocument,
    options: FuzzyCitationOptions | None = None,
) -> list[CitationPosition]:
    """
    Resuelve varios fragmentos en spans sin solapamiento.

    Reglas:
      - Se procesan en orden; el primero aceptado se queda con su rango.
      - Se busca contexto + chunk; si eso no matchea y había contexto, se
        reintenta sólo con el chunk (el contexto suma ruido al score).
      - Un match que se solapa con un rango ya aceptado se descarta
        (no se reintenta con otra estrategia).
      - highlight_text = chunk_text original del fragmento.
      - Resultado ordenado por start_index.
    """
    document = _as_prepared(document_text)
    items = [_as_fragment(f) for f in fragments]

    citations: list[CitationPosition] = []
    for fragment in items:
        search_text = fragment.search_text()
        match = find_text_in_document(search_text, document, options)
        if match is None and search_text != fragment.chunk_text:
            match = find_text_in_document(fragment.chunk_text, document, options)
        if match is None:
            continue
        if any(c.overlaps(match.start_index, match.end_index) for c in citations):
            continue
        citations.append(
            CitationPosition(
                start_index=match.start_index,
                end_index=match.end_index,
                confidence=match.confidence,
                matched_text=match.text,
                highlight_text=fragment.chunk_text,
            )
        )

    logger.info(
        "Citas resueltas",
        extra={"found": len(citations), "requested": len(items)},
    )
    return sorted(citations, key=lambda c: c.start_index)


def get_text_context(
    text: str, start_index: int, end_index: int, context_radius: int = 200
) -> TextContext:
    """Texto antes/después de [start_index, end_index) dentro de `text`."""
    if context_radius < 0:
        raise InvalidOptionsError("context_radius", context_radius, "debe ser >= 0")

    start = min(max(start_index, 0), len(text))
    end = min(max(end_index, start), len(text))
    before_start = max(0, start - context_radius)
    after_end = min(len(text), end + context_radius)

    return TextContext(
        before=text[before_start:start],
        after=text[end:after_end],
        before_index=before_start,
        after_index=after_end,
    )


def citations_for_chunk(
    citations: Sequence[CitationPosition], chunk_text: str, prefix_chars: int = 50
) -> list[CitationPosition]:
    """
    Citas que pertenecen a un chunk: alguno de los dos textos contiene el
    prefijo (prefix_chars) del otro.
    """
    return [
        c
        for c in citations
        if chunk_text[:prefix_chars] in c.highlight_text
        or c.highlight_text[:prefix_chars] in chunk_text
    ]


class FuzzyCitationLocator:
    """
    Localizador de citas con opciones fijas.

    Uso:
        locator = FuzzyCitationLocator(FuzzyCitationOptions(threshold=0.4))
        doc = locator.prepare(full_text)
        positions = locator.find_many(fragments, doc)
    """

    __slots__ = ("_options",)

    def __init__(self, options: FuzzyCitationOptions | None = None) -> None:
        self._options = options or FuzzyCitationOptions()

    @property
    def options(self) -> FuzzyCitationOptions:
        return self._options

    def prepare(self, document_text: str) -> PreparedDocument:
        return prepare_document(document_text)

    def find(
        self, search_text: str, document_text: str | PreparedDocument
    ) -> MatchResult | None:
        return find_text_in_document(search_text, document_text, self._options)

    def find_many(
        self,
        fragments: Iterable[CitationFragment | Mapping[str, Any]],
        document_text: str | PreparedDocument,
    ) -> list[CitationPosition]:
        return find_multiple_citations(fragments, document_text, self._options)

    def context(self, text: str, start_index: int, end_index: int) -> TextContext:
        return get_text_context(
            text, start_index, end_index, self._options.context_radius
        )
