"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio

Responsabilidades:
    - Centralizar exports para imports limpios en application/infrastructure.
    - Mantener estable el “surface area” del dominio.

Reglas:
    - Solo re-exporta entidades.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
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

__all__ = [
    "ChunkType",
    "CitationFragment",
    "CitationPosition",
    "DocumentPage",
    "EnhancedChunk",
    "MatchResult",
    "MatchStrategy",
    "ProcessedDocument",
    "TextContext",
]
