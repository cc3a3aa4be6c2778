# citation_core/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logger JSON del core de citas
===============================================================================

Qué se loguea
-------------
- Resumen por documento chunkeado (chunk_count, section_count, ...)
- Estrategia y confianza de cada match
- Búsquedas rechazadas (texto corto, sin match)
- Citas resueltas vs pedidas

Los textos de documentos pueden ser enormes: los extractos (search_preview,
matched_text, chunk_text, ...) se recortan más agresivamente que el resto.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + setup_logger()

Responsabilidades:
  - Serializar cada LogRecord como una línea JSON
  - Copiar los campos pasados en `extra={...}`
  - Recortar extractos de documento y ocultar claves sensibles

Colaboradores:
  - crosscutting/config.py (log_level, log_json)
  - infrastructure/text/enhanced_chunker.py
  - application/fuzzy_citation.py
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Final

# Atributos estándar de un LogRecord: todo lo demás vino por `extra`.
_STANDARD_ATTRS: Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

# Campos que contienen texto de documentos.
_EXCERPT_KEYS: Final[frozenset[str]] = frozenset(
    {"search_preview", "search_text", "matched_text", "chunk_text", "highlight_text"}
)


class _Redactor:
    """
    Limpia valores de `extra` antes de serializarlos.

    - Claves sensibles -> ***REDACTADO***
    - Extractos de documento -> recortados a max_excerpt
    - Otros strings -> recortados a max_str
    - Estructuras anidadas -> hasta max_depth niveles
    """

    SENSITIVE_KEYS: Final[frozenset[str]] = frozenset(
        {"password", "secret", "token", "authorization", "api_key", "apikey"}
    )

    def __init__(self, max_str: int = 500, max_excerpt: int = 120, max_depth: int = 3):
        self._max_str = max_str
        self._max_excerpt = max_excerpt
        self._max_depth = max_depth

    def _limit_for(self, key: str | None) -> int:
        return self._max_excerpt if key in _EXCERPT_KEYS else self._max_str

    def sanitize(self, value: Any, *, depth: int = 0, key: str | None = None) -> Any:
        if key and key.lower() in self.SENSITIVE_KEYS:
            return "***REDACTADO***"
        if depth > self._max_depth:
            return "***TRUNCADO***"

        if isinstance(value, str):
            limit = self._limit_for(key)
            return value if len(value) <= limit else value[:limit] + "…(truncado)"
        if isinstance(value, dict):
            return {
                str(k): self.sanitize(v, depth=depth + 1, key=str(k))
                for k, v in value.items()
            }
        if isinstance(value, (list, tuple)):
            return [self.sanitize(v, depth=depth + 1, key=key) for v in value]
        if isinstance(value, (int, float, bool)) or value is None:
            return value
        # Enums de estrategia, dataclasses, etc.
        return str(value)


class JSONFormatter(logging.Formatter):
    """Una línea JSON por registro; adjunta la excepción si la hay."""

    def __init__(self) -> None:
        super().__init__()
        self._redactor = _Redactor()

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
        }

        payload.update(
            (k, self._redactor.sanitize(v, key=k))
            for k, v in vars(record).items()
            if k not in _STANDARD_ATTRS
        )

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, tb = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "stacktrace": traceback.format_exception(exc_type, exc, tb),
            }

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger(name: str = "citation-core") -> logging.Logger:
    """
    Logger del core configurado desde Settings.

    Reusar el nombre no agrega handlers nuevos. Si el entorno no valida
    (p.ej. CITATION_CHUNK_SIZE=abc) se usa INFO + JSON para no romper el import.
    """
    log = logging.getLogger(name)

    try:
        from .config import get_settings

        settings = get_settings()
        level, use_json = settings.log_level, settings.log_json
    except ValueError:
        # pydantic.ValidationError hereda de ValueError
        level, use_json = "INFO", True

    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter() if use_json else logging.Formatter("%(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)

    return log


logger = setup_logger()
