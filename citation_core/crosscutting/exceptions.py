# citation_core/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del core de citas (errores de contrato)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message “humana”

Importante
----------
"No encontrado" NO es una excepción en este core:
- find_text_in_document -> None
- find_multiple_citations -> lista vacía / parcial
Las excepciones quedan para violaciones de contrato (argumentos inválidos).

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  CitationCoreError + subclases

Responsabilidades:
  - Estandarizar errores de validación de argumentos/opciones/entidades
  - Exponer detalles estructurados (opción, argumento, tipo recibido)
  - Generar error_id para rastreo

Colaboradores:
  - domain/entities.py (invariantes de rangos y confidence)
  - infrastructure/text/models.py (ChunkingOptions)
  - application/fuzzy_citation.py (FuzzyCitationOptions + validación de inputs)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4


@dataclass(frozen=True)
class ErrorResponse:
    """Error serializable para quien llama al core (logs, respuestas de API)."""

    error_code: str
    message: str
    error_id: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "error_code": self.error_code,
            "message": self.message,
            "error_id": self.error_id,
        }
        if self.details:
            data["details"] = dict(self.details)
        return data


class CitationCoreError(Exception):
    """
    Base de los errores de contrato del core.

    error_code es estable (para que el llamador lo mapee a su propia API);
    error_id es único por instancia y sirve para cruzar con los logs.
    """

    error_code: str = "CITATION_CORE_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_id = error_id or uuid4().hex
        self.original_error = original_error

    @property
    def details(self) -> dict[str, Any]:
        return {}

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(self.error_code, self.message, self.error_id, self.details)


class InvalidOptionsError(CitationCoreError, ValueError):
    """Opciones fuera de rango (chunk_size <= 0, threshold fuera de [0, 1], etc.)."""

    error_code: str = "INVALID_OPTIONS"

    def __init__(self, option: str, value: object, reason: str) -> None:
        super().__init__(f"Opción inválida {option}={value!r}: {reason}")
        self.option = option
        self.value = value
        self.reason = reason

    @property
    def details(self) -> dict[str, Any]:
        return {"option": self.option, "value": repr(self.value), "reason": self.reason}


class InvalidInputError(CitationCoreError, TypeError):
    """Input con tipo incorrecto (document_text no es str, fragmento mal formado)."""

    error_code: str = "INVALID_INPUT"

    def __init__(self, argument: str, expected: str, got: object) -> None:
        self.argument = argument
        self.expected = expected
        self.received = type(got).__name__
        super().__init__(
            f"Argumento inválido '{argument}': se esperaba {expected}, "
            f"recibido {self.received}"
        )

    @property
    def details(self) -> dict[str, Any]:
        return {
            "argument": self.argument,
            "expected": self.expected,
            "received": self.received,
        }


class InvalidEntityError(CitationCoreError, ValueError):
    """Entidad con invariantes rotos (rango invertido, confidence fuera de [0, 1])."""

    error_code: str = "INVALID_ENTITY"

    def __init__(self, entity: str, message: str) -> None:
        super().__init__(message)
        self.entity = entity

    @property
    def details(self) -> dict[str, Any]:
        return {"entity": self.entity}
