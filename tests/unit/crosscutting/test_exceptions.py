"""
Name: Core Exceptions Unit Tests

Responsibilities:
  - Verify error codes and the builtin types each error also satisfies
  - Verify error_id generation and ErrorResponse serialization

Collaborators:
  - citation_core.crosscutting.exceptions: Module being tested
"""

import pytest

from citation_core.crosscutting.exceptions import (
    CitationCoreError,
    InvalidEntityError,
    InvalidInputError,
    InvalidOptionsError,
)


@pytest.mark.unit
class TestExceptions:
    """Test suite for the core exception hierarchy."""

    def test_invalid_options(self):
        """R: InvalidOptionsError is a ValueError with option details."""
        err = InvalidOptionsError("threshold", 1.5, "debe estar entre 0 y 1")

        assert isinstance(err, CitationCoreError)
        assert isinstance(err, ValueError)
        assert err.error_code == "INVALID_OPTIONS"
        assert err.option == "threshold"
        assert err.value == 1.5
        assert "threshold=1.5" in err.message

    def test_invalid_input(self):
        """R: InvalidInputError is a TypeError naming the received type."""
        err = InvalidInputError("document_text", "str", 42)

        assert isinstance(err, CitationCoreError)
        assert isinstance(err, TypeError)
        assert err.error_code == "INVALID_INPUT"
        assert err.argument == "document_text"
        assert "int" in err.message

    def test_invalid_entity(self):
        """R: InvalidEntityError is a ValueError naming the entity."""
        err = InvalidEntityError("EnhancedChunk", "Un chunk no puede ser vacío")

        assert isinstance(err, CitationCoreError)
        assert isinstance(err, ValueError)
        assert err.error_code == "INVALID_ENTITY"
        assert err.message == "Un chunk no puede ser vacío"
        assert err.to_response().to_dict()["details"] == {"entity": "EnhancedChunk"}

    def test_error_id_is_generated_or_kept(self):
        """R: error_id is random unless one is provided."""
        assert CitationCoreError("a").error_id != CitationCoreError("a").error_id
        assert CitationCoreError("a", error_id="fixed").error_id == "fixed"

    def test_to_response(self):
        """R: to_response() exposes code, message and id."""
        err = CitationCoreError("algo falló", error_id="id-1")

        assert err.to_response().to_dict() == {
            "error_code": "CITATION_CORE_ERROR",
            "message": "algo falló",
            "error_id": "id-1",
        }

    def test_to_response_includes_details(self):
        """R: Subclasses expose structured details in the response."""
        options_err = InvalidOptionsError("chunk_size", 0, "debe ser un entero > 0")
        input_err = InvalidInputError("search_text", "str", None)

        assert options_err.to_response().to_dict()["details"] == {
            "option": "chunk_size",
            "value": "0",
            "reason": "debe ser un entero > 0",
        }
        assert input_err.details == {
            "argument": "search_text",
            "expected": "str",
            "received": "NoneType",
        }

    def test_can_be_caught_as_base(self):
        """R: Callers can catch every core error with the base class."""
        with pytest.raises(CitationCoreError):
            raise InvalidOptionsError("chunk_size", 0, "debe ser un entero > 0")
