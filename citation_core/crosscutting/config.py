"""
Name: Citation Core Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables when settings are first requested
  - Provide defaults that match the chunking/citation option defaults

Collaborators:
  - crosscutting/logger.py: reads log_level / log_json
  - infrastructure/text/models.py: ChunkingOptions.from_settings()
  - application/fuzzy_citation.py: FuzzyCitationOptions.from_settings()

Constraints:
  - The core functions never read settings on their own; callers opt in by
    building options from settings
  - No business logic, pure configuration

Notes:
  - Env vars use the CITATION_ prefix (e.g. CITATION_CHUNK_SIZE=600)
  - Singleton via lru_cache
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings loaded from environment variables.

    Attributes:
        log_level: Logging level name (default: INFO)
        log_json: Emit JSON logs (default: True)
        chunk_size: Target characters per chunk (default: 800)
        chunk_context_radius: Context characters stored before/after (default: 300)
        min_chunk_size: Shorter candidate chunks are discarded (default: 100)
        max_chunk_size: Sections up to this size stay whole (default: 1200)
        preserve_sentences: Snap chunk ends to sentence endings (default: True)
        preserve_paragraphs: Snap chunk ends to blank lines (default: True)
        citation_threshold: Max dissimilarity accepted by the locator (default: 0.3)
        citation_context_radius: Context radius for citation lookups (default: 200)
        min_match_length: Shorter search texts are rejected (default: 20)
    """

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Chunking defaults
    chunk_size: int = 800
    chunk_context_radius: int = 300
    min_chunk_size: int = 100
    max_chunk_size: int = 1200
    preserve_sentences: bool = True
    preserve_paragraphs: bool = True

    # Citation locator defaults
    citation_threshold: float = 0.3
    citation_context_radius: int = 200
    min_match_length: int = 20

    @field_validator("chunk_size", "min_chunk_size", "max_chunk_size")
    @classmethod
    def sizes_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("chunk sizes must be greater than 0")
        return v

    @field_validator("chunk_context_radius", "citation_context_radius")
    @classmethod
    def radius_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("context radius must be >= 0")
        return v

    @field_validator("min_match_length")
    @classmethod
    def min_match_length_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("min_match_length must be greater than 0")
        return v

    @field_validator("citation_threshold")
    @classmethod
    def citation_threshold_valid(cls, v: float) -> float:
        if v < 0 or v > 1:
            raise ValueError("citation_threshold must be between 0 and 1")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_upper(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    def validate_chunk_params(self) -> None:
        """
        Cross-field validation: min <= chunk_size <= max.
        Called explicitly after instantiation.
        """
        if self.min_chunk_size > self.chunk_size:
            raise ValueError(
                f"min_chunk_size ({self.min_chunk_size}) must not exceed "
                f"chunk_size ({self.chunk_size})"
            )
        if self.chunk_size > self.max_chunk_size:
            raise ValueError(
                f"chunk_size ({self.chunk_size}) must not exceed "
                f"max_chunk_size ({self.max_chunk_size})"
            )

    model_config = SettingsConfigDict(
        env_prefix="CITATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If env vars are invalid
        ValueError: If chunk sizes are inconsistent
    """
    settings = Settings()
    settings.validate_chunk_params()
    return settings
