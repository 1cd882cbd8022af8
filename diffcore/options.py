"""
Per-comparison options supplied by the caller.
"""
from typing import Optional
from enum import Enum

from pydantic import BaseModel, Field


class FormatType(str, Enum):
    JSON = "json"
    YAML = "yaml"
    XML = "xml"
    TEXT = "text"
    CONFIG = "config"


class ComparisonOptions(BaseModel):
    """
    Options for a single comparison.

    Accepts both snake_case names and the camelCase names used by the
    front end (``ignoreWhitespace``, ``arrayKeyField``, ...). Instances are
    frozen; derive variants with ``model_copy(update=...)``.
    """
    ignore_whitespace: bool = Field(False, alias="ignoreWhitespace")
    ignore_trailing_whitespace: bool = Field(False, alias="ignoreTrailingWhitespace")
    ignore_line_endings: bool = Field(False, alias="ignoreLineEndings")
    normalize_indentation: bool = Field(False, alias="normalizeIndentation")
    tab_size: int = Field(2, alias="tabSize", ge=1, le=16)
    format_type: Optional[FormatType] = Field(None, alias="formatType")
    ignore_case: bool = Field(False, alias="ignoreCase")
    semantic_comparison: bool = Field(False, alias="semanticComparison")
    ignore_keys: list[str] = Field(default_factory=list, alias="ignoreKeys")
    ignore_paths: list[str] = Field(default_factory=list, alias="ignorePaths")
    detect_array_moves: bool = Field(False, alias="detectArrayMoves")
    array_key_field: Optional[str] = Field(None, alias="arrayKeyField")
    advanced_mode: bool = Field(True, alias="advancedMode")

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def move_detection_enabled(self) -> bool:
        """Key-based array handling needs both the flag and a key field."""
        return self.detect_array_moves and bool(self.array_key_field)

    @property
    def is_yaml(self) -> bool:
        return self.format_type == FormatType.YAML

    @property
    def normalizes_lines(self) -> bool:
        """True when any option asks for lines to be compared by normalized form."""
        return (
            self.ignore_whitespace
            or self.ignore_trailing_whitespace
            or self.ignore_line_endings
            or self.normalize_indentation
            or self.ignore_case
            or self.format_type in (FormatType.YAML, FormatType.CONFIG)
        )


DEFAULT_OPTIONS = ComparisonOptions()
