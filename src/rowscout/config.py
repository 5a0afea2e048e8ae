"""Configuration management for rowscout."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, TypeVar

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_OptionsT = TypeVar("_OptionsT", bound=BaseModel)

DEFAULT_PREFERRED_PATH_TOKENS = ["items", "nodes", "results", "edges"]
DEFAULT_EXCLUDED_PATH_TOKENS = ["meta", "error"]


class SearchOptions(BaseModel):
    """Row discovery settings. Accepts snake_case and camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    max_depth: int = 6
    min_rows: int = 0
    preferred_path_tokens: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PREFERRED_PATH_TOKENS)
    )
    excluded_path_tokens: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_PATH_TOKENS)
    )
    require_path_tokens: list[str] = Field(default_factory=list)
    prefer_shallow: bool = True
    prefer_large_datasets: bool = True
    allow_empty_object_rows: bool = False
    max_candidates: int | None = None
    max_inspected_nodes: int | None = None
    min_object_keys: int = 0
    min_object_ratio: float = 0.0
    include_path_pattern: str | None = None
    exclude_path_pattern: str | None = None

    @field_validator("min_rows", "min_object_keys", mode="before")
    @classmethod
    def _floor_at_zero(cls, v: Any) -> Any:
        if v is None or (isinstance(v, (int, float)) and v < 0):
            return 0
        return v

    @field_validator("max_candidates", "max_inspected_nodes", mode="before")
    @classmethod
    def _negative_cap_is_unbounded(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and v < 0:
            return None
        return v

    @field_validator("min_object_ratio", mode="before")
    @classmethod
    def _clamp_ratio(cls, v: Any) -> Any:
        if v is None:
            return 0.0
        if isinstance(v, (int, float)):
            return min(1.0, max(0.0, float(v)))
        return v


class CsvOptions(BaseModel):
    """CSV formatting settings. Accepts snake_case and camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    delimiter: str = ","
    line_terminator: Literal["\n", "\r\n"] = "\n"
    include_bom: bool = False
    headers: list[str] | None = None
    sort_headers: bool = False
    header_label_map: dict[str, str] = Field(default_factory=dict)
    trim_headers: bool = False
    dedupe_headers: bool = True
    include_row_number: bool = False
    row_number_header: str = "#"
    omit_header_row: bool = False
    skip_empty_rows: bool = False
    max_rows: int | None = None
    max_cell_length: int | None = None
    truncate_cell_suffix: str = "..."
    trim_string_values: bool = False
    quote_mode: Literal["minimal", "always"] = "minimal"
    excel_safe_mode: bool = False
    array_mode: Literal["json", "join"] = "json"
    array_join_delimiter: str = "; "
    date_mode: Literal["iso", "locale"] = "iso"
    boolean_mode: Literal["literal", "numeric"] = "literal"
    null_value: str = ""
    undefined_value: str = ""
    flatten_max_depth: int = Field(default=32, gt=0)

    @field_validator("delimiter", mode="before")
    @classmethod
    def _default_delimiter(cls, v: Any) -> Any:
        return v or ","

    @field_validator("line_terminator", mode="before")
    @classmethod
    def _known_line_terminator(cls, v: Any) -> Any:
        return v if v in ("\n", "\r\n") else "\n"

    @field_validator("max_rows", "max_cell_length", mode="before")
    @classmethod
    def _non_positive_is_unlimited(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and v <= 0:
            return None
        return v


class OutputConfig(BaseModel):
    directory: str = "."
    default_name: str = "export"
    default_format: Literal["csv", "json", "jsonl"] = "csv"


def build_options(model: type[_OptionsT], data: dict[str, Any]) -> _OptionsT:
    """Validate ``data`` into ``model``, dropping fields that fail validation.

    Invalid fields fall back to their defaults so option handling never raises.
    """
    names: dict[str, str] = {}
    for name, field in model.model_fields.items():
        names[name] = name
        if field.alias:
            names[field.alias] = name

    data = dict(data)
    while True:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            bad_fields = {names.get(str(err["loc"][0])) for err in exc.errors() if err["loc"]}
            dropped = [key for key in data if names.get(key) in bad_fields]
            if not dropped:
                logger.warning("Ignoring invalid %s: %s", model.__name__, exc)
                return model()
            logger.warning("Ignoring invalid %s fields: %s", model.__name__, ", ".join(dropped))
            for key in dropped:
                data.pop(key)


def _load_yaml_config(path: Path | None = None) -> dict[str, Any]:
    """Load config from YAML file."""
    if path is None:
        path = Path.home() / ".rowscout" / "config.yml"
    if path.exists():
        with open(path) as f:
            return yaml.safe_load(f) or {}
    return {}


_SECTIONS: dict[str, type[BaseModel]] = {
    "search": SearchOptions,
    "csv": CsvOptions,
    "output": OutputConfig,
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ROWSCOUT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    search: SearchOptions = Field(default_factory=SearchOptions)
    csv: CsvOptions = Field(default_factory=CsvOptions)
    output: OutputConfig = Field(default_factory=OutputConfig)

    config_file: Path | None = None
    verbose: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    @field_validator("search", "csv", "output", mode="before")
    @classmethod
    def _lenient_section(cls, v: Any, info: ValidationInfo) -> Any:
        if isinstance(v, dict):
            return build_options(_SECTIONS[info.field_name], v)
        return v

    @classmethod
    def load(cls, config_file: Path | None = None, **overrides: Any) -> Settings:
        """Load settings with YAML + env + overrides."""
        yaml_data = _load_yaml_config(config_file)
        merged = {**yaml_data, **{k: v for k, v in overrides.items() if v is not None}}
        if config_file:
            merged["config_file"] = config_file
        return cls(**merged)
