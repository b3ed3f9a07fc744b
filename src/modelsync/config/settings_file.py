"""Load reconciliation settings from a TOML or JSON file.

The file mirrors :class:`ReconciliationConfig` field by field; anything left out
keeps its default. Unknown keys are rejected so that a typo in a column name
does not silently fall back to the default layout.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import tomllib
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError, MissingConfigurationError
from .reconciliation import CodeMapping, GroupingColumns, ReconciliationConfig

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)


class SettingsModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class CodeMappingModel(SettingsModel):
    source_column: str = Field(alias="source")
    reference_columns: list[str] = Field(alias="references", min_length=1)
    output_column: str = Field(alias="output")

    def to_mapping(self) -> CodeMapping:
        return CodeMapping(
            source_column=self.source_column,
            reference_columns=tuple(self.reference_columns),
            output_column=self.output_column,
        )


class GroupingColumnsModel(SettingsModel):
    target_name: str = "Grouping"
    target_id: str = "Grouping ID"
    rel_type: str = "Grouping Relationship"
    rel_id: str = "Grouping Relationship ID"


class ReconciliationSettings(SettingsModel):
    recognized_fields: list[str] | None = None
    required_columns: list[str] | None = None
    name_column: str | None = None
    description_column: str | None = None
    type_column: str | None = None
    level_column: str | None = None
    element_id_column: str | None = None
    view_membership_column: str | None = None
    tabular_columns: list[str] | None = None
    property_columns: list[str] | None = None
    override_columns: list[str] | None = None
    column_map: dict[str, str] | None = None
    unmatched_fallbacks: dict[str, str] | None = None
    skip_rows: int | None = Field(default=None, ge=0)

    match_types: list[str] | None = None
    relationship_precedence: list[str] | None = None
    grouping_target_types: list[str] | None = None
    grouping_columns: GroupingColumnsModel | None = None

    level_name_fields: dict[str, str] | None = None
    default_level: str | None = None

    taxonomy_segments: list[str] | None = None
    taxonomy_delimiter: str | None = Field(default=None, min_length=1)
    category_roots: list[str] | None = None
    category_for_type: dict[str, str] | None = None
    default_category: str | None = None
    default_entity_type: str | None = None
    heatmap_folder: str | None = Field(default=None, min_length=1)

    view_label_column: str | None = None
    root_view_label: str | None = Field(default=None, min_length=1)
    view_suffix: str | None = None
    cell_width: int | None = Field(default=None, gt=0)
    cell_height: int | None = Field(default=None, gt=0)
    placeholder_bounds: tuple[int, int, int, int] | None = None

    identity_columns: list[str] | None = None
    identity_column: str | None = None
    stable_identifiers: bool | None = None
    sheet_codes: CodeMappingModel | None = None
    model_only_codes: CodeMappingModel | None = None

    @field_validator("category_for_type")
    @classmethod
    def _casefold_types(cls, value: dict[str, str] | None) -> dict[str, str] | None:
        if value is None:
            return None
        return {key.casefold(): category for key, category in value.items()}

    def overlay(self, base: ReconciliationConfig) -> ReconciliationConfig:
        """Return ``base`` with every explicitly provided setting replaced."""

        changes: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None:
                continue
            changes[name] = _convert(name, value)
        return dataclasses.replace(base, **changes)


def _convert(name: str, value: object) -> object:
    if isinstance(value, CodeMappingModel):
        return value.to_mapping()
    if isinstance(value, GroupingColumnsModel):
        return GroupingColumns(**value.model_dump())
    if name == "grouping_target_types":
        return frozenset(str(item).casefold() for item in value)  # type: ignore[union-attr]
    if isinstance(value, list):
        return tuple(value)
    return value


def parse_settings(document: dict[str, Any]) -> ReconciliationSettings:
    """Validate a decoded settings document.

    A ``[reconciliation]`` table is accepted as well as a flat document.
    """

    section = document.get("reconciliation", document)
    try:
        return ReconciliationSettings.model_validate(section)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid reconciliation settings: {exc}") from exc


def load_reconciliation_config(
    path: Path,
    *,
    base: ReconciliationConfig | None = None,
) -> ReconciliationConfig:
    """Read ``path`` (``.toml`` or ``.json``) and overlay it onto the defaults."""

    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        raise MissingConfigurationError(f"Settings file {path} does not exist") from exc
    except OSError as exc:
        raise ConfigurationError(f"Cannot read settings file {path}: {exc}") from exc

    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            document = tomllib.loads(raw.decode("utf-8"))
        elif suffix == ".json":
            document = json.loads(raw)
        else:
            raise ConfigurationError(f"Unsupported settings format: {path.name}")
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot parse settings file {path}: {exc}") from exc

    if not isinstance(document, dict):
        raise ConfigurationError(f"Settings file {path} must contain a table/object")

    settings = parse_settings(document)
    config = settings.overlay(base or ReconciliationConfig())
    log.debug("Loaded reconciliation settings from %s: %s", path, sorted(settings.model_fields_set))
    return config
