# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models controlling catalog policy and console output."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .catalog import DEFAULT_CATALOG, CommandTemplate, ToolCatalog, ToolIdentity


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class TemplateOverride(BaseModel):
    """Partial replacement for a tool's :class:`CommandTemplate`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    executable: str | None = None
    run: tuple[str, ...] | None = None
    test: tuple[str, ...] | None = None
    build: tuple[str, ...] | None = None

    def apply(self, base: CommandTemplate) -> CommandTemplate:
        """Return ``base`` with every field set on this override replaced."""

        return CommandTemplate.model_validate({**base.model_dump(), **self.model_dump(exclude_none=True)})


class DispatchConfig(BaseModel):
    """Resolved configuration for a dispatch."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    priority: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)
    emoji: bool = True
    color: bool = True
    tools: dict[ToolIdentity, TemplateOverride] = Field(default_factory=dict)

    @field_validator("priority", "disabled", mode="before")
    @classmethod
    def _coerce_markers(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple)):
            return list(value)
        raise ValueError("expected a list of marker filenames")

    def build_catalog(self, base: ToolCatalog = DEFAULT_CATALOG) -> ToolCatalog:
        """Apply ``disabled``, ``priority`` and template overrides to ``base``.

        Args:
            base: Catalog providing the declared order and default templates.

        Returns:
            ToolCatalog: Catalog reflecting this configuration's policy.

        Raises:
            ConfigError: If a marker or template override is invalid.
        """

        clash = sorted(set(self.priority) & set(self.disabled))
        if clash:
            raise ConfigError(f"Markers both prioritised and disabled: {', '.join(clash)}")
        try:
            catalog = base.without(self.disabled) if self.disabled else base
            if self.priority:
                catalog = catalog.reordered(self.priority)
            if self.tools:
                catalog = catalog.with_templates(
                    {tool: override.apply(base.template(tool)) for tool, override in self.tools.items()},
                )
        except ValidationError as exc:
            raise ConfigError(f"Invalid tool template: {exc}") from exc
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        return catalog


__all__ = ["ConfigError", "DispatchConfig", "TemplateOverride"]
