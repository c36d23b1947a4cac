# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025  Philipp Emanuel Weidmann <pew@worldwidemann.com>

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict


class Plugin:
    """
    Base class for swarmfit plugins.

    A plugin is selected by its `name`, which is also the TOML table `[<name>]`
    holding its configuration. That table is validated against the nested
    `Settings` model, and the resulting instance becomes the plugin's extension
    block: the private parameters attached to every record it evaluates.
    Nothing outside the plugin reads it.

    Plugins without configuration keep the empty base `Settings` and run with
    no extension block at all.
    """

    name: ClassVar[str] = ""

    class Settings(BaseModel):
        # A misspelled key in a plugin table is an error, not a silent default.
        model_config = ConfigDict(extra="forbid")

    def __init__(self, *, plugin_settings: BaseModel | None = None):
        self.plugin_settings = plugin_settings

    @classmethod
    def extension_type(cls) -> type[BaseModel] | None:
        """
        The extension block type this plugin reads, or None if it reads none.
        """
        settings_model = getattr(cls, "Settings", None)
        if settings_model is None or not settings_model.model_fields:
            return None
        return settings_model

    @classmethod
    def has_settings(cls) -> bool:
        return cls.extension_type() is not None

    @classmethod
    def validate_contract(cls) -> None:
        name = getattr(cls, "name", None)
        if not isinstance(name, str) or not name.strip():
            raise ValueError(
                f"{cls.__name__} must define a non-empty class attribute `name`"
            )

        settings_model = getattr(cls, "Settings", None)
        if settings_model is not None and not (
            isinstance(settings_model, type) and issubclass(settings_model, BaseModel)
        ):
            raise TypeError(
                f"{cls.__name__}.Settings must be a subclass of pydantic.BaseModel"
            )

    @classmethod
    def validate_settings(cls, raw_namespace: dict[str, Any] | None) -> BaseModel | None:
        """
        Turns the raw `[<name>]` table into this plugin's extension block.

        The table is validated even for plugins without settings fields, so
        stray keys are reported; such plugins still get None.
        """
        settings_model = getattr(cls, "Settings", None)
        if settings_model is None:
            return None

        settings = settings_model.model_validate(raw_namespace or {})
        return settings if cls.has_settings() else None
