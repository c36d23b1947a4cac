# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025  Philipp Emanuel Weidmann <pew@worldwidemann.com>

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    CliSettingsSource,
    EnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)


class DimensionSpecification(BaseModel):
    name: str = Field(description="Name of the dimension, used in trial parameters and output.")

    minimum: float = Field(
        description="Lower bound of the dimension in real coordinates.",
        allow_inf_nan=False,
    )

    range: float = Field(
        gt=0,
        allow_inf_nan=False,
        description="Width of the dimension in real coordinates (must be positive).",
    )

    @property
    def maximum(self) -> float:
        return self.minimum + self.range


class Settings(BaseSettings):
    # Unknown top-level tables are plugin namespaces, e.g. `[Rastrigin]`.
    model_config = SettingsConfigDict(extra="allow")

    fitness: str = Field(
        default="Sphere",
        description=(
            "Fitness function plugin to optimize. Either the name of a built-in plugin "
            '(Sphere, Rastrigin, Rosenbrock, Ackley), "package.module:ClassName", '
            'or "package.module" exposing PLUGIN_CLASS.'
        ),
    )

    dimensions: list[DimensionSpecification] = Field(
        default=[
            DimensionSpecification(name="x", minimum=-5.12, range=10.24),
            DimensionSpecification(name="y", minimum=-5.12, range=10.24),
        ],
        min_length=1,
        description="Dimensions of the search space, each given as minimum and range in real coordinates.",
    )

    n_trials: int = Field(
        default=200,
        gt=0,
        description="Number of fitness evaluations to run during optimization.",
    )

    n_startup_trials: int = Field(
        default=20,
        ge=0,
        description="Number of trials that use random sampling for the purpose of exploration.",
    )

    n_jobs: int = Field(
        default=1,
        gt=0,
        description="Number of evaluations to run in parallel. Each parallel job gets its own parameter record.",
    )

    seed: int | None = Field(
        default=None,
        description="Seed for the sampler (unset = nondeterministic).",
    )

    search_margin: float = Field(
        default=0.0,
        ge=0,
        description=(
            "How far beyond the unit hypercube (in normalized units) the sampler may propose points. "
            "Such points are rejected by the fitness function and scored as infinity."
        ),
    )

    print_evaluations: bool = Field(
        default=False,
        description="Whether to print every evaluated point and its fitness value.",
    )

    @field_validator("dimensions")
    @classmethod
    def check_unique_names(
        cls, dimensions: list[DimensionSpecification]
    ) -> list[DimensionSpecification]:
        names = [dimension.name for dimension in dimensions]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate dimension names: {', '.join(duplicates)}")
        return dimensions

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            CliSettingsSource(
                settings_cls,
                cli_parse_args=True,
                cli_implicit_flags=True,
                cli_kebab_case=True,
            ),
            EnvSettingsSource(settings_cls, env_prefix="SWARMFIT_"),
            dotenv_settings,
            file_secret_settings,
            TomlConfigSettingsSource(settings_cls, toml_file="config.toml"),
        )
