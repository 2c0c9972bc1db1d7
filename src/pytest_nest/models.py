"""Base Pydantic models for tree elements and runtime records.

This module defines the foundational model classes used by all element
and runtime structures. It enforces immutability and strict schema
validation to guarantee that a frozen tree expands deterministically and
that produced units cannot be altered after expansion.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all tree elements.

    This class serves as the root for all Pydantic models representing
    binds, hooks, examples, naming records, hook chains, and units.

    Design principles enforced by this model:
        - Immutability: elements cannot be modified after creation.
          Expansion can therefore share them between units without copies.
        - Strict schema validation: unknown or extra fields are rejected.

    Callables and tree nodes are stored as arbitrary types.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class DescribedMixin(SchemaModel):
    """Mixin providing element self-documentation.

    The field defined in this model does not affect execution semantics
    and is used for error reporting only.
    """

    title: str | None = Field(
        default=None,
        title='Title',
        description='Short human-readable title of the element.',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored,
          so that unrelated environment variables never break resolution.

    All runtime settings models must inherit from this class.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
