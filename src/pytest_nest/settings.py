"""Runtime settings for naming and expansion.

Settings are resolved from `NEST_*` environment variables and may be
overridden explicitly, for example by pytest command-line options.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from pytest_nest.models import SettingsModel
from pytest_nest.names import DESCRIPTION_SEPARATOR, ID_SEPARATOR, ID_SEPARATOR_PATTERN

type Order = Literal['declared', 'reversed']


class NestSettings(SettingsModel):
    """Settings controlling how a tree is named and expanded."""

    model_config = SettingsConfigDict(
        env_prefix='NEST_',
        frozen=True,
        extra='ignore',
    )

    separator: str = Field(
        default=DESCRIPTION_SEPARATOR,
        title='Description separator',
        description='String joining descriptions of nested groups and examples.',
    )

    id_separator: str = Field(
        default=ID_SEPARATOR,
        pattern=ID_SEPARATOR_PATTERN,
        title='Identifier separator',
        description=(
            'String joining path segments into a unit identifier. '
            'Digits, colons, brackets, and whitespace are not allowed.'
        ),
    )

    strict: bool = Field(
        default=True,
        title='Strict mode',
        description=(
            'Whether redefining a bind twice in the same group is an error. '
            'In relaxed mode a warning is emitted and the last definition wins.'
        ),
    )

    order: Order = Field(
        default='declared',
        title='Unit order',
        description=(
            'Order in which expanded units are emitted. '
            'Paths and identifiers do not depend on this setting.'
        ),
    )
