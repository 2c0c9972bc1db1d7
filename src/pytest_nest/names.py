"""Naming primitives for binds and unit identifiers.

This module defines the identifier pattern for bind names and helpers
for rendering positional paths into stable identifier strings.

The rules defined here are part of the public contract: identifiers
rendered from paths are used as pytest node names and may be persisted
by reporting tools.
"""

from typing import TYPE_CHECKING, Annotated

from pydantic import Field

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pytest_nest.values import Path

#: Base pattern for all identifiers.
#: Identifiers must start with a letter and may contain letters, digits, or underscores
_NAME_PATTERN = r'[a-zA-Z][a-zA-Z0-9_]*'

#: Default string joining path segments into an identifier.
ID_SEPARATOR = '_'

#: Identifier separators must not contain digits, which would make rendered
#: paths ambiguous, nor characters with a meaning in pytest node IDs.
ID_SEPARATOR_PATTERN = r'^[^0-9:\[\]\s]+$'

#: Default string joining descriptions of nested groups.
DESCRIPTION_SEPARATOR = ' '


BindName = Annotated[
    str, Field(
        pattern=rf'^{_NAME_PATTERN}$',
        title='Bind identifier',
        description=(
            'Name under which a lazily computed value is available '
            'to hooks and example bodies. '
            'Bind identifiers must start with a letter and may contain '
            'letters, digits, or underscores. '
            'Names are restricted to ASCII characters.'
        ),
        examples=[
            'subject',
            'tail_length',
        ],
    ),
]


def format_path(path: 'Path', separator: str = ID_SEPARATOR) -> str:
    """Render a positional path as an identifier string.

    Args:
        path: Sequence of 1-based positions.
        separator: String placed between segments.

    Returns:
        Identifier such as `1_2_1`. An empty path renders as an empty string.
    """
    return separator.join(str(segment) for segment in path)


def join_descriptions(parts: 'Iterable[str | None]',
                      separator: str = DESCRIPTION_SEPARATOR) -> str:
    """Join descriptions of nested elements.

    Empty and missing parts are skipped, so that an unnamed root does not
    leave a leading separator.

    Args:
        parts: Descriptions from the outermost to the innermost element.
        separator: String placed between descriptions.

    Returns:
        A human-readable description.
    """
    return separator.join(part for part in parts if part)
