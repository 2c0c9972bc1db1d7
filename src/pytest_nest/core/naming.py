"""Positional paths and descriptions of groups and examples.

The assigner walks a tree depth-first in declaration order. The path of
a child group or an example is its parent's path plus its 1-based position
among all members of the parent, groups and examples counted together,
so no two elements of a tree share a path. Declaration order is the only
tie-break, so identical descriptions still receive distinct paths and
re-running the assigner on an unmodified tree reproduces identical results.
"""

from typing import TYPE_CHECKING

from pydantic import Field

from pytest_nest.models import SchemaModel
from pytest_nest.names import format_path, join_descriptions
from pytest_nest.schema import Example
from pytest_nest.settings import NestSettings

from .tree import ExampleGroup

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pytest_nest.values import Path


class NamedGroup(SchemaModel):
    """Group annotated with its path and description."""

    path: tuple[int, ...]
    identifier: str
    description: str

    group: ExampleGroup = Field(exclude=True, repr=False)


class NamedExample(SchemaModel):
    """Example annotated with its path, description, and ancestry."""

    path: tuple[int, ...]
    identifier: str
    description: str

    example: Example = Field(exclude=True, repr=False)

    #: Named groups from the root to the owning group, inclusive.
    lineage: tuple[NamedGroup, ...] = Field(repr=False)


class Naming(SchemaModel):
    """Result of a naming pass over one tree."""

    groups: tuple[NamedGroup, ...]
    examples: tuple[NamedExample, ...]


class PathAssigner:
    """Deterministic naming pass over a tree."""

    def __init__(self, settings: NestSettings | None = None) -> None:
        """Initialize the assigner.

        Args:
            settings: Separators used for identifiers and descriptions.
        """
        self.settings = settings if settings is not None else NestSettings()

    def name_group(self, group: ExampleGroup, path: 'Path',
                   parent: NamedGroup | None = None) -> NamedGroup:
        """Annotate a single group.

        Args:
            group: Group to annotate.
            path: Positional path of the group.
            parent: Annotated parent, or None for a root.

        Returns:
            The annotated group.
        """
        parts = [parent.description] if parent else []
        if not group.is_root:
            parts.append(group.description)

        return NamedGroup(
            path=path,
            identifier=format_path(path, self.settings.id_separator),
            description=join_descriptions(parts, self.settings.separator),
            group=group,
        )

    def name_example(self, example: Example, path: 'Path',
                     lineage: tuple[NamedGroup, ...]) -> NamedExample:
        """Annotate a single example.

        Args:
            example: Example to annotate.
            path: Positional path of the example.
            lineage: Annotated groups from the root to the owner.

        Returns:
            The annotated example.
        """
        return NamedExample(
            path=path,
            identifier=format_path(path, self.settings.id_separator),
            description=join_descriptions(
                (lineage[-1].description, example.description),
                self.settings.separator,
            ),
            example=example,
            lineage=lineage,
        )

    def walk(self, root: ExampleGroup) -> 'Iterator[NamedGroup | NamedExample]':
        """Iterate over annotated groups and examples in declaration order.

        Each group is yielded before its members.

        Args:
            root: Group to start from. Its path is empty.

        Yields:
            Annotated groups and examples.
        """
        yield from self._walk(root, (), ())

    def _walk(self, group: ExampleGroup, path: 'Path',
              ancestors: tuple[NamedGroup, ...]) -> 'Iterator[NamedGroup | NamedExample]':
        """Recursive step of `walk`."""
        named = self.name_group(group, path, ancestors[-1] if ancestors else None)
        lineage = (*ancestors, named)

        yield named

        for num, member in enumerate(group.members, start=1):
            if isinstance(member, ExampleGroup):
                yield from self._walk(member, (*path, num), lineage)
            else:
                yield self.name_example(member, (*path, num), lineage)

    def assign(self, root: ExampleGroup) -> Naming:
        """Annotate every group and example of a tree.

        Args:
            root: Group to start from.

        Returns:
            Annotated groups and examples, both in declaration order.
        """
        groups, examples = [], []
        for item in self.walk(root):
            if isinstance(item, NamedGroup):
                groups.append(item)
            else:
                examples.append(item)

        return Naming(groups=tuple(groups), examples=tuple(examples))
