"""Expansion of a tree into executable units.

The expander completes construction, validates bind definitions, names
the tree, and emits one executable unit per example in a single
traversal. Hooks, producers, and bodies are only referenced here; they
run when a unit is called.
"""

from typing import TYPE_CHECKING
from warnings import warn

from pytest_nest.errors import BindShadowWarning, DuplicateBindError, ErrorContext
from pytest_nest.settings import NestSettings

from .hooks import HookChainResolver
from .naming import PathAssigner
from .unit import ExecutableUnit

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .naming import NamedExample, NamedGroup
    from .tree import ExampleGroup


class Expander:
    """Expansion engine producing executable units from a tree.

    Attributes:
        settings: Naming, ordering, and strictness settings.
        assigner: Naming pass used for paths and descriptions.
        resolver: Hook chain resolver.
    """

    def __init__(self, settings: NestSettings | None = None) -> None:
        """Initialize the expander.

        Args:
            settings: Expansion settings. Resolved from the environment
                if omitted.
        """
        self.settings = settings if settings is not None else NestSettings()

        self.assigner = PathAssigner(self.settings)
        self.resolver = HookChainResolver()

    def emit_bind_issue(self, message: str, name: str,
                        description: str | None = None) -> DuplicateBindError | None:
        """Emit or prepare a same-level bind redefinition issue.

        In strict mode an error is returned to be raised by the caller.
        Otherwise a warning is emitted and None is returned.

        Args:
            message: Human-readable message.
            name: Redefined bind name.
            description: Description of the group.

        Returns:
            An error in strict mode, otherwise None.
        """
        if self.settings.strict:
            return DuplicateBindError(
                message,
                name=name,
                context=ErrorContext(description=description, bind_name=name),
            )

        warn(message, BindShadowWarning, stacklevel=4)

        return None

    def validate(self, groups: 'Iterable[NamedGroup]') -> None:
        """Check groups for same-level bind redefinitions.

        Args:
            groups: Annotated groups of the tree.

        Raises:
            DuplicateBindError: If a bind is redefined within a group in strict mode.
        """
        for named in groups:
            for bind in named.group.shadowed_binds:
                label = named.description or 'root group'
                if error := self.emit_bind_issue(
                    f'Bind {bind.name!r} is defined more than once in {label!r}',
                    bind.name,
                    named.description,
                ):
                    raise error

    def make_unit(self, named: 'NamedExample') -> ExecutableUnit:
        """Build the executable unit of one annotated example.

        Args:
            named: Annotated example.

        Returns:
            The executable unit.
        """
        return ExecutableUnit(
            path=named.path,
            identifier=named.identifier,
            description=named.description,
            example=named.example,
            chain=self.resolver.resolve(named.lineage),
        )

    def expand(self, root: 'ExampleGroup') -> tuple[ExecutableUnit, ...]:
        """Expand a tree into executable units.

        The tree is frozen first. Units are emitted in declaration order,
        or in reverse declaration order when configured.

        Args:
            root: Root group of the tree.

        Returns:
            One executable unit per example.

        Raises:
            DuplicateBindError: If a bind is redefined within a group in strict mode.
        """
        root.freeze()

        naming = self.assigner.assign(root)
        self.validate(naming.groups)

        units = tuple(
            self.make_unit(named)
            for named in naming.examples
        )

        if self.settings.order == 'reversed':
            return units[::-1]

        return units
