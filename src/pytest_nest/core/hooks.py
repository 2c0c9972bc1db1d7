"""Composition of setup and teardown chains.

Befores establish state outward-in: the root's befores run first and the
owning group's befores run last. Afters tear down inward-out: the owning
group's afters run first and the root's afters run last. Within a single
group, declaration order is preserved in both directions.
"""

from itertools import chain

from pydantic import Field

from pytest_nest.models import SchemaModel
from pytest_nest.schema import Hook  # noqa: TC001

from .naming import NamedGroup  # noqa: TC001


class HookLevel(SchemaModel):
    """Hooks contributed by one group of an example's ancestry."""

    path: tuple[int, ...]
    description: str

    before: tuple[Hook, ...] = Field(default_factory=tuple)
    after: tuple[Hook, ...] = Field(default_factory=tuple)


class HookChain(SchemaModel):
    """Ordered hooks around one example.

    Levels are kept from the root to the owning group, so that execution
    can tell which groups' before phase was entered.
    """

    levels: tuple[HookLevel, ...] = Field(default_factory=tuple)

    @property
    def before_sequence(self) -> tuple[Hook, ...]:
        """Return before hooks, outermost group first."""
        return tuple(chain.from_iterable(
            level.before
            for level in self.levels
        ))

    @property
    def after_sequence(self) -> tuple[Hook, ...]:
        """Return after hooks, innermost group first."""
        return tuple(chain.from_iterable(
            level.after
            for level in reversed(self.levels)
        ))


class HookChainResolver:
    """Resolver of hook chains from group ancestry."""

    @staticmethod
    def resolve_level(named: NamedGroup) -> HookLevel:
        """Collect own hooks of a single group.

        Args:
            named: Annotated group.

        Returns:
            Hooks of the group in declaration order.
        """
        return HookLevel(
            path=named.path,
            description=named.description,
            before=named.group.before_hooks,
            after=named.group.after_hooks,
        )

    def resolve(self, lineage: tuple[NamedGroup, ...]) -> HookChain:
        """Compose the hook chain of an example.

        Args:
            lineage: Annotated groups from the root to the owning group.

        Returns:
            Hook chain with one level per group.
        """
        return HookChain(levels=tuple(
            self.resolve_level(named)
            for named in lineage
        ))
