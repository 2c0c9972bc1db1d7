"""Per-example binding store.

The store maps bind names to lazily computed values. It is created fresh
for every execution of an example and discarded afterwards, so no value
and no producer invocation survives between examples, even siblings.
"""

from typing import TYPE_CHECKING

from pytest_nest.errors import BindResolutionFailure

if TYPE_CHECKING:
    from pytest_nest.core.tree import ExampleGroup
    from pytest_nest.values import RuntimeValue


class BindingStore(dict[str, 'RuntimeValue']):
    """Execution context resolving binds of one example.

    The mapping holds values resolved (or assigned) so far. Lookups of
    missing names walk from the owning group up to the root and invoke the
    nearest definition exactly once.

    Item and attribute assignment replace a cached value for the rest of
    the example. Membership tests, `get`, `setdefault`, and `pop` see
    defined binds as well as resolved ones.

    Values are never shared with other stores, which makes stores safe to
    use from independent workers without locking.
    """

    def __init__(self, group: 'ExampleGroup') -> None:
        """Initialize an empty store.

        Args:
            group: Group owning the running example.
        """
        super().__init__()

        self._group = group

    @property
    def group(self) -> 'ExampleGroup':
        """Return the group owning the running example."""
        return self._group

    def resolve(self, name: str) -> 'RuntimeValue':
        """Resolve a bind value.

        Args:
            name: Bind name.

        Returns:
            The memoized value of the nearest definition.

        Raises:
            BindResolutionFailure: If no definition exists or its producer fails.
        """
        if super().__contains__(name):
            return super().__getitem__(name)

        bind = self._group.lookup_bind(name)
        if bind is None:
            raise BindResolutionFailure.undefined(name)

        try:
            value = bind()

        except BindResolutionFailure:
            raise

        except Exception as base:
            raise BindResolutionFailure.from_producer(base, name) from base

        super().__setitem__(name, value)

        return value

    def defines(self, name: str) -> bool:
        """Check whether a name is resolved or resolvable.

        Args:
            name: Bind name.

        Returns:
            True if the name is cached or has a definition.
        """
        return super().__contains__(name) or self._group.lookup_bind(name) is not None

    def __getitem__(self, name: str) -> 'RuntimeValue':
        """Resolve a bind using item access."""
        return self.resolve(name)

    def __getattr__(self, name: str) -> 'RuntimeValue':
        """Resolve a bind using attribute access.

        Raises:
            AttributeError: If the name is private or not defined.
        """
        if name.startswith('_') or not self.defines(name):
            raise AttributeError(name)

        return self.resolve(name)

    def __setattr__(self, name: str, value: 'RuntimeValue') -> None:
        """Rebind a value using attribute assignment.

        Private names are regular instance attributes.
        """
        if name.startswith('_'):
            super().__setattr__(name, value)
            return

        self[name] = value

    def __contains__(self, name: object) -> bool:
        """Check whether a name is resolved or resolvable."""
        return isinstance(name, str) and self.defines(name)

    def get(self, name: str, default: 'RuntimeValue' = None) -> 'RuntimeValue':
        """Resolve a bind, or return `default` if it has no definition."""
        if not self.defines(name):
            return default

        return self.resolve(name)

    def setdefault(self, name: str, default: 'RuntimeValue' = None) -> 'RuntimeValue':
        """Resolve a bind, or assign `default` if it has no definition."""
        if not self.defines(name):
            super().__setitem__(name, default)

        return self.resolve(name)

    def pop(self, name: str, *default: 'RuntimeValue') -> 'RuntimeValue':
        """Resolve a bind and drop it from the store.

        The next access invokes the producer again.

        Raises:
            KeyError: If the name has no definition and no default is given.
        """
        if not self.defines(name):
            return super().pop(name, *default)

        value = self.resolve(name)
        super().pop(name)

        return value
