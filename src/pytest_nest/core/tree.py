"""Example group tree and its builder API.

An `ExampleGroup` is a named scope owning child groups, examples, hooks,
and bind definitions. Groups are mutable during a single synchronous
construction pass and frozen afterwards; every later mutation raises
`FrozenTreeError`.

Inheritance is explicit: hooks accumulate along parent links and binds
are looked up by walking parent links until the first definition.
"""

from typing import TYPE_CHECKING

from pytest_nest.errors import FrozenTreeError
from pytest_nest.schema import Bind, Example, Hook

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from types import TracebackType
    from typing import Self

    from pytest_nest.schema import HookKind
    from pytest_nest.values import ExampleBody, HookAction, Producer


def _action_title(action: 'Callable[..., object]') -> str | None:
    """Derive a hook title from a callable name.

    Args:
        action: Hook action.

    Returns:
        The callable name, or None for lambdas and anonymous callables.
    """
    name = getattr(action, '__name__', None)
    if not name or name == '<lambda>':
        return None

    return name


class ExampleGroup:
    """Node of a test-definition tree.

    The root has no parent and contributes no description prefix.
    Children and examples are kept in declaration order, both separately
    and as a single interleaved member list.
    """

    def __init__(self, description: str | None = None, *,
                 parent: 'ExampleGroup | None' = None) -> None:
        """Initialize a group.

        Args:
            description: Human-readable description of the group.
            parent: Enclosing group, or None for a root.
        """
        self.description = description
        self.parent = parent

        self._children: list[ExampleGroup] = []
        self._examples: list[Example] = []
        self._members: list[ExampleGroup | Example] = []

        self._before_hooks: list[Hook] = []
        self._after_hooks: list[Hook] = []

        self._binds: dict[str, Bind] = {}
        self._shadowed_binds: list[Bind] = []

        self._frozen = False

    def __repr__(self) -> str:
        """String represenatation."""
        return f'<{type(self).__name__} {self.description!r}>'

    @property
    def children(self) -> tuple['ExampleGroup', ...]:
        """Return child groups in declaration order."""
        return tuple(self._children)

    @property
    def examples(self) -> tuple[Example, ...]:
        """Return own examples in declaration order."""
        return tuple(self._examples)

    @property
    def members(self) -> tuple['ExampleGroup | Example', ...]:
        """Return child groups and examples interleaved in declaration order."""
        return tuple(self._members)

    @property
    def before_hooks(self) -> tuple[Hook, ...]:
        """Return own before hooks in declaration order."""
        return tuple(self._before_hooks)

    @property
    def after_hooks(self) -> tuple[Hook, ...]:
        """Return own after hooks in declaration order."""
        return tuple(self._after_hooks)

    @property
    def binds(self) -> dict[str, Bind]:
        """Return own bind definitions by name."""
        return dict(self._binds)

    @property
    def shadowed_binds(self) -> tuple[Bind, ...]:
        """Return definitions replaced by a later definition in this group."""
        return tuple(self._shadowed_binds)

    @property
    def is_root(self) -> bool:
        """Check whether the group has no parent."""
        return self.parent is None

    @property
    def root(self) -> 'ExampleGroup':
        """Return the root of the tree."""
        group = self
        while group.parent is not None:
            group = group.parent

        return group

    @property
    def frozen(self) -> bool:
        """Check whether the tree no longer accepts mutations."""
        return self._frozen

    def lineage(self) -> tuple['ExampleGroup', ...]:
        """Return groups from the root to this group, inclusive."""
        groups = []

        group: ExampleGroup | None = self
        while group is not None:
            groups.append(group)
            group = group.parent

        return tuple(reversed(groups))

    def walk(self) -> 'Iterator[ExampleGroup]':
        """Iterate over this group and its descendants, depth-first."""
        yield self
        for child in self._children:
            yield from child.walk()

    def lookup_bind(self, name: str) -> Bind | None:
        """Find the nearest bind definition.

        Args:
            name: Bind name.

        Returns:
            The definition of the closest group defining the name,
            or None if no group up to the root defines it.
        """
        group: ExampleGroup | None = self
        while group is not None:
            if (bind := group._binds.get(name)) is not None:  # noqa: SLF001
                return bind
            group = group.parent

        return None

    def freeze(self) -> None:
        """Freeze the whole tree this group belongs to.

        It is safe to call this method multiple times.
        """
        for group in self.root.walk():
            group._frozen = True  # noqa: SLF001

    def _ensure_mutable(self, operation: str) -> None:
        """Reject mutations of a frozen tree.

        Raises:
            FrozenTreeError: If the tree is frozen.
        """
        if self._frozen:
            raise FrozenTreeError.from_operation(operation, self.description)

    def add_child(self, description: str) -> 'ExampleGroup':
        """Declare a nested group.

        Args:
            description: Human-readable description of the group.

        Returns:
            The new child group.

        Raises:
            FrozenTreeError: If the tree is frozen.
        """
        self._ensure_mutable('add a child group')

        child = type(self)(description, parent=self)

        self._children.append(child)
        self._members.append(child)

        return child

    def add_example(self, description: str, body: 'ExampleBody') -> Example:
        """Declare an example.

        Args:
            description: Human-readable description of the example.
            body: Callable receiving the binding store.

        Returns:
            The new example.

        Raises:
            FrozenTreeError: If the tree is frozen.
        """
        self._ensure_mutable('add an example')

        example = Example(description=description, body=body, group=self)

        self._examples.append(example)
        self._members.append(example)

        return example

    def _add_hook(self, kind: 'HookKind', action: 'HookAction',
                  title: str | None = None) -> Hook:
        """Declare a hook of the given kind."""
        self._ensure_mutable(f'add a {kind} hook')

        hook = Hook(kind=kind, action=action, title=title or _action_title(action))
        if kind == 'before':
            self._before_hooks.append(hook)
        else:
            self._after_hooks.append(hook)

        return hook

    def add_before_hook(self, action: 'HookAction', title: str | None = None) -> Hook:
        """Declare a setup action run before every example of the subtree.

        Args:
            action: Callable receiving the binding store.
            title: Optional title; defaults to the callable name.

        Returns:
            The new hook.

        Raises:
            FrozenTreeError: If the tree is frozen.
        """
        return self._add_hook('before', action, title)

    def add_after_hook(self, action: 'HookAction', title: str | None = None) -> Hook:
        """Declare a teardown action run after every example of the subtree.

        Args:
            action: Callable receiving the binding store.
            title: Optional title; defaults to the callable name.

        Returns:
            The new hook.

        Raises:
            FrozenTreeError: If the tree is frozen.
        """
        return self._add_hook('after', action, title)

    def define_bind(self, name: str, producer: 'Producer') -> Bind:
        """Declare a lazily resolved value.

        A definition with a name already defined by an ancestor shadows it
        for this subtree. A second definition in the same group replaces the
        first one and is remembered in `shadowed_binds`.

        Args:
            name: Bind name.
            producer: Zero-argument callable computing the value.

        Returns:
            The new definition.

        Raises:
            FrozenTreeError: If the tree is frozen.
            ValueError: If the name is not a valid identifier.
        """
        self._ensure_mutable('define a bind')

        bind = Bind(name=name, producer=producer)
        if (previous := self._binds.get(name)) is not None:
            self._shadowed_binds.append(previous)

        self._binds[name] = bind

        return bind

    def describe(self, description: str) -> 'ExampleGroup':
        """Declare a nested group, usable as a context manager."""
        return self.add_child(description)

    context = describe

    def it(self, description: str) -> 'Callable[[ExampleBody], ExampleBody]':
        """Declare an example using a decorator.

        Args:
            description: Human-readable description of the example.

        Returns:
            A decorator registering the body and returning it unchanged.
        """
        def decorator(body: 'ExampleBody') -> 'ExampleBody':
            self.add_example(description, body)
            return body

        return decorator

    def before(self, action: 'HookAction') -> 'HookAction':
        """Declare a before hook using a decorator."""
        self.add_before_hook(action)
        return action

    def after(self, action: 'HookAction') -> 'HookAction':
        """Declare an after hook using a decorator."""
        self.add_after_hook(action)
        return action

    def let(self, name: str, producer: 'Producer | None' = None) -> 'Callable[..., object]':
        """Declare a bind directly or using a decorator.

        Args:
            name: Bind name.
            producer: Zero-argument callable. If omitted, a decorator
                registering the decorated callable is returned.

        Returns:
            The producer, or a decorator returning it unchanged.
        """
        if producer is not None:
            self.define_bind(name, producer)
            return producer

        def decorator(func: 'Producer') -> 'Producer':
            self.define_bind(name, func)
            return func

        return decorator

    def __enter__(self) -> 'Self':
        """Enter a construction block."""
        return self

    def __exit__(self, exc_type: type[BaseException] | None,
                 exc_value: BaseException | None,
                 traceback: 'TracebackType | None') -> None:
        """Leave a construction block.

        Leaving the block of a root group completes construction and
        freezes the tree, unless the block raised.
        """
        if exc_type is None and self.is_root:
            self.freeze()


def describe(description: str | None = None) -> ExampleGroup:
    """Create the root group of a test-definition tree.

    Args:
        description: Human-readable description of the root.
            The root description is not part of example descriptions.

    Returns:
        A new root group.
    """
    return ExampleGroup(description)


Example.model_rebuild(_types_namespace={'ExampleGroup': ExampleGroup})
