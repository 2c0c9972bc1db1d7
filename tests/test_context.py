"""Tests for the per-example binding store."""

from typing import TYPE_CHECKING

import pytest

from pytest_nest.context import BindingStore
from pytest_nest.core import Expander, describe
from pytest_nest.errors import BindResolutionFailure

if TYPE_CHECKING:
    from collections.abc import Callable

    from pytest_mock import MockerFixture

    from pytest_nest.settings import NestSettings


def test_producer_is_invoked_once(mocker: 'MockerFixture') -> None:
    """Memoize the produced value for the lifetime of a store."""
    producer = mocker.Mock(return_value=[])

    root = describe()
    root.define_bind('items', producer)

    bindings = BindingStore(root)

    first = bindings.resolve('items')
    second = bindings['items']
    third = bindings.items  # dict method wins over attribute resolution

    assert first is second
    assert callable(third)
    assert producer.call_count == 1


def test_stores_are_isolated(mocker: 'MockerFixture') -> None:
    """Reset values and producer invocations for every store."""
    producer = mocker.Mock(side_effect=lambda: [])

    root = describe()
    root.define_bind('values', producer)

    first = BindingStore(root)
    first['values'].append('mutated')

    second = BindingStore(root)

    assert first['values'] == ['mutated']
    assert second['values'] == []
    assert producer.call_count == 2


def test_mutation_is_visible_within_store() -> None:
    """Return the same instance after in-place mutation."""
    root = describe()
    root.define_bind('counter', lambda: {'value': 0})

    bindings = BindingStore(root)
    bindings['counter']['value'] += 1

    assert bindings.counter == {'value': 1}


def test_assignment_replaces_value(mocker: 'MockerFixture') -> None:
    """Use an assigned value instead of invoking the producer."""
    producer = mocker.Mock(return_value=0)

    root = describe()
    root.define_bind('counter', producer)

    bindings = BindingStore(root)
    bindings['counter'] = 10

    assert bindings.resolve('counter') == 10
    producer.assert_not_called()


def test_child_definition_shadows_ancestor() -> None:
    """Resolve the most specific definition only within its subtree."""
    outer = describe().add_child('G')
    outer.define_bind('v', lambda: 3)

    inner = outer.add_child('H')
    inner.define_bind('v', lambda: 99)

    assert BindingStore(inner).resolve('v') == 99
    assert BindingStore(outer).resolve('v') == 3


def test_undefined_bind() -> None:
    """Fail on names without any definition."""
    bindings = BindingStore(describe())

    with pytest.raises(BindResolutionFailure, match=r"^Bind 'missing' is not defined"):
        bindings.resolve('missing')

    with pytest.raises(AttributeError, match=r'^missing$'):
        bindings.missing  # noqa: B018

    assert not bindings.defines('missing')


def test_private_names_are_not_resolved() -> None:
    """Never resolve private attribute names."""
    root = describe()
    bindings = BindingStore(root)

    with pytest.raises(AttributeError):
        bindings._secret  # noqa: B018, SLF001

    assert bindings.group is root


def test_producer_failure(mocker: 'MockerFixture') -> None:
    """Wrap producer errors and leave nothing cached."""
    producer = mocker.Mock(side_effect=[ValueError('broken'), 'fixed'])

    root = describe()
    root.define_bind('value', producer)

    bindings = BindingStore(root)

    with pytest.raises(BindResolutionFailure, match=r"^bind 'value' failed") as error:
        bindings.resolve('value')

    assert error.value.kind == 'bind'
    assert error.value.origin == "bind 'value'"
    assert isinstance(error.value.__cause__, ValueError)
    assert isinstance(error.value.error, ValueError)
    assert "resolving 'value'" in str(error.value)

    assert 'value' not in bindings.keys()
    assert bindings.resolve('value') == 'fixed'


def test_mapping_methods_resolve(mocker: 'MockerFixture') -> None:
    """Resolve defined binds through the mapping interface."""
    producer = mocker.Mock(return_value=3)

    root = describe()
    root.define_bind('x', producer)

    bindings = BindingStore(root)

    assert 'x' in bindings
    assert 'missing' not in bindings
    assert 1 not in bindings
    producer.assert_not_called()

    assert bindings.get('x') == 3
    assert bindings.get('missing') is None
    assert bindings.get('missing', 'fallback') == 'fallback'
    assert bindings.setdefault('x', 10) == 3
    assert bindings.setdefault('y', 10) == 10
    assert bindings['y'] == 10
    assert producer.call_count == 1


def test_pop_drops_resolved_value(mocker: 'MockerFixture') -> None:
    """Produce the value again after it was popped."""
    producer = mocker.Mock(side_effect=lambda: [])

    root = describe()
    root.define_bind('items', producer)

    bindings = BindingStore(root)

    popped = bindings.pop('items')

    assert popped == []
    assert 'items' not in bindings.keys()
    assert bindings['items'] is not popped
    assert producer.call_count == 2

    assert bindings.pop('missing', None) is None

    with pytest.raises(KeyError):
        bindings.pop('missing')


def test_attribute_assignment_rebinds(mocker: 'MockerFixture') -> None:
    """Share attribute assignment with item access."""
    producer = mocker.Mock(return_value=3)

    root = describe()
    root.define_bind('x', producer)

    bindings = BindingStore(root)
    bindings.x = 5

    assert bindings['x'] == 5
    assert bindings.x == 5
    assert 'x' not in vars(bindings)
    assert bindings.group is root
    producer.assert_not_called()


def test_hook_rebinding_is_visible_to_body(settings: 'NestSettings') -> None:
    """See values assigned by attribute in a hook from the body."""
    root = describe()
    root.define_bind('x', lambda: 3)

    @root.before
    def rebind(bindings: BindingStore) -> None:
        bindings.x = 5

    root.add_example('reads rebound value', lambda bindings: bindings['x'] == 5)

    (unit,) = Expander(settings).expand(root)

    assert unit().ok


def test_override_through_expansion(settings: 'NestSettings') -> None:
    """Resolve the nested override under H and the outer value under G."""
    root = describe()
    outer = root.add_child('G')
    outer.define_bind('v', lambda: 3)

    seen: dict[str, int] = {}

    def record(label: str) -> 'Callable[[BindingStore], None]':
        def body(bindings: BindingStore) -> None:
            seen[label] = bindings['v']
        return body

    outer.add_example('outer', record('G'))

    inner = outer.add_child('H')
    inner.define_bind('v', lambda: 99)
    inner.add_example('inner', record('H'))

    units = Expander(settings).expand(root)

    assert [unit().ok for unit in units] == [True, True]
    assert seen == {'G': 3, 'H': 99}
