"""Tests for hook chain composition."""

from typing import TYPE_CHECKING

import pytest

from pytest_nest.core import Expander, HookChainResolver, PathAssigner, describe

if TYPE_CHECKING:
    from pytest_nest.settings import NestSettings

    from .conftest import Recorder


@pytest.mark.parametrize('counts', (
    pytest.param([(0, 0)], id='root only'),
    pytest.param([(1, 1), (2, 0)], id='two levels'),
    pytest.param([(2, 1), (0, 2), (1, 1), (3, 0)], id='four levels'),
))
def test_chain_lengths_and_order(counts: list[tuple[int, int]],
                                 settings: 'NestSettings', recorder: 'Recorder') -> None:
    """Compose befores outermost first and afters innermost first."""
    group = root = describe()
    for depth, (befores, afters) in enumerate(counts):
        if depth:
            group = group.add_child(f'level {depth}')
        for num in range(befores):
            group.add_before_hook(recorder.action(f'b{depth}.{num}'))
        for num in range(afters):
            group.add_after_hook(recorder.action(f'a{depth}.{num}'))

    group.add_example('example', recorder.action('body'))

    naming = PathAssigner(settings).assign(root)
    chain = HookChainResolver().resolve(naming.examples[0].lineage)

    assert len(chain.levels) == len(counts)
    assert len(chain.before_sequence) == sum(befores for befores, _ in counts)
    assert len(chain.after_sequence) == sum(afters for _, afters in counts)

    assert [hook.title for hook in chain.before_sequence] == [
        f'b{depth}.{num}'
        for depth, (befores, _) in enumerate(counts)
        for num in range(befores)
    ]
    assert [hook.title for hook in chain.after_sequence] == [
        f'a{depth}.{num}'
        for depth, (_, afters) in reversed(list(enumerate(counts)))
        for num in range(afters)
    ]


def test_sibling_groups_do_not_share_hooks(settings: 'NestSettings',
                                           recorder: 'Recorder') -> None:
    """Inherit hooks from ancestors only, never from siblings."""
    root = describe()
    root.add_before_hook(recorder.action('root'))

    left = root.add_child('left')
    left.add_before_hook(recorder.action('left'))
    left.add_example('example', recorder.action('body'))

    right = root.add_child('right')
    right.add_after_hook(recorder.action('right'))
    right.add_example('example', recorder.action('body'))

    left_unit, right_unit = Expander(settings).expand(root)

    assert [hook.title for hook in left_unit.before_sequence] == ['root', 'left']
    assert left_unit.after_sequence == ()
    assert [hook.title for hook in right_unit.before_sequence] == ['root']
    assert [hook.title for hook in right_unit.after_sequence] == ['right']


def test_examples_are_not_inherited(settings: 'NestSettings', recorder: 'Recorder') -> None:
    """Produce units only for examples owned by each group."""
    root = describe()
    root.add_example('outer', recorder.action('outer'))
    root.add_child('inner').add_example('inner', recorder.action('inner'))

    units = Expander(settings).expand(root)

    assert [unit.description for unit in units] == ['outer', 'inner inner']


def test_levels_keep_group_identity(settings: 'NestSettings', recorder: 'Recorder') -> None:
    """Attach path and description of each contributing group."""
    root = describe()
    child = root.add_child('child')
    child.add_after_hook(recorder.action('cleanup'))
    child.add_example('example', recorder.action('body'))

    (unit,) = Expander(settings).expand(root)

    assert [(level.path, level.description) for level in unit.chain.levels] == [
        ((), ''),
        ((1,), 'child'),
    ]
    assert [hook.title for hook in unit.chain.levels[1].after] == ['cleanup']
