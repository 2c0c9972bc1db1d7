"""Nested test-definition trees expanded into pytest test items.

The `pytest_nest` package lets tests be declared as a tree of named
groups with examples, setup and teardown hooks, and lazily computed,
per-example memoized binds, and expands the tree into independently
runnable units.

Key features:
- before hooks inherited outer-to-inner, after hooks inner-to-outer;
- binds overridable by nested groups and reset for every example;
- stable positional identifiers that disambiguate identical descriptions;
- collection of module-level trees as pytest test items.
"""

from pytest_nest.core import ExampleGroup, Expander, describe

__all__ = (
    'ExampleGroup',
    'Expander',
    'describe',
)
