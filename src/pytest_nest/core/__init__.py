"""Expansion engine for test-definition trees.

This package turns a tree of nested groups, examples, hooks, and binds
into a flat collection of independently runnable units.

It provides:
- the tree-builder API (`ExampleGroup`);
- a deterministic naming pass assigning paths and descriptions;
- composition of inherited setup and teardown chains;
- the expansion engine and executable units.
"""

from .expansion import Expander
from .hooks import HookChain, HookChainResolver, HookLevel
from .naming import NamedExample, NamedGroup, Naming, PathAssigner
from .tree import ExampleGroup, describe
from .unit import ExecutableUnit, Outcome

__all__ = (
    'ExampleGroup',
    'ExecutableUnit',
    'Expander',
    'HookChain',
    'HookChainResolver',
    'HookLevel',
    'NamedExample',
    'NamedGroup',
    'Naming',
    'Outcome',
    'PathAssigner',
    'describe',
)
