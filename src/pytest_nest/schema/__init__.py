"""Element models of a test-definition tree.

Defines immutable Pydantic models for the leaves of a tree: bind
definitions, hooks, and examples. Groups are mutable while the tree is
constructed and live in `pytest_nest.core.tree`.
"""

from .binds import Bind
from .examples import Example
from .hooks import Hook, HookKind

__all__ = (
    'Bind',
    'Example',
    'Hook',
    'HookKind',
)
