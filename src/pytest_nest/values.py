"""Core type definitions for test-definition trees.

This module defines the callable shapes accepted by the tree builder:
bind producers, hook actions, and example bodies. It also provides the
value classification tuples used when rendering bound values into
error snippets.
"""

from collections.abc import Callable, MutableMapping
from datetime import date, datetime, timedelta
from typing import Any

from pydantic import SecretStr

#: A value in runtime represents any Python object produced by a bind,
#: assigned by a hook, or consumed by an example body.
type RuntimeValue = Any

#: Zero-argument callable computing the value of a bind.
#: Invoked lazily, at most once per example execution.
type Producer = Callable[[], RuntimeValue]

#: Callable executed before or after an example body.
#: Receives the per-example binding store. Returning exactly `False`
#: reports a failure, any other return value is ignored.
type HookAction = Callable[[MutableMapping[str, RuntimeValue]], RuntimeValue]

#: Callable implementing an example.
#: Same contract as a hook action.
type ExampleBody = Callable[[MutableMapping[str, RuntimeValue]], RuntimeValue]

#: Positional identifier of a group or an example.
type Path = tuple[int, ...]

MAPPINGS = (dict,)
SCALARS = (date, datetime, timedelta, str, bytes, int, float, bool, SecretStr)
SEQUENCES = (list, tuple, set)


def reports_failure(result: RuntimeValue) -> bool:
    """Check whether an action result reports a failure.

    Args:
        result: Value returned by a hook action or example body.

    Returns:
        True only if the result is exactly `False`.
    """
    return result is False
