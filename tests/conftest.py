"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest

from pytest_nest.settings import NestSettings

if TYPE_CHECKING:
    from collections.abc import Callable


class Recorder:
    """Collector of hook and body invocations.

    Actions created by the recorder append their label to `calls`,
    so tests can assert the exact execution order of a unit.
    """

    def __init__(self) -> None:
        """Initialize an empty recorder."""
        self.calls: list[str] = []

    def action(self, label: str, *, fail: bool = False,
               result: object = None) -> 'Callable[[dict], object]':
        """Create a recording action.

        Args:
            label: Label appended to `calls` on invocation.
            fail: Whether the action raises after recording.
            result: Value returned by the action.

        Returns:
            A callable accepting a binding store.
        """
        def record(bindings: dict) -> object:  # noqa: ARG001
            self.calls.append(label)
            if fail:
                raise RuntimeError(f'{label} failed')
            return result

        record.__name__ = label

        return record


@pytest.fixture
def recorder() -> Recorder:
    """Provide a fresh invocation recorder."""
    return Recorder()


@pytest.fixture
def settings() -> NestSettings:
    """Provide default settings independent of `NEST_*` variables."""
    return NestSettings(
        separator=' ',
        id_separator='_',
        strict=True,
        order='declared',
    )
