"""Pytest item executing a single executable unit."""

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from typing import Any

if TYPE_CHECKING:
    from pytest_nest.core import ExecutableUnit


class ExampleItem(pytest.Item):
    """Pytest item executing one example with its hook chain.

    Each execution uses a fresh binding store, so items can be run in any
    order or on independent workers.
    """

    def __init__(self, *, unit: 'ExecutableUnit', **kwargs: 'Any') -> None:
        """Initialize a pytest item backed by an executable unit.

        Args:
            unit: Executable unit of the example.
            **kwargs: Keyword pytest.Item arguments.
        """
        super().__init__(**kwargs)

        self.unit = unit
        self.user_properties.append(('description', unit.description))

    def runtest(self) -> None:
        """Execute the unit and report its first failure."""
        self.unit().raise_for_failure()

    def reportinfo(self) -> tuple['Any', int | None, str]:
        """Describe the item in pytest reports."""
        return self.path, None, f'{self.name}: {self.unit.description}'
