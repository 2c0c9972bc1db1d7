"""Pytest integration for test-definition trees.

This module defines a custom pytest collector that expands a root
`ExampleGroup` into executable units and wraps each unit into an
`ExampleItem`.
"""

from typing import TYPE_CHECKING

import pytest

from pytest_nest.core import Expander

from .example import ExampleItem

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Any

if TYPE_CHECKING:
    from pytest_nest.core import ExampleGroup


class SuiteCollector(pytest.Collector):
    """Pytest collector for a module-level root group.

    Node names of collected items are unit identifiers, so node IDs stay
    stable as long as declaration order does not change.
    """

    def __init__(self, *, group: 'ExampleGroup', **kwargs: 'Any') -> None:
        """Initialize a collector.

        Args:
            group: Root group of the tree.
            **kwargs: Keyword pytest.Collector arguments.
        """
        super().__init__(**kwargs)

        self.group = group

    def collect(self) -> 'Iterable[ExampleItem]':
        """Collect pytest items from the tree.

        Returns:
            Iterable of `ExampleItem` instances, one per example.

        Raises:
            DuplicateBindError: If a bind is defined twice in one group
                and strict mode is enabled.
        """
        expander = Expander(self.config.nest_settings)  # type: ignore[attr-defined]

        for unit in expander.expand(self.group):
            yield ExampleItem.from_parent(
                self,
                name=unit.identifier,
                unit=unit,
            )
