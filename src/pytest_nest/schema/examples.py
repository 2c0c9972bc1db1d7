"""Example definitions.

An example is a single runnable test case owned by exactly one group.
Examples are not inherited: a group's examples never appear under its
children.
"""

from typing import TYPE_CHECKING

from pydantic import Field

from pytest_nest.models import SchemaModel
from pytest_nest.values import ExampleBody, RuntimeValue, reports_failure

if TYPE_CHECKING:
    from pytest_nest.core.tree import ExampleGroup


class Example(SchemaModel):
    """Leaf test case of a tree."""

    description: str = Field(
        title='Description',
        description='Human-readable description of the example.',
    )

    body: ExampleBody = Field(
        title='Example body',
        description=(
            'Callable receiving the binding store of the running example.\n'
            'Returning exactly `False` reports a failure.'
        ),
    )

    #: Owning group. Used for bind lookups only.
    group: 'ExampleGroup' = Field(exclude=True, repr=False)

    def __call__(self, bindings: dict[str, RuntimeValue]) -> bool:
        """Execute the example body.

        Args:
            bindings: Binding store of the running example.

        Returns:
            False if the body reported a failure by its return value.

        Raises:
            Any exception raised by the body, including `AssertionError`.
        """
        return not reports_failure(self.body(bindings))
