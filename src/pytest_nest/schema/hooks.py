"""Hook definitions.

A hook is an action attached to a group and executed around every
example of its subtree, before or after the example body.
"""

from typing import Literal

from pydantic import Field

from pytest_nest.models import DescribedMixin, SchemaModel
from pytest_nest.values import HookAction, RuntimeValue, reports_failure

#: Hook placement relative to the example body.
type HookKind = Literal['before', 'after']


class Hook(DescribedMixin, SchemaModel):
    """Setup or teardown action of a group."""

    kind: HookKind

    action: HookAction = Field(
        title='Hook action',
        description=(
            'Callable receiving the binding store of the running example.\n'
            'Returning exactly `False` reports a failure.'
        ),
    )

    @property
    def label(self) -> str:
        """Return a short human-readable identity of the hook."""
        if self.title:
            return f'{self.kind} hook {self.title!r}'

        return f'{self.kind} hook'

    def __call__(self, bindings: dict[str, RuntimeValue]) -> bool:
        """Execute the hook action.

        Args:
            bindings: Binding store of the running example.

        Returns:
            False if the action reported a failure by its return value.

        Raises:
            Any exception raised by the action.
        """
        return not reports_failure(self.action(bindings))
