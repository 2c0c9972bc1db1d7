"""Bind definitions.

A bind associates a name with a zero-argument producer. The producer is
not invoked when the bind is defined; a binding store invokes it on the
first access within an example and memoizes the result for the rest of
that example only.
"""

from pydantic import Field

from pytest_nest.models import SchemaModel
from pytest_nest.names import BindName  # noqa: TC001
from pytest_nest.values import Producer, RuntimeValue


class Bind(SchemaModel):
    """Named, lazily resolved value definition."""

    name: BindName

    producer: Producer = Field(
        title='Producer',
        description=(
            'Zero-argument callable computing the bound value.\n'
            'Invoked at most once per example execution.'
        ),
    )

    def __call__(self) -> RuntimeValue:
        """Invoke the producer.

        Returns:
            A freshly produced value.

        Raises:
            Any exception raised by the producer.
        """
        return self.producer()
