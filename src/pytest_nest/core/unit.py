"""Executable units and their outcomes.

An executable unit is the flattened, self-contained representation of one
example: its identifier, description, composed hook chain, and body.
Calling a unit performs the before-sequence, the body, and the
after-sequence against a fresh binding store and returns an outcome.

Failure policy:
- a before hook failure skips the remaining befores and the body;
- after hooks run for every level whose before phase was entered,
  innermost first, even when a before hook or the body failed;
- an after hook failure does not prevent remaining after hooks.

Failures are collected per unit and never raised from the call itself.
"""

from functools import partial
from typing import TYPE_CHECKING

from pydantic import Field

from pytest_nest.context import BindingStore
from pytest_nest.errors import (
    BindResolutionFailure,
    BodyFailure,
    ErrorContext,
    HookFailure,
    NestError,
    UnitFailure,
)
from pytest_nest.models import SchemaModel
from pytest_nest.schema import Example, Hook  # noqa: TC001

from .hooks import HookChain, HookLevel  # noqa: TC001

if TYPE_CHECKING:
    from collections.abc import Callable

    from pytest_nest.errors import Stage


class Outcome(SchemaModel):
    """Observable result of executing one unit."""

    identifier: str
    description: str

    failures: tuple[UnitFailure, ...] = Field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        """Check whether the unit succeeded."""
        return not self.failures

    @property
    def failure(self) -> UnitFailure | None:
        """Return the first failure, if any."""
        if not self.failures:
            return None

        return self.failures[0]

    def raise_for_failure(self) -> None:
        """Re-raise the first failure for host runners.

        Assertion violations of the example body are raised as
        `AssertionError` enriched with unit context.

        Raises:
            AssertionError: If the body violated an assertion.
            UnitFailure: If a hook, the body, or a bind failed otherwise.
        """
        failure = self.failure
        if failure is None:
            return

        if isinstance(failure, BodyFailure) and isinstance(failure.error, AssertionError):
            message = 'Expectation fail'
            if detail := f'{failure.error}':
                message += f': {detail}'
            raise AssertionError(NestError.format(
                message,
                ErrorContext({
                    **(failure.context or {}),
                    'element': {'example': self.description},
                }),
            )) from failure.error

        raise failure


class ExecutableUnit(SchemaModel):
    """Self-contained executable representation of one example."""

    path: tuple[int, ...]
    identifier: str
    description: str

    example: Example = Field(exclude=True, repr=False)
    chain: HookChain = Field(repr=False)

    @property
    def before_sequence(self) -> tuple[Hook, ...]:
        """Return before hooks, outermost group first."""
        return self.chain.before_sequence

    @property
    def after_sequence(self) -> tuple[Hook, ...]:
        """Return after hooks, innermost group first."""
        return self.chain.after_sequence

    @property
    def body(self) -> Example:
        """Return the example executed by this unit."""
        return self.example

    def bindings(self) -> BindingStore:
        """Create a fresh binding store for one execution."""
        return BindingStore(self.example.group)

    def run_callable(self, executor: 'Callable[[], bool]',
                     failure_type: type[UnitFailure], *,
                     origin: str,
                     bindings: BindingStore,
                     stage: 'Stage',
                     hook_num: int | None = None) -> UnitFailure | None:
        """Execute a hook or the body with unified failure handling.

        Args:
            executor: Callable performing the actual execution.
                Returns False if the action reported a failure.
            failure_type: Failure class for errors raised by the executor.
            origin: Identity of the executed element.
            bindings: Binding store of this execution.
            stage: Execution stage.
            hook_num: Position of the hook within its sequence.

        Returns:
            A failure, or None if execution succeeded.
        """
        try:
            if not executor():
                raise AssertionError(f'{origin} reported failure')

        except BindResolutionFailure as failure:
            return failure.locate(
                identifier=self.identifier,
                description=self.description,
                stage=stage,
                hook_num=hook_num,
                bindings=dict(bindings),
            )

        except Exception as base:
            failure = failure_type.from_error(
                base,
                origin=origin,
                identifier=self.identifier,
                description=self.description,
                stage=stage,
                hook_num=hook_num,
                bindings=dict(bindings),
            )
            failure.__cause__ = base
            return failure

        return None

    @staticmethod
    def hook_origin(hook: Hook, level: HookLevel) -> str:
        """Build a human-readable identity of a hook."""
        if level.description:
            return f'{hook.label} of {level.description!r}'

        return f'{hook.label} of root group'

    def run_befores(self, bindings: BindingStore, entered: list[HookLevel],
                    failures: list[UnitFailure]) -> bool:
        """Execute the before-sequence.

        Args:
            bindings: Binding store of this execution.
            entered: Receives levels whose before phase was started.
            failures: Receives the failure, if any.

        Returns:
            True if every before hook succeeded.
        """
        hook_num = 0
        for level in self.chain.levels:
            entered.append(level)
            for hook in level.before:
                failure = self.run_callable(
                    partial(hook, bindings),
                    HookFailure,
                    origin=self.hook_origin(hook, level),
                    bindings=bindings,
                    stage='before',
                    hook_num=hook_num,
                )
                if failure is not None:
                    failures.append(failure)
                    return False
                hook_num += 1

        return True

    def run_body(self, bindings: BindingStore) -> UnitFailure | None:
        """Execute the example body.

        Args:
            bindings: Binding store of this execution.

        Returns:
            A failure, or None if the body succeeded.
        """
        return self.run_callable(
            partial(self.example, bindings),
            BodyFailure,
            origin=f'example {self.example.description!r}',
            bindings=bindings,
            stage='body',
        )

    def run_afters(self, bindings: BindingStore,
                   entered: list[HookLevel]) -> list[UnitFailure]:
        """Execute after hooks of entered levels, innermost first.

        Args:
            bindings: Binding store of this execution.
            entered: Levels whose before phase was started.

        Returns:
            Failures of after hooks in execution order.
        """
        failures = []

        hook_num = 0
        for level in reversed(entered):
            for hook in level.after:
                failure = self.run_callable(
                    partial(hook, bindings),
                    HookFailure,
                    origin=self.hook_origin(hook, level),
                    bindings=bindings,
                    stage='after',
                    hook_num=hook_num,
                )
                if failure is not None:
                    failures.append(failure)
                hook_num += 1

        return failures

    def __call__(self) -> Outcome:
        """Execute the unit.

        Returns:
            The outcome with every failure observed, in execution order.
        """
        bindings = self.bindings()

        failures: list[UnitFailure] = []
        entered: list[HookLevel] = []

        try:
            if self.run_befores(bindings, entered, failures) and (
                failure := self.run_body(bindings)
            ) is not None:
                failures.append(failure)

        finally:
            failures.extend(self.run_afters(bindings, entered))

        return Outcome(
            identifier=self.identifier,
            description=self.description,
            failures=tuple(failures),
        )
