"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report tree construction misuse, ambiguous bind definitions, and
per-unit failures of hooks, bodies, and bind producers in a structured
and extensible way.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, ClassVar, Literal, TypedDict

from yaml import dump

from pytest_nest.values import MAPPINGS, SCALARS, SEQUENCES

if TYPE_CHECKING:
    from typing import Self

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_SEPARATOR = f' ---{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_UNNAMED = '<unnamed>'
FORMAT_INDENT = 4

#: Stage of a unit execution where a failure occurred.
type Stage = Literal['before', 'body', 'after']

#: Kind of a unit failure.
type FailureKind = Literal['hook', 'body', 'bind']


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    This structure aggregates optional metadata that may be available
    at different stages of tree construction, expansion, or unit execution.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Identifier of the unit where the error occurred.
    identifier: str | None
    #: Human-readable description of the unit or group.
    description: str | None

    #: Execution stage of the unit.
    stage: Stage | None
    #: Position of the hook within the before- or after-sequence.
    hook_num: int | None
    #: Name of the bind being resolved.
    bind_name: str | None

    #: Underlying exception that triggered formatting.
    error: Exception | None

    #: Bound values resolved at the moment of failure.
    bindings: dict[str, Any] | None
    #: Element associated with the error.
    element: Any


class ErrorFormatter:
    """Renderer of error messages for units and trees.

    A message is followed by the unit location (description, identifier,
    stage, hook position, bind being resolved) and, when the failing
    element is known, by a YAML snippet of the bound values.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Append location and snippet lines to a message.

        Args:
            message: First line of the rendered message.
            context: Optional error context.

        Returns:
            The message unchanged without context, otherwise a multi-line text.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format unit and stage location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including the unit identifier,
            description, stage, hook number, and bind name when available.
        """
        indent = cls._indent_prefix(indent)

        description = context.get('description') or FORMAT_UNNAMED

        message = f'{indent}in "{description}"'
        if identifier := context.get('identifier'):
            message += f' [{identifier}]'
        message += linesep

        if (stage := context.get('stage')) is not None:
            message += f'{indent}on {stage}'
            if (hook_num := context.get('hook_num')) is not None:
                hook_num += 1
                message += f' hook {hook_num}'
            if bind_name := context.get('bind_name'):
                message += f', resolving {bind_name!r}'
            message += linesep
        elif bind_name := context.get('bind_name'):
            message += f'{indent}resolving {bind_name!r}{linesep}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Render the failing element together with the values bound so far.

        The bindings document, if any, comes first and is separated from
        the element document, so a reader sees the state of the example
        right above the hook, body, or bind that failed.

        Args:
            context: Error context containing element or bindings data.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A multi-line snippet, or an empty string without an element.
        """
        element = context.get('element')
        if not element:
            return ''

        prefix = cls._indent_prefix(indent)

        documents = []
        if bindings := context.get('bindings'):
            documents.append(cls._to_yaml({'bindings': dict(bindings)}, prefix))
        documents.append(cls._to_yaml(element, prefix))

        separator = f'{linesep}{prefix}{SNIPPET_SEPARATOR}'

        return f'{prefix}{SNIPPET_ELLIPSIS}{separator.join(documents)}{linesep}'

    @classmethod
    def _mask_opaque(cls, value: Any) -> Any:  # noqa: ANN401
        """Replace bound objects that have no plain data form.

        Producers may return connections, clients, or mocks; only scalars
        and containers of scalars are rendered.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {f'{key}': cls._mask_opaque(item) for key, item in value.items()}

        if isinstance(value, SEQUENCES):
            return [cls._mask_opaque(item) for item in value]

        return FORMAT_REPLACER

    @classmethod
    def _to_yaml(cls, value: Any, prefix: str = '') -> str:  # noqa: ANN401
        """Dump a value as a YAML block with every non-blank line prefixed."""
        text = dump(cls._mask_opaque(value), indent=SNIPPET_INDENT, sort_keys=False)
        if not prefix:
            return text

        return linesep.join(f'{prefix}{line}' for line in text.splitlines() if line.strip())

    @staticmethod
    def _indent_prefix(indent: str | int | None = None) -> str:
        """Turn a number of spaces or a literal prefix into a prefix string."""
        if isinstance(indent, str):
            return indent

        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        return ''


class NestWarning(UserWarning):
    """Warning emitted for non-fatal tree issues."""


class BindShadowWarning(NestWarning):
    """Warning emitted when a bind is redefined within the same group.

    Emitted at expansion time in relaxed mode. The last definition wins.
    """


class NestError(Exception, ErrorFormatter):
    """Base exception for all pytest-nest errors.

    All custom exceptions raised by the library should inherit from
    this class to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional runtime values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String represenatation."""
        return self.format(self.message, self.context)


class FrozenTreeError(NestError):
    """Error raised when a frozen tree is mutated.

    Indicates a usage contract violation by the code building the tree.
    It is a programming error, not a test outcome.
    """

    @classmethod
    def from_operation(cls, operation: str, description: str | None) -> 'Self':
        """Create an error for a rejected mutation.

        Args:
            operation: Name of the rejected builder operation.
            description: Description of the group being mutated.

        Returns:
            An initialized FrozenTreeError.
        """
        return cls(
            f'Can not {operation} on a frozen tree',
            context=ErrorContext(description=description),
        )


class DuplicateBindError(NestError):
    """Error raised when a bind is defined twice in the same group.

    Redefinition in a descendant group is a regular override; only a
    second definition at the same level is ambiguous.
    """

    def __init__(self, message: str, *, name: str,
                 context: ErrorContext | None = None) -> None:
        """Initialize a duplicate bind error.

        Args:
            message: Human-readable error description.
            name: Name of the redefined bind.
            context: Error context containing optional runtime values.
        """
        self.name = name

        super().__init__(message, context=context)


class UnitFailure(NestError):
    """Base class for failures observed while executing a unit.

    Unit failures never abort other units. They are collected into the
    outcome of the unit where they occurred.
    """

    #: Kind of the failure.
    kind: ClassVar[FailureKind]

    def __init__(self, message: str, *, origin: str,
                 context: ErrorContext | None = None) -> None:
        """Initialize a unit failure.

        Args:
            message: Human-readable error description.
            origin: Identity of the hook, body, or bind that failed.
            context: Error context containing optional runtime values.
        """
        self.origin = origin

        super().__init__(message, context=context)

    @property
    def error(self) -> Exception | None:
        """Return the underlying exception, if any."""
        if not self.context:
            return None

        return self.context.get('error')

    @classmethod
    def from_error(cls, error: Exception, *,  # noqa: PLR0913
                   origin: str,
                   identifier: str | None = None,
                   description: str | None = None,
                   stage: Stage | None = None,
                   hook_num: int | None = None,
                   bindings: dict[str, Any] | None = None) -> 'Self':
        """Create a failure from an exception raised by user code.

        Args:
            error: Exception raised by a hook, body, or producer.
            origin: Identity of the failing element.
            identifier: Identifier of the unit.
            description: Description of the unit.
            stage: Execution stage.
            hook_num: Position of the hook within its sequence.
            bindings: Bound values at the moment of failure.

        Returns:
            An initialized failure carrying the original error in its context.
        """
        error_context = ErrorContext(
            identifier=identifier,
            description=description,
            stage=stage,
            hook_num=hook_num,
            error=error,
            bindings=bindings,
            element={cls.kind: origin},
        )

        message = f'{origin} failed'
        if detail := f'{error}':
            message += f'{linesep}{' ' * FORMAT_INDENT}{detail}'
        else:
            message += f'{linesep}{' ' * FORMAT_INDENT}{error!r}'

        return cls(message, origin=origin, context=error_context)

    def locate(self, *, identifier: str | None = None,
               description: str | None = None,
               stage: Stage | None = None,
               hook_num: int | None = None,
               bindings: dict[str, Any] | None = None) -> 'Self':
        """Attach unit location to a failure raised deeper in the call stack.

        Values already present in the context are kept.

        Returns:
            The same failure instance.
        """
        located = ErrorContext(
            identifier=identifier,
            description=description,
            stage=stage,
            hook_num=hook_num,
            bindings=bindings,
        )

        self.context = ErrorContext({
            **{key: value for key, value in located.items() if value is not None},
            **{key: value for key, value in (self.context or {}).items() if value is not None},
        })

        return self


class HookFailure(UnitFailure):
    """Failure of a before- or after-hook action."""

    kind = 'hook'


class BodyFailure(UnitFailure):
    """Failure of an example body, including assertion violations."""

    kind = 'body'


class BindResolutionFailure(UnitFailure):
    """Failure to resolve a bind.

    Raised when a producer fails or when no definition exists for
    the requested name.
    """

    kind = 'bind'

    @classmethod
    def undefined(cls, name: str) -> 'Self':
        """Create a failure for a name without any definition.

        Args:
            name: Requested bind name.

        Returns:
            An initialized failure.
        """
        return cls(
            f'Bind {name!r} is not defined',
            origin=f'bind {name!r}',
            context=ErrorContext(bind_name=name),
        )

    @classmethod
    def from_producer(cls, error: Exception, name: str) -> 'Self':
        """Create a failure from an exception raised by a producer.

        Args:
            error: Exception raised by the producer.
            name: Name of the bind being resolved.

        Returns:
            An initialized failure.
        """
        failure = cls.from_error(error, origin=f'bind {name!r}')
        if failure.context is not None:
            failure.context['bind_name'] = name

        return failure
