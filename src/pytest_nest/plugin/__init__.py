"""Pytest plugin collecting test-definition trees.

This module integrates `pytest-nest` with pytest by:
- registering custom command-line options;
- configuring shared expansion settings;
- collecting module-level root groups as test collectors.

Any root `ExampleGroup` bound to a module-level name of a collected test
module is expanded into one pytest item per example.
"""

from typing import TYPE_CHECKING

from .suite import SuiteCollector

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.config.argparsing import Parser
    from _pytest.python import PyCollector


def pytest_addoption(parser: 'Parser') -> None:
    """Register pytest command-line options for pytest-nest.

    Args:
        parser: Pytest argument parser.
    """
    group = parser.getgroup('nest', 'nested test-definition trees')
    group.addoption(
        '--nest-relaxed',
        action='store_true',
        dest='nest_relaxed',
        default=False,
        help=(
            'Disable strict tree validation. '
            'Defining the same bind twice in one group emits a warning '
            'instead of failing collection; the last definition wins.'
        ),
    )
    group.addoption(
        '--nest-reverse',
        action='store_true',
        dest='nest_reverse',
        default=False,
        help=(
            'Collect examples of every tree in reverse declaration order. '
            'Identifiers do not change.'
        ),
    )


def pytest_configure(config: 'Config') -> None:
    """Configure pytest-nest integration.

    This hook resolves expansion settings and attaches them to the
    pytest configuration object as `config.nest_settings`.
    Command-line options take precedence over `NEST_*` environment variables.

    Args:
        config: Pytest configuration object.
    """
    from pytest_nest.settings import NestSettings  # noqa: PLC0415

    overrides: dict[str, object] = {}
    if config.getoption('nest_relaxed', default=False):
        overrides['strict'] = False
    if config.getoption('nest_reverse', default=False):
        overrides['order'] = 'reversed'

    config.nest_settings = NestSettings(**overrides)  # type: ignore[attr-defined]


def pytest_pycollect_makeitem(collector: 'PyCollector', name: str,
                              obj: object) -> SuiteCollector | None:
    """Collect module-level test-definition trees.

    Args:
        collector: Module or class collector being populated.
        name: Attribute name.
        obj: Attribute value.

    Returns:
        A `SuiteCollector` for a root group, otherwise ``None``.
    """
    from pytest_nest.core import ExampleGroup  # noqa: PLC0415

    if isinstance(obj, ExampleGroup) and obj.is_root:
        return SuiteCollector.from_parent(
            collector,
            name=name,
            group=obj,
        )

    return None
