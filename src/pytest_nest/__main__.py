"""CLI utilities for inspecting test-definition trees.

The `collect` command imports a Python module, expands every module-level
root group, and prints the resulting units without running them.
"""

from importlib import import_module
from importlib.util import module_from_spec, spec_from_file_location
from json import dumps
from pathlib import Path
from typing import TYPE_CHECKING, Any

from click import Choice, ClickException, argument, echo, group, option
from yaml import dump

from pytest_nest.core import ExampleGroup, Expander
from pytest_nest.errors import NestError
from pytest_nest.settings import NestSettings

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import ModuleType

    from pytest_nest.core import ExecutableUnit


def load_module(target: str) -> 'ModuleType':
    """Import a module from a file path or a dotted name.

    Args:
        target: Path to a `.py` file or an importable module name.

    Returns:
        The imported module.

    Raises:
        ClickException: If the module can not be imported.
    """
    if target.endswith('.py'):
        path = Path(target)
        spec = spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise ClickException(f'Can not load {target!r}')

        module = module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except FileNotFoundError as base:
            raise ClickException(f'Can not load {target!r}') from base

        return module

    try:
        return import_module(target)
    except ImportError as base:
        raise ClickException(f'Can not import {target!r}') from base


def find_trees(module: 'ModuleType') -> dict[str, ExampleGroup]:
    """Find module-level root groups.

    Args:
        module: Imported module.

    Returns:
        Root groups by attribute name, in module definition order.
    """
    return {
        name: value
        for name, value in vars(module).items()
        if isinstance(value, ExampleGroup) and value.is_root
    }


def describe_unit(tree: str, unit: 'ExecutableUnit') -> dict[str, Any]:
    """Build a serializable record of a unit.

    Args:
        tree: Attribute name of the root group.
        unit: Executable unit.

    Returns:
        A mapping with identity, description, and hook counts.
    """
    return {
        'tree': tree,
        'identifier': unit.identifier,
        'path': list(unit.path),
        'description': unit.description,
        'hooks': {
            'before': len(unit.before_sequence),
            'after': len(unit.after_sequence),
        },
    }


def render(records: 'Iterable[dict[str, Any]]', output: str) -> str:
    """Render unit records.

    Args:
        records: Unit records.
        output: Output format name.

    Returns:
        Rendered text.
    """
    records = list(records)

    if output == 'json':
        return dumps(records, ensure_ascii=False, indent=4)

    if output == 'yaml':
        return dump(records, sort_keys=False, allow_unicode=True).rstrip()

    return '\n'.join(
        f'{record["tree"]}::{record["identifier"]}  {record["description"]}'
        for record in records
    )


@group(help='Command-line utilities for pytest-nest trees.')
def cli() -> None:
    """Root CLI group for pytest-nest tools."""
    return None


@cli.command(
    name='collect',
    help='Print the units expanded from every tree of a module.',
)
@option(
    '-f', '--format', 'output',
    type=Choice(['text', 'json', 'yaml']),
    default='text',
    help='Output format.',
)
@option(
    '--relaxed',
    is_flag=True,
    default=False,
    help='Warn instead of failing on a bind defined twice in one group.',
)
@option(
    '--reverse',
    is_flag=True,
    default=False,
    help='List units in reverse declaration order.',
)
@argument('target')
def collect(target: str, output: str, relaxed: bool, reverse: bool) -> None:
    """Expand trees of a module and print their units.

    Args:
        target: Path to a `.py` file or an importable module name.
        output: Output format name.
        relaxed: Disable strict validation.
        reverse: Reverse unit order.
    """
    overrides: dict[str, Any] = {}
    if relaxed:
        overrides['strict'] = False
    if reverse:
        overrides['order'] = 'reversed'

    expander = Expander(NestSettings(**overrides))

    records = []
    for name, tree in find_trees(load_module(target)).items():
        try:
            units = expander.expand(tree)
        except NestError as base:
            raise ClickException(f'{base}') from base

        records.extend(describe_unit(name, unit) for unit in units)

    echo(render(records, output))


if __name__ == '__main__':
    cli()
