"""Tests for the command-line interface."""

import json
from textwrap import dedent
from typing import TYPE_CHECKING

import pytest
import yaml
from click.testing import CliRunner

from pytest_nest.__main__ import cli
from pytest_nest.errors import BindShadowWarning

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

TREE_MODULE = """
from pytest_nest import describe

cat = describe('Cat')
cat.add_before_hook(lambda bindings: None)
cat.add_example('purrs', lambda bindings: None)

tail = cat.add_child('with a tail')
tail.add_after_hook(lambda bindings: None)
tail.add_example('wags it', lambda bindings: None)

dog = describe('Dog')
dog.add_example('barks', lambda bindings: None)
"""

DUPLICATE_MODULE = """
from pytest_nest import describe

root = describe()
root.let('value', lambda: 1)
root.let('value', lambda: 2)
root.add_example('example', lambda bindings: None)
"""


@pytest.fixture
def runner() -> CliRunner:
    """Provide a click test runner."""
    return CliRunner()


@pytest.fixture
def make_module(tmp_path: 'Path') -> 'Callable[..., str]':
    """Provide a factory writing Python modules to a temporary directory."""
    def make(source: str, name: str = 'trees.py') -> str:
        path = tmp_path / name
        path.write_text(dedent(source), encoding='utf-8')
        return f'{path}'

    return make


def test_collect_text(runner: CliRunner, make_module: 'Callable[..., str]') -> None:
    """List units of every tree in a module."""
    result = runner.invoke(cli, ['collect', make_module(TREE_MODULE)])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        'cat::1  purrs',
        'cat::2_1  with a tail wags it',
        'dog::1  barks',
    ]


def test_collect_json(runner: CliRunner, make_module: 'Callable[..., str]') -> None:
    """Render unit records as JSON."""
    result = runner.invoke(cli, ['collect', '--format', 'json', make_module(TREE_MODULE)])

    assert result.exit_code == 0, result.output

    records = json.loads(result.output)

    assert records[1] == {
        'tree': 'cat',
        'identifier': '2_1',
        'path': [2, 1],
        'description': 'with a tail wags it',
        'hooks': {'before': 1, 'after': 1},
    }
    assert [record['tree'] for record in records] == ['cat', 'cat', 'dog']


def test_collect_yaml(runner: CliRunner, make_module: 'Callable[..., str]') -> None:
    """Render unit records as YAML."""
    result = runner.invoke(cli, ['collect', '-f', 'yaml', '--reverse', make_module(TREE_MODULE)])

    assert result.exit_code == 0, result.output

    records = yaml.safe_load(result.output)

    assert [record['identifier'] for record in records] == ['2_1', '1', '1']
    assert records[0]['hooks'] == {'before': 1, 'after': 1}


def test_collect_strict_duplicate(runner: CliRunner, make_module: 'Callable[..., str]') -> None:
    """Fail on a bind defined twice in one group."""
    result = runner.invoke(cli, ['collect', make_module(DUPLICATE_MODULE)])

    assert result.exit_code == 1
    assert "Bind 'value' is defined more than once in 'root group'" in result.output


def test_collect_relaxed_duplicate(runner: CliRunner, make_module: 'Callable[..., str]') -> None:
    """Warn on a bind defined twice in one group in relaxed mode."""
    with pytest.warns(BindShadowWarning):
        result = runner.invoke(cli, ['collect', '--relaxed', make_module(DUPLICATE_MODULE)])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ['root::1  example']


@pytest.mark.parametrize('target, message', (
    pytest.param('missing.py', "Can not load 'missing.py'", id='path'),
    pytest.param('missing_trees_module', "Can not import 'missing_trees_module'", id='module'),
))
def test_collect_missing_target(target: str, message: str, runner: CliRunner) -> None:
    """Report targets that can not be imported."""
    result = runner.invoke(cli, ['collect', target])

    assert result.exit_code == 1
    assert message in result.output
