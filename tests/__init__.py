"""Test suite for the pytest-nest package.

This package contains unit and integration tests validating tree
construction, naming, hook composition, bind isolation, unit execution,
pytest collection, and the command-line tool.
"""
