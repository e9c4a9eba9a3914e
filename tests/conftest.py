"""Test configuration and fixtures for airtableql."""

import warnings
# Silence Strawberry's LazyType deprecation warnings to keep test output clean
warnings.filterwarnings("ignore", category=DeprecationWarning, message=r"LazyType is deprecated.*")

import pytest

from airtableql.resolvers import create_resolvers_source

# Import fixtures from fixtures module
from tests.fixtures import (
    raw_base,
    base,
    tables,
    client,
    load_generated,
)


@pytest.fixture
def resolver_module(base, tmp_path):
    """The generated resolver module for the sample base, imported from disk."""
    return load_generated(create_resolvers_source(base), tmp_path)


@pytest.fixture
def resolvers(resolver_module, client):
    return resolver_module.create_resolvers(client)
