"""
Shared pytest fixtures for schemaform tests.
"""

import pytest
import sys
import os

# Add src and tests to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))
sys.path.insert(0, os.path.dirname(__file__))

from schemaform.api import SchemaFormAPI
from test_examples.schemas import (
    PLAIN_OBJECT,
    FOO_OR_BAR,
    BUZZ_WITH_FOO_OR_BAR,
    USER_ID,
    CREDENTIALS,
    FOO_OR_NOTHING,
    PAYMENT,
    CONTACT,
    IDENTIFIERS,
    SHAPE_WITH_REFS,
    TREE_NODE_SCHEMA,
    LINKED_LIST_SCHEMA,
    MATCH_TEST_CASES,
)


@pytest.fixture
def api():
    """Create SchemaFormAPI instance for testing."""
    return SchemaFormAPI()


@pytest.fixture
def form_schemas():
    """Form schemas with and without oneOf sites."""
    return {
        "plain": PLAIN_OBJECT,
        "foo_or_bar": FOO_OR_BAR,
        "buzz_with_foo_or_bar": BUZZ_WITH_FOO_OR_BAR,
        "user_id": USER_ID,
        "credentials": CREDENTIALS,
        "foo_or_nothing": FOO_OR_NOTHING,
        "payment": PAYMENT,
        "contact": CONTACT,
        "identifiers": IDENTIFIERS,
    }


@pytest.fixture
def ref_schemas():
    """Schemas with $ref examples."""
    return {
        "shape": SHAPE_WITH_REFS,
        "tree_node": TREE_NODE_SCHEMA,
        "linked_list": LINKED_LIST_SCHEMA,
    }


@pytest.fixture
def scalar_alternatives():
    """The number-or-string alternatives used across resolution tests."""
    return [{"type": "number"}, {"type": "string"}]


@pytest.fixture
def object_alternatives():
    """Two object alternatives with disjoint properties."""
    return [
        {"properties": {"foo": {"type": "string"}}},
        {"properties": {"bar": {"type": "string"}}},
    ]


@pytest.fixture
def match_test_cases():
    """(value, candidates, expected index) triples."""
    return MATCH_TEST_CASES
