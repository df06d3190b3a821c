import pytest

from html_attribute_schema.config import ValidatorConfig
from html_attribute_schema.linter.validator import Validator
from html_attribute_schema.models.schema_loader import load_schema_table


@pytest.fixture(scope="session")
def table():
    """The packaged HTML schema table, built once for the whole session."""
    return load_schema_table()


@pytest.fixture
def validator(table):
    return Validator(table)


@pytest.fixture
def make_validator(table):
    """Build a validator over the packaged table with config overrides."""
    def _make(**overrides):
        return Validator(table, config=ValidatorConfig(**overrides))
    return _make
