"""Shared fixtures for the recordmap test suite"""

import pytest

from recordmap.schema.catalog import default_provider
from recordmap.schema.models import EntityField, EntityFieldSchema
from recordmap.schema.provider import InMemorySchemaProvider


@pytest.fixture
def catalog_provider():
    """Schema provider serving the built-in commerce entities"""
    return default_provider()


@pytest.fixture
def contact_schema():
    """Small schema with a required email field"""
    return EntityFieldSchema(
        entity="Contact",
        fields=[
            EntityField("email", "string", required=True, description="Contact email address"),
            EntityField("name", "string", description="Full name of the contact"),
            EntityField("age", "number"),
            EntityField("id", "id", readonly=True),
            EntityField("customFields", "json"),
        ],
    )


@pytest.fixture
def contact_provider(contact_schema):
    """In-memory provider holding only the Contact schema"""
    return InMemorySchemaProvider({"Contact": contact_schema})
