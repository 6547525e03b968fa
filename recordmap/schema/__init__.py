"""Target entity schemas and the providers that serve them."""

from .models import EntityField, EntityFieldSchema, SourceFieldAnalysis
from .provider import HttpSchemaProvider, InMemorySchemaProvider, JsonFileSchemaProvider, SchemaProvider

__all__ = [
    "EntityField",
    "EntityFieldSchema",
    "SourceFieldAnalysis",
    "SchemaProvider",
    "InMemorySchemaProvider",
    "JsonFileSchemaProvider",
    "HttpSchemaProvider",
]
