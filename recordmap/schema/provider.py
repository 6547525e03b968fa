"""
Schema Providers - Resolve an entity type name to its field schema

Providers:
- InMemorySchemaProvider: schemas held in a dict (case-insensitive lookup)
- JsonFileSchemaProvider: {"entities": {"Product": {"fields": [...]}}} document
- HttpSchemaProvider: GET {base_url}/entities/{name}/schema with a 1 hour TTL cache

An unknown entity is reported as None, never raised.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

import requests

from recordmap.schema.models import EntityFieldSchema

logger = logging.getLogger(__name__)


class SchemaProvider(Protocol):
    """Lookup of target entity field schemas"""

    def get_field_schema(self, entity_type: str) -> Optional[EntityFieldSchema]:
        ...

    def list_entities(self) -> List[str]:
        ...


class InMemorySchemaProvider:
    """Serves schemas from a dictionary keyed by entity name"""

    def __init__(self, schemas: Optional[Dict[str, EntityFieldSchema]] = None):
        self._schemas: Dict[str, EntityFieldSchema] = {}
        for name, schema in (schemas or {}).items():
            self.register(name, schema)

    def register(self, entity_type: str, schema: EntityFieldSchema) -> None:
        self._schemas[entity_type.lower()] = schema

    def get_field_schema(self, entity_type: str) -> Optional[EntityFieldSchema]:
        return self._schemas.get(entity_type.lower())

    def list_entities(self) -> List[str]:
        return [schema.entity for schema in self._schemas.values()]


class JsonFileSchemaProvider(InMemorySchemaProvider):
    """Loads entity schemas from a JSON file"""

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)

        with open(self.path, "r", encoding="utf-8") as f:
            document = json.load(f)

        for name, definition in document.get("entities", {}).items():
            self.register(name, EntityFieldSchema.from_dict(name, definition))

        logger.info(f"Loaded {len(self._schemas)} entity schemas from {self.path}")


class HttpSchemaProvider:
    """
    Fetches entity schemas from a schema API

    Usage:
    ```python
    provider = HttpSchemaProvider("https://schemas.example.com", api_key="...")
    schema = provider.get_field_schema("Product")
    ```
    """

    # Cache TTL in seconds (1 hour)
    CACHE_TTL = 3600

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: int = 30,
        cache_ttl: int = CACHE_TTL,
    ):
        """
        Initialize HttpSchemaProvider

        Args:
            base_url: Base URL of the schema API
            api_key: Bearer token (optional)
            timeout: HTTP request timeout in seconds
            cache_ttl: Seconds a fetched schema stays valid
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cache_ttl = cache_ttl

        self.session = requests.Session()
        if api_key:
            self.session.headers.update({"Authorization": f"Bearer {api_key}"})

        # entity (lowercase) -> (fetched at, schema or None)
        self._cache: Dict[str, Tuple[float, Optional[EntityFieldSchema]]] = {}

    def get_field_schema(self, entity_type: str, force_refresh: bool = False) -> Optional[EntityFieldSchema]:
        """
        Get schema for an entity, using cache if available

        Returns:
            EntityFieldSchema or None if the entity is unknown or the API fails
        """
        key = entity_type.lower()
        cached = self._cache.get(key)
        if not force_refresh and cached is not None and time.time() - cached[0] < self.cache_ttl:
            logger.debug(f"Using cached schema for {entity_type}")
            return cached[1]

        schema = self._fetch_schema(entity_type)
        if schema is not None:
            self._cache[key] = (time.time(), schema)
        return schema

    def _fetch_schema(self, entity_type: str) -> Optional[EntityFieldSchema]:
        url = f"{self.base_url}/entities/{entity_type}/schema"
        try:
            response = self.session.get(url, timeout=self.timeout)
            if response.status_code == 404:
                logger.info(f"Unknown entity: {entity_type}")
                return None
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Failed to fetch schema for {entity_type}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Invalid JSON schema for {entity_type}: {e}")
            return None

        if not isinstance(data, dict) or not isinstance(data.get("fields"), list):
            logger.warning(f"Schema response for {entity_type} has no field list")
            return None

        schema = EntityFieldSchema.from_dict(entity_type, data)
        logger.info(f"Fetched schema for {entity_type} ({len(schema.fields)} fields)")
        return schema

    def list_entities(self) -> List[str]:
        """List entities exposed by the API (GET {base_url}/entities)"""
        try:
            response = self.session.get(f"{self.base_url}/entities", timeout=self.timeout)
            response.raise_for_status()
            data: Any = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"Failed to list entities: {e}")
            return []

        if isinstance(data, dict):
            data = data.get("entities", [])
        return [str(name) for name in data]

    def clear_cache(self) -> None:
        self._cache.clear()
