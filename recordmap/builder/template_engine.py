"""
Template Engine - Evaluates ${...} placeholders against a source record

Supports:
- Record paths (${customer.name}, ${items[0].sku})
- The value being transformed (${value})
"""

import logging
import re
from typing import Any, Dict, Optional

from recordmap.builder.path_accessor import MISSING, get_value
from recordmap.transformer.conversion import stringify

logger = logging.getLogger(__name__)


class TemplateEngine:
    """Simple template engine for mapping transforms"""

    # Pattern for variable substitution: ${path}
    VARIABLE_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        """
        Initialize TemplateEngine

        Args:
            context: Record whose fields are available for substitution
        """
        self.context = context or {}

    def evaluate(self, template: str, value: Any = MISSING) -> Any:
        """
        Evaluate a template string

        Args:
            template: Template string (e.g., "${first_name} ${last_name}")
            value: Current value, available as ${value}

        Returns:
            Rendered string (non-string templates are returned unchanged)
        """
        if not isinstance(template, str):
            return template

        def replace_var(match):
            path = match.group(1).strip()
            if path == "value":
                resolved = value
            else:
                resolved = get_value(self.context, path)

            if resolved is MISSING or resolved is None:
                logger.debug(f"Template variable not found in record: {path}")
                return ""

            return stringify(resolved)

        return self.VARIABLE_PATTERN.sub(replace_var, template)
