"""Client for the external expression sandbox used by custom transforms."""
import logging
from typing import Any, Dict, Optional

import requests

from recordmap.exceptions import SandboxEvaluationError

logger = logging.getLogger(__name__)


class SandboxClient:
    """
    Evaluates custom transform expressions on a remote sandbox

    POST {base_url}/evaluate {"expression": ..., "record": ...} -> {"result": ...}
    """

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: int = 5):
        """Initialize client."""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

        if api_key:
            self.session.headers.update({"Authorization": f"Bearer {api_key}"})

    def evaluate(self, expression: str, record: Dict[str, Any]) -> Any:
        """
        Evaluate an expression against a record

        Raises:
            SandboxEvaluationError: On transport errors, non-2xx responses or a missing result
        """
        url = f"{self.base_url}/evaluate"
        try:
            response = self.session.post(
                url,
                json={"expression": expression, "record": record},
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.RequestException as e:
            logger.debug(f"Sandbox request failed: {e}")
            raise SandboxEvaluationError(f"Sandbox request failed: {e}")
        except ValueError as e:
            raise SandboxEvaluationError(f"Sandbox returned invalid JSON: {e}")

        if not isinstance(body, dict) or "result" not in body:
            error = body.get("error") if isinstance(body, dict) else None
            raise SandboxEvaluationError(error or "Sandbox response has no result")

        return body["result"]
