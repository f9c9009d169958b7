import json
import logging
from typing import Any, Dict, Union

from pydantic import ValidationError

from ..core.errors import InvalidBody, InvalidInput
from ..schemas.fortune import FortuneRequest

logger = logging.getLogger(__name__)


def parse_body(raw_body: Union[bytes, str, None]) -> Dict[str, Any]:
    """Decode the request body as a JSON object. An empty body counts as ``{}``."""
    if raw_body is None:
        return {}
    if isinstance(raw_body, bytes):
        try:
            raw_body = raw_body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidBody(f"Body is not valid UTF-8: {e}")
    if not raw_body.strip():
        return {}
    try:
        payload = json.loads(raw_body)
    except json.JSONDecodeError as e:
        raise InvalidBody(f"Failed to parse JSON body: {e}")
    if not isinstance(payload, dict):
        raise InvalidBody(f"JSON body must be an object, got {type(payload).__name__}")
    return payload


def validate_request(payload: Dict[str, Any]) -> FortuneRequest:
    try:
        return FortuneRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidInput(f"Request validation failed: {e.errors(include_url=False)}")
