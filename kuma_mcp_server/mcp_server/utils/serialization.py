"""
JSON Serialization Utilities

Pretty-printed JSON for tool responses, with handling for datetime objects,
Enums and Pydantic models.
"""

import json
from datetime import datetime, date
from enum import Enum
from typing import Any


class MCPJSONEncoder(json.JSONEncoder):
    """Custom JSON encoder that handles datetime, Enum and Pydantic objects."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        elif isinstance(obj, Enum):
            return obj.value
        elif hasattr(obj, "model_dump"):
            return obj.model_dump(mode="json")
        return super().default(obj)


def safe_json_dumps(obj: Any, indent: int = 2) -> str:
    """
    Serialize an object to indented JSON, never raising.

    Args:
        obj: Object to serialize to JSON
        indent: Indentation width (tool responses use 2)

    Returns:
        JSON string representation of the object

    Example:
        >>> safe_json_dumps({"id": 1, "name": "Site"})
        '{\\n  "id": 1,\\n  "name": "Site"\\n}'
    """
    try:
        return json.dumps(obj, cls=MCPJSONEncoder, ensure_ascii=False, indent=indent)
    except Exception as e:
        # Fallback: convert to string representation
        return json.dumps(
            {"error": f"Serialization failed: {str(e)}", "data": str(obj)}, indent=indent
        )
