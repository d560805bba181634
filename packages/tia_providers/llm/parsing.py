import json
import re
from typing import Any, Dict

from packages.tia_core.errors import ExternalCallError

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    First '{' to last '}' of a model reply, parsed as a JSON object.
    Raises ExternalCallError when nothing parseable is found.
    """
    match = _JSON_OBJECT.search(text or "")
    if not match:
        raise ExternalCallError("No JSON object found in model reply")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ExternalCallError("Malformed JSON in model reply", details={"error": str(e)}) from e
    if not isinstance(data, dict):
        raise ExternalCallError("Model reply JSON is not an object")
    return data
