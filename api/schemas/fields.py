import json
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator


def coerce_text(value: Any) -> Optional[str]:
    """Keep strings as they are, render other JSON values as their JSON text"""
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


# Free-form text column: accepts any JSON value, stored as text
LooseText = Annotated[Optional[str], BeforeValidator(coerce_text)]
