"""Postal code validators.

The two services check different things: the input service only
requires a string of at least 8 characters, the temperature service requires
exactly 8 ASCII digits.
"""

import json
import re
from typing import Any, Optional

from pydantic import ValidationError

from app.errors import InvalidZipcodeError
from app.types import LookupRequest

_ZIPCODE_RE = re.compile(r"[0-9]{8}")


def parse_lookup_request(raw: Any) -> LookupRequest:
    """Input service: decode the JSON body into a frozen ``LookupRequest``."""
    try:
        data = json.loads(raw) if isinstance(raw, (bytes, str)) else raw
        return LookupRequest.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise InvalidZipcodeError(str(e)) from e


def validate_zipcode(cep: Optional[str]) -> str:
    """Temperature service: exactly 8 ASCII digits, nothing else."""
    if cep is None or not _ZIPCODE_RE.fullmatch(cep):
        raise InvalidZipcodeError(f"rejected zipcode {cep!r}")
    return cep
