"""Decoding of the service-account key kept in the environment."""
from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict


def load_service_account_info(encoded: str) -> Dict[str, Any]:
    """Decode the base64 service-account key into its JSON dictionary.

    Raises ValueError when the value is not base64 or not a JSON object.
    """
    try:
        raw = base64.b64decode(encoded.strip(), validate=True)
        info = json.loads(raw)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("SERVICE_ACCOUNT_CREDENTIALS is not base64-encoded JSON") from exc
    if not isinstance(info, dict):
        raise ValueError("SERVICE_ACCOUNT_CREDENTIALS must decode to a JSON object")
    return info
