"""Share keys: the whole app state as a copy/paste friendly base64url string."""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any


class ShareKeyError(ValueError):
    pass


def encode_key(obj: Any) -> str:
    payload = json.dumps({} if obj is None else obj, ensure_ascii=False, separators=(",", ":"))
    encoded = base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def decode_key(key: str | None) -> Any:
    token = str(key or "").strip()
    if not token:
        raise ShareKeyError("empty key")
    padding = -len(token) % 4
    if padding == 3:
        # no valid base64 string leaves a single dangling character
        raise ShareKeyError("invalid key length")
    if "+" in token or "/" in token:
        raise ShareKeyError("key is not valid base64url")
    token += "=" * padding
    try:
        raw = base64.b64decode(token, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ShareKeyError("key is not valid base64url") from exc
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ShareKeyError("key does not contain utf-8 text") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ShareKeyError("key does not contain valid json") from exc
