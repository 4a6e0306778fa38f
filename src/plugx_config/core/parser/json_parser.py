# src/plugx_config/core/parser/json_parser.py
"""Parser JSON (stdlib `json`)."""

from __future__ import annotations

import json
from typing import Any

from .base import BaseParser


class JsonParser(BaseParser):
    name = "JSON"
    formats = ("json",)
    decode_errors = (ValueError,)

    def _load(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))
