# src/plugx_config/core/parser/toml_parser.py
"""Parser TOML (stdlib `tomllib`, Python >= 3.11)."""

from __future__ import annotations

import tomllib
from typing import Any

from .base import BaseParser


class TomlParser(BaseParser):
    name = "TOML"
    formats = ("toml",)
    decode_errors = (tomllib.TOMLDecodeError, ValueError)

    def _load(self, data: bytes) -> Any:
        return tomllib.loads(data.decode("utf-8"))

    def sniff(self, data: bytes):
        # texto vazio é TOML válido; não é evidência de formato
        if not data.strip():
            return False
        return super().sniff(data)
