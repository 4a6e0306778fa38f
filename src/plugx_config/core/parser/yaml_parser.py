# src/plugx_config/core/parser/yaml_parser.py
"""
Parser YAML (PyYAML `safe_load`).

Um documento vazio é interpretado como mapa vazio. Escalares soltos
(ex.: `hello`) também são YAML válido, mas não são raiz aceitável: `sniff`
só reconhece documentos cuja raiz é um mapa.
"""

from __future__ import annotations

from typing import Any

import yaml

from .base import BaseParser


class YamlParser(BaseParser):
    name = "YAML"
    formats = ("yaml", "yml")
    decode_errors = (yaml.YAMLError, ValueError)

    def _load(self, data: bytes) -> Any:
        return yaml.safe_load(data.decode("utf-8"))

    def sniff(self, data: bytes):
        if not data.strip():
            return False
        return super().sniff(data)
