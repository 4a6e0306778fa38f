# src/plugx_config/core/parser/defaults.py
"""Conjunto padrão de Parsers, na ordem de detecção: JSON, TOML, YAML, env."""

from __future__ import annotations

from typing import List

from .base import Parser
from .env_parser import EnvParser
from .json_parser import JsonParser
from .toml_parser import TomlParser
from .yaml_parser import YamlParser


def default_parsers() -> List[Parser]:
    return [JsonParser(), TomlParser(), YamlParser(), EnvParser()]
