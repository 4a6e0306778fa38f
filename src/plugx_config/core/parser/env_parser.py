# src/plugx_config/core/parser/env_parser.py
"""
Parser de conteúdo estilo env (`KEY=VALUE` por linha), via python-dotenv.

Cada chave é quebrada pelo separador (padrão `__`) e minusculizada,
formando mapas aninhados:

    DB__HOST="localhost"   →   {"db": {"host": "localhost"}}

Decisões arquiteturais:
    - Valores permanecem strings (nenhuma coerção de tipo)
    - Interpolação `${VAR}` desabilitada: o conteúdo é dado, não ambiente
    - Uma chave que é ao mesmo tempo folha e ramo é erro de parse

Limites explícitos:
    - Não lê o ambiente do processo (isso é papel do EnvLoader)
"""

from __future__ import annotations

import io
from typing import Any, Dict, List, Optional

from dotenv import dotenv_values
from dotenv.parser import parse_stream

from .base import BaseParser, Modifier

DEFAULT_SEPARATOR = "__"


class EnvParser(BaseParser):
    name = "Env"
    formats = ("env",)
    decode_errors = (ValueError,)

    def __init__(self, *, separator: str = DEFAULT_SEPARATOR, modifier: Optional[Modifier] = None):
        super().__init__(modifier=modifier)
        if not separator:
            raise ValueError("separator must be a non-empty string")
        self.separator = separator

    def _load(self, data: bytes) -> Any:
        text = data.decode("utf-8")
        for binding in parse_stream(io.StringIO(text)):
            if binding.error:
                raise ValueError(f"invalid line {binding.original.line}: {binding.original.string.strip()!r}")

        result: Dict[str, Any] = {}
        for key, value in dotenv_values(stream=io.StringIO(text), interpolate=False).items():
            if value is None:
                raise ValueError(f"missing value for key {key!r}")
            self._insert(result, key, value)
        return result

    def _insert(self, target: Dict[str, Any], key: str, value: str) -> None:
        parts: List[str] = [part.lower() for part in key.split(self.separator)]
        if any(not part for part in parts):
            raise ValueError(f"invalid key {key!r} for separator {self.separator!r}")

        node = target
        for depth, part in enumerate(parts[:-1]):
            child = node.setdefault(part, {})
            if not isinstance(child, dict):
                prefix = self.separator.join(parts[: depth + 1])
                raise ValueError(f"key {key!r} conflicts with value already set for {prefix!r}")
            node = child

        leaf = parts[-1]
        if isinstance(node.get(leaf), dict):
            raise ValueError(f"key {key!r} conflicts with nested keys under it")
        node[leaf] = value

    def sniff(self, data: bytes) -> Optional[bool]:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            return False
        keyed = 0
        for binding in parse_stream(io.StringIO(text)):
            if binding.error:
                return False
            if binding.key is None:
                continue
            if binding.value is None:
                return False
            keyed += 1
        return keyed > 0
