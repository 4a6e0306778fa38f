# src/plugx_config/core/position.py
"""
Posição diagnóstica dentro de um valor de configuração.

`Position` é um valor leve e imutável usado apenas para compor caminhos em
mensagens de diagnóstico (merge e validação). Não participa de nenhum
resultado e nunca é persistido.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

Key = Union[str, int]


@dataclass(frozen=True)
class Position:
    keys: Tuple[Key, ...] = ()

    def with_key(self, key: str) -> "Position":
        return Position(self.keys + (str(key),))

    def with_index(self, index: int) -> "Position":
        return Position(self.keys + (int(index),))

    def extend(self, path) -> "Position":
        position = self
        for item in path:
            position = position.with_index(item) if isinstance(item, int) else position.with_key(item)
        return position

    def __str__(self) -> str:
        if not self.keys:
            return "<root>"
        rendered = ""
        for key in self.keys:
            if isinstance(key, int):
                rendered += f"[{key}]"
            else:
                rendered += f".{key}" if rendered else key
        return rendered
