# src/plugx_config/core/soft_errors.py
"""
Política de erros soft por Loader.

Uma política `SoftErrors` declara quais condições de falha um Loader pode
tratar como "nenhum dado" em vez de abortar, quando o chamador habilita
`skip_soft_errors`.

Codificação na query string:
    - `all`                              → qualquer condição soft do Loader
    - `not-found.permission-denied`      → subconjunto nomeado (separador `.`)

Decisões arquiteturais:
    - Cada Loader declara seu próprio conjunto fechado de variantes
    - Nomes desconhecidos são erro de desserialização (hard)
    - Política fixada na construção é combinada (OR) com a política da query,
      nunca sobrescrita

Limites explícitos:
    - Não decide sozinho se um erro é pulado (o Loader decide, com o flag do chamador)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable

ALL = "all"
SEPARATOR = "."


@dataclass(frozen=True)
class SoftErrors:
    """Política imutável: `all` ou um subconjunto nomeado de variantes."""

    skip_all: bool = False
    names: FrozenSet[str] = frozenset()

    @classmethod
    def all(cls) -> "SoftErrors":
        return cls(skip_all=True)

    @classmethod
    def of(cls, *names: str) -> "SoftErrors":
        return cls(names=frozenset(names))

    @classmethod
    def parse(cls, text: str, allowed: Iterable[str]) -> "SoftErrors":
        """
        Interpreta o valor textual da política.

        Raises:
            ValueError: se algum nome não pertence a `allowed`.
        """
        parts = [part.strip() for part in (text or "").split(SEPARATOR) if part.strip()]
        if ALL in parts:
            return cls.all()
        allowed_set = set(allowed)
        unknown = sorted(set(parts) - allowed_set)
        if unknown:
            raise ValueError(
                f"unknown soft error(s) {unknown}; expected `all` or a `{SEPARATOR}`-joined "
                f"subset of {sorted(allowed_set)}"
            )
        return cls(names=frozenset(parts))

    def contains(self, name: str) -> bool:
        return self.skip_all or name in self.names

    def union(self, other: "SoftErrors") -> "SoftErrors":
        return SoftErrors(
            skip_all=self.skip_all or other.skip_all,
            names=self.names | other.names,
        )

    def __bool__(self) -> bool:
        return self.skip_all or bool(self.names)
