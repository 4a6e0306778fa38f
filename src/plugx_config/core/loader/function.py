# src/plugx_config/core/loader/function.py
"""
Adaptador de callables para o protocolo `Loader`.

    def load_from_vault(source, whitelist, skip_soft_errors):
        ...
        return [("foo", ConfigurationEntity(...))]

    FunctionLoader("Vault", load_from_vault, schemes=["vault"])

Erros levantados pelo callable propagam sem alteração; para se declarar soft,
o callable levanta um `LoadError` com `skippable=True`.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Tuple

from ..entity import ConfigurationEntity
from ..source import Source
from .base import LoadResult, Whitelist

LoadFn = Callable[[Source, Whitelist, bool], List[Tuple[str, ConfigurationEntity]]]


class FunctionLoader:
    def __init__(self, name: str, fn: LoadFn, schemes: Iterable[str] = ()):
        if not name:
            raise ValueError("FunctionLoader requires a non-empty name")
        self.name = name
        self.schemes = tuple(s.lower() for s in schemes)
        self._fn = fn

    def load(
        self,
        source: Source,
        whitelist: Whitelist = None,
        skip_soft_errors: bool = False,
        ctx: Any = None,
    ) -> LoadResult:
        return list(self._fn(source, whitelist, skip_soft_errors))

    def __repr__(self) -> str:
        return f"FunctionLoader(name={self.name!r}, schemes={list(self.schemes)})"
