# src/plugx_config/core/parser/function.py
"""
Adaptador de callables para o protocolo `Parser`.

Permite registrar um formato novo sem escrever uma classe:

    FunctionParser(["ini"], parse_ini, sniff=looks_like_ini)

Sem `sniff`, o Parser responde `None` ("não sei dizer") e só é escolhido
por formato declarado.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from .base import BaseParser, Modifier

ParseFn = Callable[[bytes], Any]
SniffFn = Callable[[bytes], Optional[bool]]


class FunctionParser(BaseParser):
    def __init__(
        self,
        formats: Iterable[str],
        fn: ParseFn,
        *,
        sniff: Optional[SniffFn] = None,
        name: str = "Function",
        modifier: Optional[Modifier] = None,
    ):
        super().__init__(modifier=modifier)
        self.formats = tuple(f.lower() for f in formats)
        if not self.formats:
            raise ValueError("FunctionParser requires at least one format")
        self.name = name
        self._fn = fn
        self._sniff = sniff
        # qualquer exceção do callable é falha de conteúdo
        self.decode_errors = (Exception,)

    def _load(self, data: bytes) -> Any:
        return self._fn(data)

    def sniff(self, data: bytes) -> Optional[bool]:
        if self._sniff is None:
            return None
        return self._sniff(data)
