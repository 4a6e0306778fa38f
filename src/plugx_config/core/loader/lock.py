# src/plugx_config/core/loader/lock.py
"""
Guarda de acesso exclusivo a uma instância de Loader.

Quando a mesma instância de Loader atende várias sources, apenas uma chamada
`load` pode estar em andamento por vez. O contrato é **não bloqueante**: quem
encontra a instância ocupada falha imediatamente com `LockAcquisitionError`
(sempre hard), em vez de esperar.

Invariantes:
    - O lock é sempre liberado ao final de `load`, com ou sem erro
    - Erros do Loader envolvido propagam sem alteração
"""

from __future__ import annotations

import threading
from typing import Any, Sequence

from ..exceptions import LockAcquisitionError
from ..source import Source
from .base import Loader, LoadResult, Whitelist


class ExclusiveLoader:
    def __init__(self, inner: Loader):
        self.inner = inner
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self.inner.name

    @property
    def schemes(self) -> Sequence[str]:
        return self.inner.schemes

    def locked(self) -> bool:
        return self._lock.locked()

    def load(
        self,
        source: Source,
        whitelist: Whitelist = None,
        skip_soft_errors: bool = False,
        ctx: Any = None,
    ) -> LoadResult:
        if not self._lock.acquire(blocking=False):
            raise LockAcquisitionError(
                message=f"{self.name} configuration loader is already in use; could not acquire it for `{source}`",
                details={"loader": self.name, "source": str(source)},
                hint="Não compartilhe a mesma instância de Loader entre resoluções concorrentes",
            )
        try:
            return self.inner.load(source, whitelist, skip_soft_errors, ctx=ctx)
        finally:
            self._lock.release()

    def __repr__(self) -> str:
        return f"ExclusiveLoader({self.inner!r})"
