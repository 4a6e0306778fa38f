# src/plugx_config/core/pipeline/registry.py
"""
Registro ordenado de sources e despacho de Loaders.

Este módulo define o `SourceRegistry`, responsável por manter as sources de
configuração na ordem em que foram registradas (que é também a precedência
de merge) e por resolver qual Loader atende cada uma.

Regras de despacho (`resolve_loader`):
    1. Loader vinculado à source, se houver
    2. Primeiro Loader genérico cujo conjunto de schemes contém o scheme
    3. Caso contrário, `SchemeNotFoundError`

Decisões arquiteturais:
    - Despacho vinculado tem precedência sobre o genérico, permitindo que
      duas sources do mesmo scheme usem instâncias configuradas de forma
      independente
    - Registrar novamente uma source estruturalmente igual não tem efeito
    - Cada instância de Loader é envolvida uma única vez em `ExclusiveLoader`
    - O guarda de um Loader vinculado é descartado quando nenhuma source o usa

Invariantes:
    - A lista de sources reflete exatamente a ordem de registro
    - Uma mesma instância de Loader é sempre alcançada pelo mesmo guarda

Limites explícitos:
    - Não executa `load`
    - Não interpreta a query string das sources
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..exceptions import SchemeNotFoundError
from ..loader.base import Loader
from ..loader.lock import ExclusiveLoader
from ..source import Source


@dataclass
class SourceRegistry:
    _sources: List[Tuple[Source, Optional[Loader]]] = field(default_factory=list, init=False, repr=False)
    _generic: List[Loader] = field(default_factory=list, init=False, repr=False)
    _guards: Dict[int, ExclusiveLoader] = field(default_factory=dict, init=False, repr=False)

    # -----------------------------
    # Sources
    # -----------------------------
    def add(self, source: Source, loader: Optional[Loader] = None) -> bool:
        """Registra `source` (e um Loader vinculado opcional). Retorna False se já existia."""
        source = Source.parse(source)
        if self.has(source):
            return False
        if loader is not None and not isinstance(loader, Loader):
            raise TypeError(f"loader does not implement the Loader protocol: {loader!r}")
        self._sources.append((source, loader))
        return True

    def has(self, source: Source) -> bool:
        source = Source.parse(source)
        return any(existing == source for existing, _ in self._sources)

    def remove(self, source: Source) -> bool:
        return self._pop(Source.parse(source)) is not None

    def take_loader(self, source: Source) -> Optional[Loader]:
        """Remove `source` e devolve o Loader vinculado a ela (se houver)."""
        entry = self._pop(Source.parse(source))
        return None if entry is None else entry[1]

    def _pop(self, source: Source) -> Optional[Tuple[Source, Optional[Loader]]]:
        for index, (existing, _) in enumerate(self._sources):
            if existing == source:
                entry = self._sources.pop(index)
                if entry[1] is not None:
                    self._release(entry[1])
                return entry
        return None

    def sources(self) -> List[Source]:
        return [source for source, _ in self._sources]

    def entries(self) -> List[Tuple[Source, Optional[Loader]]]:
        return list(self._sources)

    def clear(self) -> None:
        bound = [loader for _, loader in self._sources if loader is not None]
        self._sources.clear()
        for loader in bound:
            self._release(loader)

    def __len__(self) -> int:
        return len(self._sources)

    # -----------------------------
    # Loaders
    # -----------------------------
    def add_loader(self, loader: Loader) -> None:
        if not isinstance(loader, Loader):
            raise TypeError(f"loader does not implement the Loader protocol: {loader!r}")
        self._generic.append(loader)

    def loaders(self) -> List[Loader]:
        return list(self._generic)

    def resolve_loader(self, source: Source) -> ExclusiveLoader:
        source = Source.parse(source)
        bound = next((loader for existing, loader in self._sources if existing == source), None)
        if bound is not None:
            return self._guard(bound)

        for loader in self._generic:
            if source.scheme in loader.schemes:
                return self._guard(loader)

        raise SchemeNotFoundError(
            message=f"Could not find a configuration loader for scheme `{source.scheme}` in `{source}`",
            details={"scheme": source.scheme, "source": str(source)},
            hint="Registre um Loader genérico para o scheme ou vincule um Loader à source",
        )

    def _guard(self, loader: Loader) -> ExclusiveLoader:
        if isinstance(loader, ExclusiveLoader):
            return loader
        key = id(loader)
        guard = self._guards.get(key)
        if guard is None or guard.inner is not loader:
            guard = ExclusiveLoader(loader)
            self._guards[key] = guard
        return guard

    def _release(self, loader: Loader) -> None:
        # o guarda só sobrevive enquanto alguma source ou registro genérico usa o Loader
        if any(bound is loader for _, bound in self._sources):
            return
        if any(generic is loader for generic in self._generic):
            return
        self._guards.pop(id(loader), None)
