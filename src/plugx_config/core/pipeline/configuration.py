# src/plugx_config/core/pipeline/configuration.py
"""
Orquestrador canônico da resolução de configuração.

Este módulo define a `Configuration`, ponto de entrada do plugx-config:
registra sources, Loaders e Parsers, mantém a whitelist e executa os
estágios Load → Parse → Merge → Validate estritamente em sequência.

Responsabilidades do módulo:
    - Manter o estado de resolução por plugin (entidades em ordem de source)
    - Manter a configuração mesclada (recalculada por inteiro a cada Merge)
    - Aplicar a política de memória (`forget_loaded` / `forget_parsed`)
    - Registrar eventos estruturados no `ResolutionContext`

Decisões arquiteturais:
    - Fail-fast: o primeiro erro hard de qualquer estágio é propagado
    - `skip_soft_errors` é argumento por chamada, com default da instância
    - Loaders genéricos padrão: ambiente (`env`) e filesystem (`fs`, `file`)
    - Parsers padrão, em ordem de detecção: JSON, TOML, YAML, env

Contexto de resolução:
    - `ctx` registra apenas a resolução corrente: cada `load()` descarta os
      eventos e warnings anteriores (inclusive os de registro de sources)

Política de memória (irreversível sem novo Load):
    - `forget_loaded`: após o Parse, o conteúdo cru das entidades é descartado
    - `forget_parsed`: após o Merge, o valor interpretado das entidades é
      descartado; um novo `merge()` sem `load()` produz mapas vazios

Limites explícitos:
    - Não define linguagem de schema
    - Não recarrega sources automaticamente
    - Não suporta mutação concorrente durante uma resolução
"""

from __future__ import annotations

import os
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from ..entity import ConfigurationEntity
from ..exceptions import ConfigurationError
from ..loader.base import Loader
from ..loader.env import EnvLoader
from ..loader.fs import FsLoader
from ..parser.base import Parser
from ..parser.defaults import default_parsers
from ..source import Source
from .context import ResolutionContext
from . import stages
from .registry import SourceRegistry
from .types import Stage

_WHITELIST_SPLIT = re.compile(r"[ ,;]+")


class Configuration:
    """
    Resolução de configuração de plugins a partir de sources registradas.

    Uso típico:

        configuration = Configuration()
        configuration.add_source("env://?prefix=APP")
        configuration.add_source("fs:///etc/app?soft-errors=not-found")
        merged = configuration.load_parse_merge(skip_soft_errors=True)
    """

    def __init__(
        self,
        *,
        skip_soft_errors: bool = False,
        forget_loaded: bool = False,
        forget_parsed: bool = False,
        default_loaders: bool = True,
        parsers: Optional[Iterable[Parser]] = None,
        ctx: Optional[ResolutionContext] = None,
    ):
        self.skip_soft_errors = skip_soft_errors
        self.forget_loaded = forget_loaded
        self.forget_parsed = forget_parsed
        self.ctx = ctx or ResolutionContext()

        self.registry = SourceRegistry()
        if default_loaders:
            self.registry.add_loader(EnvLoader())
            self.registry.add_loader(FsLoader())
        self.parsers: List[Parser] = list(default_parsers() if parsers is None else parsers)

        self.whitelist: Optional[Set[str]] = None
        self.state: Dict[str, List[ConfigurationEntity]] = {}
        self._merged: Dict[str, Any] = {}

    # -----------------------------
    # Sources, Loaders & Parsers
    # -----------------------------
    def add_source(self, source, loader: Optional[Loader] = None) -> bool:
        """
        Registra uma source (texto ou `Source`), opcionalmente com Loader vinculado.

        Sem Loader vinculado, o scheme precisa ser atendido por um Loader
        genérico já registrado.

        Returns:
            False quando uma source estruturalmente igual já estava registrada.

        Raises:
            SchemeNotFoundError: se nenhum Loader atende ao scheme.
        """
        source = Source.parse(source)
        if loader is None and not self.registry.has(source):
            # despacho validado no registro, não apenas no load
            self.registry.resolve_loader(source)
        added = self.registry.add(source, loader)
        self.ctx.log(
            stage=Stage.LOAD,
            level="debug",
            message="source registered" if added else "source already registered",
            source=str(source),
            bound_loader=None if loader is None else loader.name,
        )
        return added

    def has_source(self, source) -> bool:
        return self.registry.has(source)

    def remove_source(self, source) -> bool:
        return self.registry.remove(source)

    def take_loader(self, source) -> Optional[Loader]:
        return self.registry.take_loader(source)

    def sources(self) -> List[Source]:
        return self.registry.sources()

    def add_loader(self, loader: Loader) -> None:
        self.registry.add_loader(loader)

    def add_parser(self, parser: Parser) -> None:
        if not isinstance(parser, Parser):
            raise TypeError(f"parser does not implement the Parser protocol: {parser!r}")
        self.parsers.append(parser)

    # -----------------------------
    # Whitelist
    # -----------------------------
    def set_whitelist(self, plugins: Optional[Iterable[str]]) -> None:
        self.whitelist = None if plugins is None else {name.strip().lower() for name in plugins if name.strip()}

    def add_to_whitelist(self, plugin_name: str) -> None:
        if self.whitelist is None:
            self.whitelist = set()
        self.whitelist.add(plugin_name.strip().lower())

    def load_whitelist_from_env(self, key: str) -> None:
        """
        Lê a whitelist de uma variável de ambiente (separadores: espaço, `,`, `;`).

        Raises:
            ConfigurationError: se a variável não estiver definida.
        """
        value = os.environ.get(key)
        if value is None:
            raise ConfigurationError(
                message=f"Whitelist environment variable `{key}` is not set",
                details={"key": key},
                hint="Defina a variável ou use set_whitelist()",
            )
        plugins = [name for name in _WHITELIST_SPLIT.split(value.strip().lower()) if name]
        if not plugins:
            self.ctx.add_warning(
                stage=Stage.LOAD,
                message=f"whitelist environment variable `{key}` is set to empty",
                key=key,
            )
        self.set_whitelist(plugins)

    # -----------------------------
    # Stages
    # -----------------------------
    def _skip(self, skip_soft_errors: Optional[bool]) -> bool:
        return self.skip_soft_errors if skip_soft_errors is None else skip_soft_errors

    def load(self, skip_soft_errors: Optional[bool] = None) -> Dict[str, List[ConfigurationEntity]]:
        """
        Inicia uma nova resolução executando o estágio Load.

        Eventos e warnings de resoluções anteriores são descartados do
        contexto, que cobre sempre uma única resolução.
        """
        skip = self._skip(skip_soft_errors)
        self.ctx.clear()
        self.ctx.log(stage=Stage.LOAD, level="info", message="stage started", skip_soft_errors=skip)
        try:
            self.state = stages.load_stage(
                self.registry,
                whitelist=self.whitelist,
                skip_soft_errors=skip,
                ctx=self.ctx,
            )
        except ConfigurationError as exc:
            self._log_failure(Stage.LOAD, exc)
            raise
        return self.state

    def parse(self) -> Dict[str, List[ConfigurationEntity]]:
        self.ctx.log(stage=Stage.PARSE, level="info", message="stage started")
        try:
            stages.parse_stage(self.state, self.parsers, ctx=self.ctx)
        except ConfigurationError as exc:
            self._log_failure(Stage.PARSE, exc)
            raise
        if self.forget_loaded:
            for entity in self._entities():
                entity.forget_contents()
        return self.state

    def merge(self) -> Dict[str, Any]:
        self.ctx.log(stage=Stage.MERGE, level="info", message="stage started")
        self._merged = stages.merge_stage(self.state, ctx=self.ctx)
        if self.forget_parsed:
            for entity in self._entities():
                entity.forget_parsed()
        return self._merged

    def validate(self, schemas: Mapping[str, Any]) -> Dict[str, Any]:
        self.ctx.log(stage=Stage.VALIDATE, level="info", message="stage started")
        try:
            return stages.validate_stage(self._merged, schemas, ctx=self.ctx)
        except ConfigurationError as exc:
            self._log_failure(Stage.VALIDATE, exc)
            raise

    def load_parse_merge(self, skip_soft_errors: Optional[bool] = None) -> Dict[str, Any]:
        self.load(skip_soft_errors)
        self.parse()
        return self.merge()

    def load_parse_merge_validate(
        self,
        schemas: Mapping[str, Any],
        skip_soft_errors: Optional[bool] = None,
    ) -> Dict[str, Any]:
        self.load_parse_merge(skip_soft_errors)
        return self.validate(schemas)

    # -----------------------------
    # Results
    # -----------------------------
    @property
    def configuration(self) -> Dict[str, Any]:
        return self._merged

    def get(self, plugin_name: str, default: Any = None) -> Any:
        return self._merged.get(plugin_name.lower(), default)

    def _entities(self):
        for entities in self.state.values():
            yield from entities

    def _log_failure(self, stage: Stage, exc: ConfigurationError) -> None:
        self.ctx.log(stage=stage, level="error", message=str(exc), error=exc.to_payload().to_dict())
