# src/plugx_config/core/loader/env.py
"""
Loader de variáveis de ambiente (scheme `env`).

Exemplo de source:

    env://?prefix=APP&separator=__

Com `APP__FOO__A=1` e `APP__FOO__DB__HOST=x`, produz para o plugin `foo`
uma entidade `format="env"` com o conteúdo:

    A="1"
    DB__HOST="x"

Regras:
    - Variáveis são percorridas em ordem alfabética (resultado determinístico)
    - Remove o prefixo e, se presente, um separador inicial
    - Divide uma única vez pelo separador: nome do plugin (minúsculo) + chave
    - Plugin ou chave vazios são ignorados
    - Plugins fora da whitelist são ignorados antes de montar conteúdo

Opções da query:
    - prefix (alias `key_prefix`): padrão vazio
    - separator (alias `key_separator`): padrão `__`
    - soft-errors: apenas `all` (não há variantes nomeadas)
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Mapping, Optional

from ..entity import ConfigurationEntity
from ..parser.env_parser import DEFAULT_SEPARATOR
from ..pipeline.types import Stage
from ..soft_errors import SoftErrors
from ..source import Source
from .base import BaseLoader, LoadResult, Whitelist, allowed, invalid_source

NAME = "Environment-Variables"


class EnvLoader(BaseLoader):
    name = NAME
    schemes = ("env",)
    soft_error_names = ()

    def __init__(
        self,
        *,
        prefix: str = "",
        separator: str = DEFAULT_SEPARATOR,
        soft_errors: Optional[SoftErrors] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(soft_errors=soft_errors)
        self.prefix = prefix
        self.separator = separator
        self._environ = environ

    def _option(self, options: Dict[str, str], *keys: str) -> Optional[str]:
        for key in keys:
            if key in options:
                return options[key]
        return None

    def _load(self, source: Source, whitelist: Whitelist, skip_soft_errors: bool, ctx: Any) -> LoadResult:
        options = self.options(source)
        prefix = self._option(options, "prefix", "key_prefix")
        prefix = self.prefix if prefix is None else prefix
        separator = self._option(options, "separator", "key_separator")
        separator = self.separator if separator is None else separator
        if not separator:
            raise invalid_source(self.name, source, "option `separator` must not be empty")
        # valida a política mesmo sem variantes nomeadas
        self.soft_errors_for(source)

        environ = os.environ if self._environ is None else self._environ
        lines: Dict[str, List[str]] = {}
        for name in sorted(environ):
            if not name.startswith(prefix):
                continue
            rest = name[len(prefix):]
            if rest.startswith(separator):
                rest = rest[len(separator):]
            plugin, sep, key = rest.partition(separator)
            if not sep or not plugin or not key:
                continue
            plugin = plugin.lower()
            if not allowed(plugin, whitelist):
                continue
            key = DEFAULT_SEPARATOR.join(key.split(separator))
            value = json.dumps(environ[name], ensure_ascii=False)
            lines.setdefault(plugin, []).append(f"{key}={value}")

        result: LoadResult = []
        for plugin in sorted(lines):
            entity = ConfigurationEntity(
                source=source,
                plugin_name=plugin,
                loader_name=self.name,
                format="env",
                contents="\n".join(sorted(lines[plugin])),
            )
            result.append((plugin, entity))

        if ctx is not None:
            ctx.log(
                stage=Stage.LOAD,
                level="debug",
                message="environment variables scanned",
                loader=self.name,
                source=str(source),
                plugins=[plugin for plugin, _ in result],
            )
        return result
