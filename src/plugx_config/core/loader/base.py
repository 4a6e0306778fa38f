# src/plugx_config/core/loader/base.py
"""
Contrato canônico de Loader e utilitários de opções.

Um Loader recebe uma `Source` (e, opcionalmente, uma whitelist) e produz
zero ou mais `ConfigurationEntity`. Nenhum parse acontece aqui.

Responsabilidades do módulo:
    - Definir o protocolo `Loader` (duck typing, `@runtime_checkable`)
    - Interpretar opções comuns da query string (bool, política soft)
    - Centralizar a decisão "pular ou levantar" de erros soft

Decisões arquiteturais:
    - A decisão soft/hard vive dentro do Loader, com a política da source
      combinada (OR) à política fixada na construção
    - Opções escalares: a query sobrescreve o padrão da construção
    - Chaves de query desconhecidas são ignoradas; valores malformados são
      `InvalidSourceError` (hard)

Invariantes:
    - Um erro pulado sempre gera um evento `info` com `skip_error=True`
    - Um erro não pulado carrega `skippable` coerente com a política

Limites explícitos:
    - Não despacha Loaders por scheme (isso é papel do registry)
    - Não interpreta conteúdo
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional, Protocol, Sequence, Set, Tuple, runtime_checkable

from ..entity import ConfigurationEntity
from ..exceptions import InvalidSourceError, LoadError
from ..pipeline.types import Stage
from ..soft_errors import SoftErrors
from ..source import Source

LoadResult = List[Tuple[str, ConfigurationEntity]]
Whitelist = Optional[Set[str]]

SOFT_ERRORS_OPTION = "soft-errors"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@runtime_checkable
class Loader(Protocol):
    """
    Contrato mínimo de um Loader.

    Atributos obrigatórios:
        - name: nome legível (vai para `ConfigurationEntity.loader_name`)
        - schemes: schemes atendidos no despacho genérico

    `load` devolve pares `(plugin_name, entity)` e levanta subclasses de
    `LoadError`. `ctx` é um `ResolutionContext` opcional, usado só para eventos.
    """
    name: str
    schemes: Sequence[str]

    def load(
        self,
        source: Source,
        whitelist: Whitelist = None,
        skip_soft_errors: bool = False,
        ctx: Any = None,
    ) -> LoadResult:
        ...


def parse_bool(value: str) -> bool:
    """Interpreta flags da query string. Valor vazio (`?flag`) é verdadeiro."""
    text = (value or "").strip().lower()
    if text == "" or text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"invalid boolean value: {value!r}")


def invalid_source(loader: str, source: Source, message: str, cause: Optional[BaseException] = None) -> InvalidSourceError:
    return InvalidSourceError(
        message=f"{loader} configuration loader got invalid source `{source}`: {message}",
        details={"loader": loader, "source": str(source)},
        hint="Corrija as opções da query string da source",
        cause=cause,
    )


def allowed(plugin_name: str, whitelist: Whitelist) -> bool:
    return whitelist is None or plugin_name in whitelist


class BaseLoader:
    """
    Base opcional para Loaders com política de erros soft.

    Subclasses definem `name`, `schemes`, `soft_error_names` (variantes
    nomeadas aceitas em `soft-errors=`) e `_load(...)`.
    """

    name: str = "base"
    schemes: Tuple[str, ...] = ()
    soft_error_names: Tuple[str, ...] = ()

    def __init__(self, *, soft_errors: Optional[SoftErrors] = None):
        self.soft_errors = soft_errors or SoftErrors()

    # -----------------------------
    # Options
    # -----------------------------
    def options(self, source: Source) -> Dict[str, str]:
        return source.options()

    def soft_errors_for(self, source: Source) -> SoftErrors:
        text = self.options(source).get(SOFT_ERRORS_OPTION)
        if text is None:
            return self.soft_errors
        try:
            from_query = SoftErrors.parse(text, self.soft_error_names)
        except ValueError as exc:
            raise invalid_source(self.name, source, str(exc), exc) from exc
        return self.soft_errors.union(from_query)

    def bool_option(self, source: Source, key: str, default: bool) -> bool:
        value = self.options(source).get(key)
        if value is None:
            return default
        try:
            return parse_bool(value)
        except ValueError as exc:
            raise invalid_source(self.name, source, f"option `{key}`: {exc}", exc) from exc

    # -----------------------------
    # Soft errors
    # -----------------------------
    def skip_or_raise(
        self,
        error: LoadError,
        *,
        policy: SoftErrors,
        variant: Optional[str],
        skip_soft_errors: bool,
        ctx: Any = None,
    ) -> None:
        """
        Retorna (erro pulado) ou levanta `error`.

        `variant=None` indica condição coberta apenas por `all`.
        """
        soft = policy.skip_all if variant is None else policy.contains(variant)
        if soft and skip_soft_errors and not error.always_hard:
            if ctx is not None:
                ctx.log(
                    stage=Stage.LOAD,
                    level="info",
                    message=f"skipped soft error: {error.message}",
                    skip_error=True,
                    loader=self.name,
                    error_type=error.code,
                    source=error.source,
                )
            return
        if error.cause is not None:
            raise replace(error, skippable=soft) from error.cause
        raise replace(error, skippable=soft)

    # -----------------------------
    # Protocol
    # -----------------------------
    def load(
        self,
        source: Source,
        whitelist: Whitelist = None,
        skip_soft_errors: bool = False,
        ctx: Any = None,
    ) -> LoadResult:
        return self._load(source, whitelist, skip_soft_errors, ctx)

    def _load(self, source: Source, whitelist: Whitelist, skip_soft_errors: bool, ctx: Any) -> LoadResult:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, schemes={list(self.schemes)})"
