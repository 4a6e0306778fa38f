"""
plugx-config: Canonical Exceptions (v1)

Este módulo define a taxonomia tipada de falhas do pipeline de resolução.

Objetivo:
- Permitir que Loaders, Parsers e o pipeline levantem exceções semânticas tipadas
- Classificar cada falha como *hard* (fatal) ou *soft* (tolerável sob política)
- Anotar cada falha com o estágio que a produziu (load, parse, validate)
- Facilitar o mapeamento determinístico para ErrorPayload

Regras:
- Todas as exceções herdam de `ConfigurationError` (tipo único na fronteira do pipeline)
- Exceções carregam apenas dados estruturados em `details` (plugin, source, loader, parser)
- A causa original é preservada em `cause` e no encadeamento (`raise ... from`)
- `DuplicateError`, `SchemeNotFoundError` e `LockAcquisitionError` nunca são soft
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional

from . import errors
from .pipeline.types import Stage


@dataclass(frozen=True, eq=False)
class ConfigurationError(Exception):
    """Base class para todas as falhas do plugx-config.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - `skippable` é a auto-classificação *soft* declarada por quem levantou o erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None
    skippable: bool = False
    cause: Optional[BaseException] = None

    stage: ClassVar[Optional[Stage]] = None
    code: ClassVar[str] = errors.CONFIGURATION_ERROR
    always_hard: ClassVar[bool] = False

    def __str__(self) -> str:
        return self.message

    def is_skippable(self) -> bool:
        return bool(self.skippable) and not self.always_hard

    @property
    def plugin(self) -> Optional[str]:
        return self.details.get("plugin")

    @property
    def source(self) -> Optional[str]:
        return self.details.get("source")

    def to_payload(self) -> errors.ErrorPayload:
        return errors.to_payload(self)


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class LoadError(ConfigurationError):
    """Falha durante o estágio Load (descoberta de fragmentos)."""

    stage: ClassVar[Optional[Stage]] = Stage.LOAD

    @property
    def loader(self) -> Optional[str]:
        return self.details.get("loader")


@dataclass(frozen=True, eq=False)
class NotFoundError(LoadError):
    """A origem apontada pela source não existe."""

    code: ClassVar[str] = errors.LOAD_NOT_FOUND


@dataclass(frozen=True, eq=False)
class NoAccessError(LoadError):
    """Permissão insuficiente para ler a origem."""

    code: ClassVar[str] = errors.LOAD_NO_ACCESS


@dataclass(frozen=True, eq=False)
class LoadTimeoutError(LoadError):
    """O Loader excedeu seu próprio limite de tempo."""

    code: ClassVar[str] = errors.LOAD_TIMEOUT


@dataclass(frozen=True, eq=False)
class InvalidSourceError(LoadError):
    """Source ou opções de query inválidas para o Loader."""

    code: ClassVar[str] = errors.LOAD_INVALID_SOURCE


@dataclass(frozen=True, eq=False)
class SchemeNotFoundError(LoadError):
    """Nenhum Loader registrado atende ao scheme da source."""

    code: ClassVar[str] = errors.LOAD_SCHEME_NOT_FOUND
    always_hard: ClassVar[bool] = True


@dataclass(frozen=True, eq=False)
class DuplicateError(LoadError):
    """Dois fragmentos do mesmo plugin na mesma chamada de load (ambiguidade de formato)."""

    code: ClassVar[str] = errors.LOAD_DUPLICATE
    always_hard: ClassVar[bool] = True


@dataclass(frozen=True, eq=False)
class LoadFailedError(LoadError):
    """Falha genérica de carregamento; `details["description"]` descreve a operação."""

    code: ClassVar[str] = errors.LOAD_FAILED


@dataclass(frozen=True, eq=False)
class LockAcquisitionError(LoadError):
    """Instância de Loader já em uso por outra chamada (contrato não bloqueante)."""

    code: ClassVar[str] = errors.LOAD_LOCK_ACQUISITION
    always_hard: ClassVar[bool] = True


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ParseError(ConfigurationError):
    """Falha durante o estágio Parse. Nunca é soft."""

    stage: ClassVar[Optional[Stage]] = Stage.PARSE
    always_hard: ClassVar[bool] = True


@dataclass(frozen=True, eq=False)
class ContentParseError(ParseError):
    """Um Parser não conseguiu interpretar o conteúdo (`details`: parser, formats)."""

    code: ClassVar[str] = errors.PARSE_FAILED

    @property
    def parser(self) -> Optional[str]:
        return self.details.get("parser")


@dataclass(frozen=True, eq=False)
class ParserNotFoundError(ParseError):
    """Nenhum Parser suporta o formato declarado ou reconhece o conteúdo."""

    code: ClassVar[str] = errors.PARSE_PARSER_NOT_FOUND


@dataclass(frozen=True, eq=False)
class PluginParseError(ParseError):
    """Falha de parse anotada com plugin e source pelo pipeline."""

    code: ClassVar[str] = errors.PARSE_PLUGIN


# ---------------------------------------------------------------------------
# Validate
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ValidationError(ConfigurationError):
    """Configuração mesclada rejeitada por um schema (`details`: plugin, path)."""

    stage: ClassVar[Optional[Stage]] = Stage.VALIDATE
    code: ClassVar[str] = errors.VALIDATION_FAILED
    always_hard: ClassVar[bool] = True

    @property
    def path(self) -> Optional[str]:
        return self.details.get("path")
