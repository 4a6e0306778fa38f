"""
plugx-config: Canonical Error Structures (v1)

Este módulo define o payload canônico de erro do plugx-config.
Falhas de resolução (load, parse, validate) fazem parte do contrato
operacional da biblioteca e devem ser:

- explícitas
- serializáveis
- rastreáveis até o estágio, plugin e origem que as produziram

Nenhuma decisão implícita é permitida: o payload descreve a falha,
nunca tenta corrigi-la.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do plugx-config.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados (plugin, source, loader, parser, causa)
    - hint: ação sugerida ao operador (onde corrigir)
    - stage: estágio do pipeline que produziu a falha (load/parse/validate)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    stage: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Load
LOAD_NOT_FOUND = "LOAD_NOT_FOUND"
LOAD_NO_ACCESS = "LOAD_NO_ACCESS"
LOAD_TIMEOUT = "LOAD_TIMEOUT"
LOAD_INVALID_SOURCE = "LOAD_INVALID_SOURCE"
LOAD_SCHEME_NOT_FOUND = "LOAD_SCHEME_NOT_FOUND"
LOAD_DUPLICATE = "LOAD_DUPLICATE"
LOAD_FAILED = "LOAD_FAILED"
LOAD_LOCK_ACQUISITION = "LOAD_LOCK_ACQUISITION"

# Parse
PARSE_FAILED = "PARSE_FAILED"
PARSE_PARSER_NOT_FOUND = "PARSE_PARSER_NOT_FOUND"
PARSE_PLUGIN = "PARSE_PLUGIN"

# Validate
VALIDATION_FAILED = "VALIDATION_FAILED"

# Genérico
CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
PLUGX_INTERNAL_ERROR = "PLUGX_INTERNAL_ERROR"


def _stage_value(stage: Any) -> Optional[str]:
    if stage is None:
        return None
    return str(getattr(stage, "value", stage))


def to_payload(exc: BaseException) -> ErrorPayload:
    """Converte exceções em ErrorPayload (serializável, acionável).

    Regras:
    - Erros do plugx-config já carregam code/message/details/hint/stage.
    - Outras exceções: encapsular como PLUGX_INTERNAL_ERROR sem expor stack trace.
    """
    code = getattr(exc, "code", None)
    if isinstance(code, str) and isinstance(getattr(exc, "details", None), dict):
        details = dict(exc.details)  # type: ignore[attr-defined]
        cause = getattr(exc, "cause", None)
        if cause is not None:
            details.setdefault("cause", f"{cause.__class__.__name__}: {cause}")
        return ErrorPayload(
            type=code,
            message=str(exc) or "Erro de configuração",
            details=details,
            hint=getattr(exc, "hint", None),
            stage=_stage_value(getattr(exc, "stage", None)),
        )

    # Fallback genérico
    return ErrorPayload(
        type=PLUGX_INTERNAL_ERROR,
        message=str(exc) or "Erro inesperado durante a resolução",
        details={
            "exception_class": exc.__class__.__name__,
        },
        hint="Verifique os eventos do ResolutionContext e a lista de sources registradas",
        stage=None,
    )
