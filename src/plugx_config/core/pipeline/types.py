# src/plugx_config/core/pipeline/types.py
"""
Tipos canônicos do pipeline de resolução.

Este módulo define os estágios do pipeline (Load → Parse → Merge → Validate)
e o resumo imutável produzido ao final de cada estágio.

Princípios fundamentais:
    - Tipos são estáveis e serializáveis
    - Valores textuais são usados diretamente em eventos e payloads de erro
    - Nenhuma lógica de execução vive neste módulo
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class Stage(str, Enum):
    """
    Estágios do pipeline de resolução, na ordem de execução.

    Os valores são strings para facilitar:
        - serialização em JSON
        - anotação de erros com o estágio produtor
        - filtragem de eventos do ResolutionContext

    Invariantes:
        - A ordem de declaração é a ordem de execução
        - O valor textual do enum é estável e canônico
    """
    LOAD = "load"
    PARSE = "parse"
    MERGE = "merge"
    VALIDATE = "validate"


@dataclass(frozen=True)
class StageSummary:
    """Resumo imutável de um estágio concluído (apenas para rastreabilidade)."""

    stage: Stage
    plugins: int
    entities: int = 0
    metrics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage.value,
            "plugins": self.plugins,
            "entities": self.entities,
            "metrics": dict(self.metrics),
        }
