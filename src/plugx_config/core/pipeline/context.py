# src/plugx_config/core/pipeline/context.py
"""
Contexto de resolução compartilhado pelos estágios do pipeline.

Este módulo define o `ResolutionContext`, a estrutura canônica usada para
registrar o que aconteceu durante a resolução de configuração de uma
instância de `Configuration`.

O ResolutionContext atua como o único meio permitido de:
    - registro de eventos de log estruturados (por estágio)
    - coleta de warnings não fatais associados a um estágio

Princípios fundamentais:
    - Um contexto por `Configuration` (nenhum logger global configurado)
    - O contexto cobre uma única resolução; `Configuration.load` o limpa
    - Eventos são dicionários simples, serializáveis e filtráveis
    - Loaders e estágios apenas registram; nunca decidem a partir dos eventos

Invariantes:
    - Eventos sempre incluem `resolution_id`, `stage`, `level` e `timestamp`
    - Warnings são agrupados pelo valor textual do estágio
    - Eventos são acumulados em ordem de ocorrência

Limites explícitos:
    - Não executa estágios
    - Não persiste eventos automaticamente
    - Não altera o resultado da resolução
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from .types import Stage

StageLike = Union[Stage, str]


def _stage_value(stage: StageLike) -> str:
    return stage.value if isinstance(stage, Stage) else str(stage)


@dataclass
class ResolutionContext:
    """
    Log estruturado de uma resolução de configuração.

    Campos:
    - resolution_id: identificador único (uuid4) do contexto
    - created_at: instante de criação (UTC)
    - meta: metadados livres do chamador

    Níveis usados pelo pipeline: `debug`, `info`, `warning`, `error`.
    """

    resolution_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, stage: StageLike, level: str, message: str, **extra: Any) -> None:
        event = {
            "resolution_id": self.resolution_id,
            "stage": _stage_value(stage),
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, stage: StageLike, message: str, **extra: Any) -> None:
        key = _stage_value(stage)
        if key not in self.warnings:
            self.warnings[key] = []
        self.warnings[key].append(message)
        self.log(stage=stage, level="warning", message=message, **extra)

    def find(self, *, stage: Optional[StageLike] = None, level: Optional[str] = None) -> List[Dict[str, Any]]:
        """Eventos filtrados por estágio e/ou nível, na ordem de ocorrência."""
        wanted = None if stage is None else _stage_value(stage)
        return [
            event
            for event in self.events
            if (wanted is None or event["stage"] == wanted)
            and (level is None or event["level"] == level)
        ]

    def clear(self) -> None:
        self.events.clear()
        self.warnings.clear()
