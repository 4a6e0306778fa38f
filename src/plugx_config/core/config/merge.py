# src/plugx_config/core/config/merge.py
"""
Utilitário canônico de deep-merge de configuração.

Este módulo implementa a política de merge usada tanto no estágio Merge do
pipeline (fragmentos de um plugin, em ordem de registro das sources) quanto
na camada de settings (defaults + override local).

Política de merge (v1):
    - dict + dict → merge recursivo por chave
    - qualquer outro par → o valor posterior (maior precedência) vence
    - listas são sobrescritas por inteiro (sem merge elemento a elemento)

Princípios fundamentais:
    - O merge é determinístico e puramente funcional
    - Nenhum input é mutado durante o processo
    - Posições são apenas diagnósticas e nunca afetam o resultado

Invariantes:
    - A mesma entrada sempre produz a mesma saída
    - Chaves não sobrescritas são preservadas
    - A estrutura retornada é sempre um novo valor (cópia profunda)

Limites explícitos:
    - Não carrega arquivos de configuração
    - Não valida semântica de domínio
    - Não realiza coerção de tipos
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Callable, Optional

from ..position import Position

# trace(posição no acumulado, posição no fragmento, valor anterior, novo valor)
MergeTrace = Callable[[Position, Position, Any, Any], None]


def deep_merge(
    base: Any,
    override: Any,
    *,
    position: Optional[Position] = None,
    source_position: Optional[Position] = None,
    trace: Optional[MergeTrace] = None,
) -> Any:
    """
    Realiza um deep-merge determinístico entre dois valores de configuração.

    `position` e `source_position` formam o par diagnóstico (caminho no valor
    acumulado e caminho no fragmento que contribui). Quando `trace` é
    informado, cada folha substituída é reportada com o par de posições.

    Args:
        base: valor acumulado (menor precedência).
        override: valor do fragmento (maior precedência).

    Returns:
        Novo valor resultante; nenhum dos inputs é mutado.
    """
    position = position or Position()
    source_position = source_position or Position()

    if not isinstance(base, dict) or not isinstance(override, dict):
        if trace is not None and base != override:
            trace(position, source_position, base, override)
        return deepcopy(override)

    result = deepcopy(base)
    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        result[key] = deep_merge(
            result[key],
            override_value,
            position=position.with_key(key),
            source_position=source_position.with_key(key),
            trace=trace,
        )

    return result
