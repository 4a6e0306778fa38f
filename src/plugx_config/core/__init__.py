# src/plugx_config/core/__init__.py
"""
Core do plugx-config.

Componentes principais:
    - source, entity, position → modelo de dados da resolução
    - exceptions, errors       → taxonomia de falhas e payloads serializáveis
    - soft_errors              → política de erros soft por Loader
    - loader, parser           → capacidades plugáveis (conjunto aberto)
    - pipeline                 → Load → Parse → Merge → Validate
    - config                   → merge e settings
    - validation               → protocolo de schema

Princípios fundamentais:
    - Nenhuma decisão silenciosa: toda falha é hard ou explicitamente soft
    - A ordem de registro das sources é a precedência de merge
    - Estado pertence à instância de `Configuration`, nunca a globais
"""
