# src/plugx_config/core/config/__init__.py

"""
Camada de settings e política de merge do plugx-config.

Responsabilidades do pacote:
    - Política canônica de deep-merge (usada pelo estágio Merge e pelos settings)
    - Carregamento de settings (defaults + override local, YAML ou JSON)
    - Construção de uma `Configuration` a partir dos settings

Invariantes:
    - O merge é determinístico e nunca muta seus inputs
    - Settings finais são sempre um dicionário puro (dict)
"""
