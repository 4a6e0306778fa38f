"""
Pipeline de resolução de configuração (Load → Parse → Merge → Validate).

Módulos:
    - types: estágios e resumo de estágio
    - context: log estruturado de uma resolução
    - registry: sources registradas e despacho de Loaders
    - stages: funções puras de cada estágio
    - configuration: orquestrador `Configuration`
"""
