"""
Parsers de conteúdo de configuração (JSON, TOML, YAML, env e callables).

Todo Parser obedece ao protocolo `Parser` de `base`; o despacho por formato
declarado ou por detecção de conteúdo também vive em `base`.
"""
