# src/plugx_config/__init__.py
"""
plugx-config: resolução de configuração para aplicações orientadas a plugins.

Uma aplicação declara *plugins* (namespaces lógicos de configuração) e reúne a
configuração de cada um a partir de várias sources (variáveis de ambiente,
filesystem, sources customizadas), em vários formatos (JSON, YAML, TOML, env),
mesclando os fragmentos de forma determinística e, opcionalmente, validando o
resultado contra um schema.

Arquitetura em alto nível:
    - core.source     → localizador `scheme://authority/path?query`
    - core.entity     → fragmento de configuração de um plugin
    - core.loader     → Loaders (env, fs, callables) e guarda de exclusividade
    - core.parser     → Parsers (JSON, TOML, YAML, env, callables)
    - core.pipeline   → registry, estágios e o orquestrador `Configuration`
    - core.config     → política de merge e camada de settings
    - core.validation → protocolo de schema e adaptador JSON Schema

Limites explícitos:
    - Não distribui configuração pela rede
    - Não recarrega configuração automaticamente (hot reload)
    - Não define uma linguagem de schema própria
"""
from .core.config.loader import build_configuration, load_settings
from .core.entity import ConfigurationEntity
from .core.exceptions import ConfigurationError
from .core.pipeline.configuration import Configuration
from .core.pipeline.context import ResolutionContext
from .core.soft_errors import SoftErrors
from .core.source import Source

__all__ = [
    "Configuration",
    "ConfigurationEntity",
    "ConfigurationError",
    "ResolutionContext",
    "SoftErrors",
    "Source",
    "build_configuration",
    "load_settings",
]
