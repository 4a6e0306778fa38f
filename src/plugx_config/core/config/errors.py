# src/plugx_config/core/config/errors.py
"""
Exceções canônicas da camada de settings do plugx-config.

Settings descrevem *como* resolver (sources, whitelist, política de erros),
nunca a configuração dos plugins em si. Falhas aqui são violações
estruturais do arquivo de settings e sempre fatais.

Invariantes:
    - Todas as exceções de settings herdam de `SettingsError`
    - Nenhuma exceção desta camada representa falha de resolução de plugin
"""


class SettingsError(Exception):
    """Exceção base para erros do arquivo de settings."""


class SettingsNotFoundError(SettingsError):
    """
    Arquivo de settings base (defaults) não encontrado.

    Decisões arquiteturais:
        - O arquivo de defaults é obrigatório
        - O override local é opcional e sua ausência não é erro
    """


class UnsupportedSettingsFormatError(SettingsError):
    """
    Extensão de arquivo de settings não suportada.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidSettingsError(SettingsError):
    """Raiz não é um mapa, ou uma seção (`resolution`, `sources`) está malformada."""
