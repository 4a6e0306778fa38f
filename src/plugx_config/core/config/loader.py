# src/plugx_config/core/config/loader.py
"""
Loader canônico de settings do plugx-config.

Settings descrevem como a aplicação resolve a configuração dos plugins
(sources, whitelist, política de erros e de memória). São resolvidos a
partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional)

Formato (YAML ou JSON):

    resolution:
      skip_soft_errors: false
      forget_loaded: false
      forget_parsed: false
      whitelist: [foo, bar]
      whitelist_env: APP_PLUGINS
    sources:
      - env://?prefix=APP
      - fs:///etc/app?soft-errors=not-found

Princípios fundamentais:
    - Settings são declarativos e explícitos
    - O override local tem precedência sobre os defaults (deep-merge)
    - Erros estruturais são falhas fatais

Limites explícitos:
    - Não carrega a configuração dos plugins (isso é papel da `Configuration`)
    - Não vincula Loaders customizados (use `Configuration.add_source`)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml  # PyYAML

from ..pipeline.configuration import Configuration
from .errors import InvalidSettingsError, SettingsNotFoundError, UnsupportedSettingsFormatError
from .merge import deep_merge

_FLAGS = ("skip_soft_errors", "forget_loaded", "forget_parsed")


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de settings e valida o tipo raiz.

    Arquivos vazios são interpretados como dicionários vazios.

    Raises:
        SettingsNotFoundError: se o arquivo não existir.
        UnsupportedSettingsFormatError: se a extensão não for suportada.
        InvalidSettingsError: se o conteúdo for malformado ou a raiz não for dict.
    """
    if not path.exists():
        raise SettingsNotFoundError(f"Arquivo de settings não encontrado: {path}")

    suffix = path.suffix.lower()

    try:
        if suffix in {".yaml", ".yml"}:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)

        elif suffix == ".json":
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)

        else:
            raise UnsupportedSettingsFormatError(f"Formato não suportado: {path.suffix}")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise InvalidSettingsError(f"Settings malformados em {path}: {exc}") from exc

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidSettingsError(
            f"Settings root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_settings(
    *,
    defaults_path: str,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve os settings efetivos.

    O arquivo local é opcional e, quando existe, sobrepõe os defaults via
    `deep_merge` (listas são substituídas por inteiro).
    """
    defaults = _load_file(Path(defaults_path))

    effective = defaults

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(defaults, _load_file(local_file))

    return effective


def build_configuration(settings: Dict[str, Any]) -> Configuration:
    """
    Constrói uma `Configuration` a partir de settings já resolvidos.

    Raises:
        InvalidSettingsError: se `resolution` ou `sources` estiverem malformados.
        SchemeNotFoundError: se uma source não tiver Loader para seu scheme.
        ConfigurationError: se `whitelist_env` apontar para variável não definida.
    """
    resolution = settings.get("resolution") or {}
    if not isinstance(resolution, dict):
        raise InvalidSettingsError("Seção `resolution` deve ser um mapa")

    flags = {}
    for name in _FLAGS:
        value = resolution.get(name, False)
        if not isinstance(value, bool):
            raise InvalidSettingsError(f"`resolution.{name}` deve ser booleano, recebido: {value!r}")
        flags[name] = value

    configuration = Configuration(**flags)

    whitelist = resolution.get("whitelist")
    if whitelist is not None:
        if not isinstance(whitelist, list) or not all(isinstance(name, str) for name in whitelist):
            raise InvalidSettingsError("`resolution.whitelist` deve ser uma lista de nomes de plugin")
        configuration.set_whitelist(whitelist)

    whitelist_env = resolution.get("whitelist_env")
    if whitelist_env is not None:
        if not isinstance(whitelist_env, str) or not whitelist_env:
            raise InvalidSettingsError("`resolution.whitelist_env` deve ser o nome de uma variável de ambiente")
        configuration.load_whitelist_from_env(whitelist_env)

    sources = settings.get("sources") or []
    if not isinstance(sources, list):
        raise InvalidSettingsError("Seção `sources` deve ser uma lista de localizadores")
    for locator in sources:
        try:
            configuration.add_source(locator)
        except ValueError as exc:
            raise InvalidSettingsError(f"Source inválida em `sources`: {locator!r}") from exc

    return configuration
