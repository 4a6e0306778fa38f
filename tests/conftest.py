# tests/conftest.py
"""
Fixtures compartilhados para testes do plugx-config.

Este módulo define fixtures reutilizáveis que fornecem:
- um ResolutionContext determinístico
- um ambiente de processo isolado (variáveis `APP__*` controladas)
- diretórios de configuração temporários com arquivos por plugin
- fábricas de entidades e Loaders dummy para testes estruturais

Decisões arquiteturais:
    - Filesystem e ambiente são isolados via `tmp_path` e `monkeypatch`
    - Loaders dummy utilizam duck typing em vez de herança
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture depende de estado global não restaurado
    - Dados retornados são determinísticos

Limites explícitos:
    - Não substituir testes de integração (ver tests/e2e)
"""

import json
from datetime import datetime, timezone

import pytest


@pytest.fixture
def ctx():
    """ResolutionContext com identidade fixa."""
    from plugx_config.core.pipeline.context import ResolutionContext

    return ResolutionContext(
        resolution_id="resolution-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        meta={"source": "pytest"},
    )


@pytest.fixture
def clean_env(monkeypatch):
    """
    Remove do ambiente qualquer variável com prefixo `APP`.

    Retorna uma função `set_env(name, value)` para definir variáveis
    restauradas automaticamente ao final do teste.
    """
    import os

    for name in list(os.environ):
        if name.startswith("APP"):
            monkeypatch.delenv(name, raising=False)

    def set_env(name: str, value: str) -> None:
        monkeypatch.setenv(name, value)

    return set_env


@pytest.fixture
def config_dir(tmp_path):
    """
    Fábrica de diretórios de configuração.

    `config_dir({"foo.json": {...}, "bar.yaml": "a: 1\\n"})` cria um diretório
    novo em `tmp_path`; valores dict são serializados como JSON.
    """
    counter = {"n": 0}

    def make(files):
        counter["n"] += 1
        directory = tmp_path / f"config-{counter['n']}"
        directory.mkdir()
        for name, content in files.items():
            text = json.dumps(content) if isinstance(content, dict) else content
            (directory / name).write_text(text, encoding="utf-8")
        return directory

    return make


@pytest.fixture
def make_entity():
    """Fábrica de ConfigurationEntity com source `test://`."""
    from plugx_config.core.entity import ConfigurationEntity
    from plugx_config.core.source import Source

    def make(plugin="foo", contents=None, format=None, parsed=None, source="test://fixture"):
        return ConfigurationEntity(
            source=Source.parse(source),
            plugin_name=plugin,
            loader_name="Test",
            format=format,
            contents=contents,
            parsed=parsed,
        )

    return make


@pytest.fixture
def StaticLoader():
    """
    Fixture factory de um Loader duck-typed que devolve fragmentos fixos.

    `StaticLoader({"foo": {"a": 1}}, schemes=["static"])` produz, a cada
    `load`, uma entidade por plugin com conteúdo JSON e registra as chamadas
    em `calls`.
    """
    from plugx_config.core.entity import ConfigurationEntity

    class _StaticLoader:
        name = "Static"

        def __init__(self, fragments, schemes=("static",), error=None):
            self.fragments = fragments
            self.schemes = tuple(schemes)
            self.error = error
            self.calls = []

        def load(self, source, whitelist=None, skip_soft_errors=False, ctx=None):
            self.calls.append((str(source), whitelist, skip_soft_errors))
            if self.error is not None:
                raise self.error
            result = []
            for plugin, value in self.fragments.items():
                if whitelist is not None and plugin not in whitelist:
                    continue
                result.append(
                    (
                        plugin,
                        ConfigurationEntity(
                            source=source,
                            plugin_name=plugin,
                            loader_name=self.name,
                            format="json",
                            contents=json.dumps(value),
                        ),
                    )
                )
            return result

    return _StaticLoader
