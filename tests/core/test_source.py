# tests/core/test_source.py
"""
Testes do localizador canônico de origem (Source).

Os testes asseguram que:
- localizadores textuais são interpretados em scheme/authority/path/query
- igualdade e hash são estruturais
- a renderização textual preserva o localizador original
- opções da query são expostas cruas, sem validação

Limites explícitos:
    - Não valida opções específicas de Loaders
"""

import pytest

try:
    from plugx_config.core.source import Source
except Exception as e:  # noqa: BLE001
    Source = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing Source API. Implement:\n"
            "- src/plugx_config/core/source.py (Source.parse, options, with_path, without_query)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_parse_env_locator_with_query():
    _require_imports()
    source = Source.parse("env://?prefix=APP&separator=__")
    assert source.scheme == "env"
    assert source.netloc == ""
    assert source.path == ""
    assert source.options() == {"prefix": "APP", "separator": "__"}


def test_parse_fs_locator_keeps_authority_and_path():
    _require_imports()
    source = Source.parse("fs://config/app?strip-slash=true")
    assert source.scheme == "fs"
    assert source.netloc == "config"
    assert source.path == "/app"


def test_equality_and_hash_are_structural():
    """
    Duas sources construídas a partir do mesmo texto são iguais e
    colapsam em um único elemento de conjunto.
    """
    _require_imports()
    a = Source.parse("fs:///etc/app?soft-errors=all")
    b = Source.parse("fs:///etc/app?soft-errors=all")
    c = Source.parse("fs:///etc/app")
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert len({a, b, c}) == 2


@pytest.mark.parametrize(
    "text",
    [
        "env://?prefix=APP",
        "fs:///etc/app?soft-errors=not-found",
        "file:///etc/app/foo.yaml",
        "custom://host/path",
    ],
)
def test_str_renders_original_locator(text):
    _require_imports()
    assert str(Source.parse(text)) == text


def test_scheme_is_lowercased():
    _require_imports()
    assert Source(scheme="ENV").scheme == "env"


def test_invalid_locators_are_rejected():
    _require_imports()
    with pytest.raises(ValueError):
        Source.parse("not-a-locator")
    with pytest.raises(ValueError):
        Source(scheme="")


def test_parse_returns_source_unchanged():
    _require_imports()
    source = Source.parse("env://")
    assert Source.parse(source) is source


def test_options_last_repeated_value_wins():
    _require_imports()
    assert Source.parse("env://?prefix=A&prefix=B").options() == {"prefix": "B"}


def test_derived_sources():
    _require_imports()
    source = Source.parse("fs:///etc/app?soft-errors=all")
    assert source.with_path("/etc/app/foo.json").path == "/etc/app/foo.json"
    assert source.with_path("/etc/app/foo.json").query == "soft-errors=all"
    assert str(source.without_query()) == "fs:///etc/app"
