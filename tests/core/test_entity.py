# tests/core/test_entity.py
"""
Testes da entidade de configuração (ConfigurationEntity).

Os testes asseguram que:
- o nome do plugin é validado (não vazio, minúsculo)
- conteúdo ausente é interpretado como mapa vazio
- um formato declarado é autoritativo (sem detecção)
- o formato detectado por conteúdo é registrado na entidade
- `forget_contents` / `forget_parsed` limpam apenas o estado alvo

Limites explícitos:
    - Não valida gramáticas de formatos (ver tests/core/parser)
"""

import pytest

try:
    from plugx_config.core.exceptions import ContentParseError, ParserNotFoundError
    from plugx_config.core.parser.defaults import default_parsers
except Exception as e:  # noqa: BLE001
    default_parsers = None
    ContentParseError = None
    ParserNotFoundError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing ConfigurationEntity/Parser API. Implement:\n"
            "- src/plugx_config/core/entity.py\n"
            "- src/plugx_config/core/parser/defaults.py (default_parsers)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_plugin_name_must_be_non_empty_and_lowercase(make_entity):
    _require_imports()
    with pytest.raises(ValueError):
        make_entity(plugin="")
    with pytest.raises(ValueError):
        make_entity(plugin="Foo")


def test_format_is_normalised_to_lowercase(make_entity):
    _require_imports()
    assert make_entity(format="YAML").format == "yaml"


def test_absent_contents_parse_to_empty_map(make_entity):
    """
    "Nenhuma configuração fornecida" é válido: sem conteúdo, o resultado
    é um mapa vazio e nenhum Parser é consultado.
    """
    _require_imports()
    entity = make_entity(contents=None)
    assert entity.parse_contents([]) == {}


def test_declared_format_is_authoritative(make_entity):
    _require_imports()
    # conteúdo JSON válido, mas formato declarado yaml: YAML é usado (JSON é subconjunto)
    entity = make_entity(contents='{"a": 1}', format="yaml")
    assert entity.parse_contents(default_parsers()) == {"a": 1}
    assert entity.format == "yaml"

    broken = make_entity(contents="a: [", format="json")
    with pytest.raises(ContentParseError):
        broken.parse_contents(default_parsers())


def test_detected_format_is_recorded(make_entity):
    _require_imports()
    entity = make_entity(contents="a: 1\nb:\n  c: true\n")
    assert entity.parse_contents_mut(default_parsers()) == {"a": 1, "b": {"c": True}}
    assert entity.parsed == {"a": 1, "b": {"c": True}}
    assert entity.format == "yaml"


def test_guess_format_without_parsing(make_entity):
    _require_imports()
    assert make_entity(contents='{"x": [1, 2]}').guess_format(default_parsers()) == "json"
    assert make_entity(contents=None).guess_format(default_parsers()) is None


def test_unknown_format_raises_parser_not_found(make_entity):
    _require_imports()
    entity = make_entity(contents="whatever", format="ini")
    with pytest.raises(ParserNotFoundError):
        entity.parse_contents(default_parsers())


def test_forget_clears_only_target_state(make_entity):
    _require_imports()
    entity = make_entity(contents='{"a": 1}', format="json")
    entity.parse_contents_mut(default_parsers())

    entity.forget_contents()
    assert entity.contents is None
    assert entity.parsed == {"a": 1}

    entity.forget_parsed()
    assert entity.parsed is None


def test_bytes_contents_are_accepted(make_entity):
    _require_imports()
    entity = make_entity(contents=b'{"a": "\xc3\xa9"}', format="json")
    assert entity.parse_contents(default_parsers()) == {"a": "é"}


def test_detected_format_is_kept_only_after_successful_parse(make_entity):
    _require_imports()

    class _SniffsButFails:
        name = "Flaky"

        def supported_formats(self):
            return {"flaky"}

        def sniff(self, data):
            return True

        def parse(self, data):
            raise ContentParseError(message="broken", details={"parser": "Flaky"})

    entity = make_entity(contents="whatever")
    with pytest.raises(ContentParseError):
        entity.parse_contents([_SniffsButFails()])
    assert entity.format is None
