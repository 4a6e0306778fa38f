# tests/core/loader/test_fs_loader.py
"""
Testes do Loader de filesystem (FsLoader).

Os testes asseguram que:
- um diretório produz uma entidade por arquivo `<plugin>.<formato>`
- um arquivo único produz uma única entidade
- a whitelist é aplicada antes da leitura de conteúdo
- dois formatos para o mesmo plugin geram DuplicateError mesmo com skip
- caminho inexistente é NotFoundError, ou nada quando a política permite
- política de construção e da query são combinadas (OR)
- nomes inutilizáveis geram warning no contexto
- falhas de permissão e bytes fora de UTF-8 viram erros classificados

Decisões arquiteturais:
    - Todo I/O acontece sob `tmp_path`
"""

import pytest

try:
    from plugx_config.core.exceptions import (
        DuplicateError,
        InvalidSourceError,
        LoadFailedError,
        NoAccessError,
        NotFoundError,
    )
    from plugx_config.core.loader.fs import FsLoader, os_error_variant, plugin_name_and_format
    from plugx_config.core.soft_errors import SoftErrors
    from plugx_config.core.source import Source
except Exception as e:  # noqa: BLE001
    FsLoader = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing FsLoader API. Implement:\n"
            "- src/plugx_config/core/loader/fs.py (FsLoader)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _fs(path, query=""):
    return Source.parse(f"fs://{path}" + (f"?{query}" if query else ""))


def test_directory_yields_one_entity_per_file(config_dir):
    _require_imports()
    directory = config_dir({"foo.json": {"a": 1}, "Bar.YAML": "b: 2\n"})

    loaded = FsLoader().load(_fs(directory))

    assert [plugin for plugin, _ in loaded] == ["bar", "foo"]
    bar, foo = (entity for _, entity in loaded)
    assert bar.format == "yaml"
    assert foo.format == "json"
    assert foo.contents == '{"a": 1}'
    assert foo.loader_name == "File"
    assert foo.source.path == str(directory / "foo.json")


def test_single_file_source(config_dir):
    _require_imports()
    directory = config_dir({"foo.toml": 'a = 1\n'})
    loaded = FsLoader().load(Source.parse(f"file://{directory / 'foo.toml'}"))
    assert len(loaded) == 1
    plugin, entity = loaded[0]
    assert plugin == "foo"
    assert entity.format == "toml"


def test_whitelist_is_applied_before_reading(config_dir, monkeypatch):
    """
    Plugins fora da whitelist nunca têm seu conteúdo lido: um arquivo
    ilegível de um plugin não listado não causa erro.
    """
    _require_imports()
    directory = config_dir({"foo.json": {"a": 1}, "bar.json": {"b": 2}})

    from pathlib import Path

    original = Path.read_text

    def guarded_read_text(self, *args, **kwargs):
        if self.name == "bar.json":
            raise AssertionError("bar.json must not be read")
        return original(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", guarded_read_text)

    loaded = FsLoader().load(_fs(directory), whitelist={"foo"})
    assert [plugin for plugin, _ in loaded] == ["foo"]


def test_duplicate_formats_are_always_hard(config_dir):
    _require_imports()
    directory = config_dir({"foo.json": {"a": 1}, "foo.yaml": "a: 2\n"})
    loader = FsLoader(soft_errors=SoftErrors.all())

    with pytest.raises(DuplicateError) as info:
        loader.load(_fs(directory, "soft-errors=all"), skip_soft_errors=True)

    assert info.value.plugin == "foo"
    assert sorted(info.value.details["formats"]) == ["json", "yaml"]
    assert info.value.is_skippable() is False


def test_missing_directory_is_not_found(tmp_path):
    _require_imports()
    with pytest.raises(NotFoundError) as info:
        FsLoader().load(_fs(tmp_path / "missing"), skip_soft_errors=True)
    assert info.value.is_skippable() is False


def test_missing_directory_skipped_under_not_found_policy(tmp_path, ctx):
    _require_imports()
    source = _fs(tmp_path / "missing", "soft-errors=not-found")

    assert FsLoader().load(source, skip_soft_errors=True, ctx=ctx) == []
    skipped = [e for e in ctx.events if e.get("skip_error")]
    assert len(skipped) == 1
    assert skipped[0]["level"] == "info"

    # sem o flag do chamador, a política só marca o erro como soft
    with pytest.raises(NotFoundError) as info:
        FsLoader().load(source, skip_soft_errors=False)
    assert info.value.is_skippable() is True


def test_constructor_policy_is_or_merged_with_query(tmp_path):
    _require_imports()
    loader = FsLoader(soft_errors=SoftErrors.of("not-found"))
    source = _fs(tmp_path / "missing", "soft-errors=permission-denied")
    assert loader.load(source, skip_soft_errors=True) == []


def test_unknown_soft_error_name_is_invalid_source(tmp_path):
    _require_imports()
    with pytest.raises(InvalidSourceError):
        FsLoader().load(_fs(tmp_path, "soft-errors=timeout"))


def test_file_without_format_is_invalid_source(tmp_path):
    _require_imports()
    path = tmp_path / "README"
    path.write_text("x", encoding="utf-8")

    with pytest.raises(InvalidSourceError):
        FsLoader().load(_fs(path, "soft-errors=not-found"), skip_soft_errors=True)
    assert FsLoader().load(_fs(path, "soft-errors=all"), skip_soft_errors=True) == []


def test_unusable_names_in_directory_emit_warning(config_dir, ctx):
    _require_imports()
    directory = config_dir({"foo.json": {"a": 1}, "README": "text", ".hidden": "x"})
    (directory / "nested.json").mkdir()

    loaded = FsLoader().load(_fs(directory), ctx=ctx)

    assert [plugin for plugin, _ in loaded] == ["foo"]
    assert len(ctx.warnings["load"]) == 3


def test_unreadable_file_is_no_access_or_dropped(config_dir, monkeypatch):
    _require_imports()
    directory = config_dir({"foo.json": {"a": 1}, "bar.json": {"b": 2}})

    from pathlib import Path

    original = Path.read_text

    def deny_bar(self, *args, **kwargs):
        if self.name == "bar.json":
            raise PermissionError("denied")
        return original(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", deny_bar)

    with pytest.raises(NoAccessError) as info:
        FsLoader().load(_fs(directory))
    assert info.value.details["description"] == "read contents of file"
    assert info.value.plugin == "bar"
    assert isinstance(info.value.cause, PermissionError)

    loaded = FsLoader().load(_fs(directory, "soft-errors=permission-denied"), skip_soft_errors=True)
    assert [plugin for plugin, _ in loaded] == ["foo"]


def test_strip_slash_makes_path_relative(config_dir, monkeypatch):
    _require_imports()
    directory = config_dir({"foo.json": {"a": 1}})
    monkeypatch.chdir(directory.parent)

    loaded = FsLoader().load(Source.parse(f"fs:///{directory.name}?strip-slash=true"))
    assert [plugin for plugin, _ in loaded] == ["foo"]

    with pytest.raises(InvalidSourceError):
        FsLoader().load(Source.parse(f"fs:///{directory.name}?strip-slash=maybe"))


def test_empty_path_is_current_directory(config_dir, monkeypatch):
    _require_imports()
    directory = config_dir({"foo.json": {"a": 1}})
    monkeypatch.chdir(directory)
    assert [plugin for plugin, _ in FsLoader().load(Source.parse("fs://"))] == ["foo"]


def test_name_and_variant_helpers():
    _require_imports()
    from pathlib import Path

    assert plugin_name_and_format(Path("/x/Foo.JSON")) == ("foo", "json")
    assert plugin_name_and_format(Path("/x/README")) is None
    assert os_error_variant(FileNotFoundError()) == "not-found"
    assert os_error_variant(PermissionError()) == "permission-denied"
    assert os_error_variant(IsADirectoryError()) is None


def test_invalid_utf8_file_is_load_failed(config_dir):
    _require_imports()
    directory = config_dir({"bar.json": {"b": 2}})
    (directory / "foo.json").write_bytes(b'{"a": "\xff"}')

    with pytest.raises(LoadFailedError) as info:
        FsLoader().load(_fs(directory))
    assert info.value.plugin == "foo"
    assert info.value.details["description"] == "read contents of file"
    assert isinstance(info.value.cause, UnicodeDecodeError)
    assert info.value.is_skippable() is False

    loaded = FsLoader().load(_fs(directory, "soft-errors=all"), skip_soft_errors=True)
    assert [plugin for plugin, _ in loaded] == ["bar"]


def test_inaccessible_path_is_no_access(tmp_path, monkeypatch):
    _require_imports()
    from pathlib import Path

    locked = tmp_path / "locked" / "app"

    def deny(self):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "is_dir", deny)

    with pytest.raises(NoAccessError) as info:
        FsLoader().load(_fs(locked))
    assert isinstance(info.value.cause, PermissionError)
    assert info.value.is_skippable() is False

    assert FsLoader().load(_fs(locked, "soft-errors=permission-denied"), skip_soft_errors=True) == []
