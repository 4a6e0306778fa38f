# tests/core/pipeline/test_validate_stage.py
"""
Testes do estágio Validate.

Os testes asseguram que:
- apenas plugins com schema são validados
- a validação é in-place (o schema pode normalizar o valor)
- falhas são ValidationError com `plugin` preenchido, sempre hard
- exceções arbitrárias do schema viram ValidationError
"""

import pytest

try:
    from plugx_config.core.exceptions import ValidationError
    from plugx_config.core.pipeline.stages import validate_stage
except Exception as e:  # noqa: BLE001
    validate_stage = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing Validate stage API. Implement:\n"
            "- src/plugx_config/core/pipeline/stages.py (validate_stage)\n"
            f"Import error: {_IMPORT_ERR}"
        )


class _RecordingSchema:
    def __init__(self, error=None):
        self.error = error
        self.seen = []

    def validate(self, value, position):
        self.seen.append((dict(value), str(position)))
        if self.error is not None:
            raise self.error
        value.setdefault("normalized", True)


def test_only_plugins_with_schema_are_validated(ctx):
    _require_imports()
    schema = _RecordingSchema()
    merged = {"foo": {"a": 1}, "bar": {"b": 2}}

    out = validate_stage(merged, {"foo": schema, "other": _RecordingSchema()}, ctx=ctx)

    assert out is merged
    assert schema.seen == [({"a": 1}, "foo")]
    assert merged == {"foo": {"a": 1, "normalized": True}, "bar": {"b": 2}}
    assert [e["plugin"] for e in ctx.find(stage="validate", level="debug")] == ["foo"]


def test_validation_error_gets_plugin_name():
    _require_imports()
    schema = _RecordingSchema(error=ValidationError(message="bad", details={"path": "foo.a"}))

    with pytest.raises(ValidationError) as info:
        validate_stage({"foo": {"a": 1}}, {"foo": schema})

    assert info.value.plugin == "foo"
    assert info.value.path == "foo.a"
    assert info.value.is_skippable() is False


def test_arbitrary_schema_exception_is_wrapped():
    _require_imports()
    schema = _RecordingSchema(error=KeyError("missing"))

    with pytest.raises(ValidationError) as info:
        validate_stage({"foo": {}}, {"foo": schema})

    assert info.value.plugin == "foo"
    assert isinstance(info.value.cause, KeyError)


def test_first_failure_stops_the_stage():
    _require_imports()
    failing = _RecordingSchema(error=ValidationError(message="bad", skippable=True))
    later = _RecordingSchema()

    with pytest.raises(ValidationError):
        validate_stage({"foo": {}, "bar": {}}, {"foo": failing, "bar": later})
    assert later.seen == []
