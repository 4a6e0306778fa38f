# src/plugx_config/core/validation.py
"""
Contrato de schema consumido pelo estágio Validate.

O plugx-config não define uma linguagem de schema: qualquer objeto com
`validate(value, position)` serve. A validação acontece **in-place**; o
schema pode normalizar o valor (ex.: preencher defaults).

Referência incluída:
    - `JsonSchema`: adaptador para JSON Schema (Draft 7) via `jsonschema`

Invariantes:
    - Falhas são sempre `ValidationError` (hard) com `plugin` e `path`
    - A primeira falha (em ordem de caminho) é a reportada
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Protocol, runtime_checkable

from jsonschema import Draft7Validator

from .exceptions import ValidationError
from .position import Position


@runtime_checkable
class Schema(Protocol):
    def validate(self, value: Any, position: Position) -> None:
        ...


class JsonSchema:
    """
    Schema JSON (Draft 7) aplicado ao valor mesclado de um plugin.

    Com `fill_defaults=True`, propriedades ausentes que declaram `default`
    são preenchidas (recursivamente em objetos) antes da validação.
    """

    def __init__(self, schema: Dict[str, Any], *, fill_defaults: bool = False):
        Draft7Validator.check_schema(schema)
        self.schema = schema
        self.fill_defaults = fill_defaults
        self._validator = Draft7Validator(schema)

    def validate(self, value: Any, position: Position) -> None:
        if self.fill_defaults:
            _fill_defaults(value, self.schema)

        errors = sorted(
            self._validator.iter_errors(value),
            key=lambda error: [str(part) for part in error.absolute_path],
        )
        if not errors:
            return

        first = errors[0]
        path = position.extend(first.absolute_path)
        raise ValidationError(
            message=f"Invalid configuration at `{path}`: {first.message}",
            details={
                "plugin": position.keys[0] if position.keys else None,
                "path": str(path),
                "validator": first.validator,
                "errors": len(errors),
            },
            hint="Corrija o valor nas sources do plugin ou ajuste o schema",
            cause=first,
        )


def _fill_defaults(value: Any, schema: Dict[str, Any]) -> None:
    if not isinstance(value, dict):
        return
    for key, subschema in (schema.get("properties") or {}).items():
        if not isinstance(subschema, dict):
            continue
        if key not in value and "default" in subschema:
            value[key] = deepcopy(subschema["default"])
        if key in value:
            _fill_defaults(value[key], subschema)
