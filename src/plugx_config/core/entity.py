# src/plugx_config/core/entity.py
"""
Entidade de configuração (ConfigurationEntity).

Uma entidade representa **um** fragmento de configuração de **um** plugin,
descoberto em **uma** source por um Loader.

Ciclo de vida:
    1. Criada por um Loader durante o estágio Load
    2. `contents` e `format` anexados na criação (ou logo depois)
    3. `parsed` anexado durante o estágio Parse
    4. Somente leitura durante o estágio Merge
    5. Opcionalmente "esquecida" (`forget_contents` / `forget_parsed`)

Invariantes:
    - `plugin_name` é sempre não vazio e minúsculo
    - `parsed` só é definido após parse bem-sucedido de `contents`, ou é
      um mapa vazio quando `contents` está ausente
    - Quando `format` está definido, ele é autoritativo (sem detecção)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from .parser.base import canonical_format, find_parser, sniff_parser
from .source import Source


@dataclass
class ConfigurationEntity:
    source: Source
    plugin_name: str
    loader_name: str
    format: Optional[str] = None
    contents: Optional[Union[str, bytes]] = None
    parsed: Optional[Any] = None

    def __post_init__(self) -> None:
        if not isinstance(self.plugin_name, str) or not self.plugin_name.strip():
            raise ValueError("plugin_name must be a non-empty string")
        if self.plugin_name != self.plugin_name.lower():
            raise ValueError(f"plugin_name must be lowercase: {self.plugin_name!r}")
        if self.format is not None:
            self.format = self.format.lower()

    def data(self) -> Optional[bytes]:
        if self.contents is None:
            return None
        if isinstance(self.contents, bytes):
            return self.contents
        return self.contents.encode("utf-8")

    def guess_format(self, parsers: Sequence[Any]) -> Optional[str]:
        """Formato canônico do primeiro Parser cujo `sniff` reconhece o conteúdo."""
        data = self.data()
        if data is None:
            return None
        parser = sniff_parser(parsers, data)
        if parser is None:
            return None
        return canonical_format(parser)

    def parse_contents(self, parsers: Sequence[Any]) -> Any:
        """
        Interpreta `contents` com o Parser adequado.

        Quando o formato é detectado por `sniff`, ele passa a ser registrado
        na entidade (e torna-se autoritativo).

        Regras de despacho:
            - sem `contents` → mapa vazio ("nenhuma configuração" é válido)
            - `format` definido → primeiro Parser que suporta o formato
            - caso contrário → primeiro Parser cujo `sniff` retorna True

        Raises:
            ParserNotFoundError: se nenhum Parser for adequado.
            ContentParseError: se o Parser rejeitar o conteúdo.
        """
        data = self.data()
        if data is None:
            return {}
        parser = find_parser(parsers, data, self.format)
        value = parser.parse(data)
        if self.format is None:
            self.format = canonical_format(parser)
        return value

    def parse_contents_mut(self, parsers: Sequence[Any]) -> Any:
        self.parsed = self.parse_contents(parsers)
        return self.parsed

    def forget_contents(self) -> None:
        self.contents = None

    def forget_parsed(self) -> None:
        self.parsed = None

    def __str__(self) -> str:
        return f"Configuration entity for {self.plugin_name}"
