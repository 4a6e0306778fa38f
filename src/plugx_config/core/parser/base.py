# src/plugx_config/core/parser/base.py
"""
Contrato canônico de Parser e despacho por formato/conteúdo.

Um Parser transforma bytes crus em um valor de configuração (mapa/lista/escalar).
Parsers formam um conjunto aberto: novos formatos são registrados, nunca exigem
extensão de uma enumeração fechada.

Regras de despacho:
    - formato declarado → primeiro Parser cujo conjunto de formatos o contém
    - formato ausente   → primeiro Parser cujo `sniff` retorna True
    - nenhum candidato  → ParserNotFoundError

Invariantes:
    - A raiz de um valor interpretado é sempre um mapa (`dict`)
    - Falhas de parse nunca são soft
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Protocol, Sequence, Set, Tuple, Type, runtime_checkable

from ..exceptions import ContentParseError, ParserNotFoundError

Modifier = Callable[[bytes, Any], None]


@runtime_checkable
class Parser(Protocol):
    """
    Contrato mínimo de um Parser.

    Atributos obrigatórios:
        - name: nome legível do Parser (usado em diagnósticos)

    A conformidade é verificada por duck typing (`@runtime_checkable`);
    herdar de `BaseParser` é opcional.
    """
    name: str

    def supported_formats(self) -> Set[str]:
        ...

    def sniff(self, data: bytes) -> Optional[bool]:
        """True/False quando reconhece (ou não) o conteúdo; None quando não sabe dizer."""
        ...

    def parse(self, data: bytes) -> Any:
        ...


def canonical_format(parser: Parser) -> str:
    method = getattr(parser, "canonical_format", None)
    if callable(method):
        return method()
    return sorted(parser.supported_formats())[0]


def sniff_parser(parsers: Sequence[Parser], data: bytes) -> Optional[Parser]:
    for parser in parsers:
        if parser.sniff(data) is True:
            return parser
    return None


def find_parser(parsers: Sequence[Parser], data: bytes, format: Optional[str] = None) -> Parser:
    if format is not None:
        for parser in parsers:
            if format in parser.supported_formats():
                return parser
        raise ParserNotFoundError(
            message=f"Could not find a parser for format `{format}`",
            details={"format": format, "parsers": [p.name for p in parsers]},
            hint="Registre um Parser que suporte o formato ou corrija a extensão do arquivo",
        )

    parser = sniff_parser(parsers, data)
    if parser is None:
        raise ParserNotFoundError(
            message="Could not detect the format of configuration contents",
            details={"format": None, "parsers": [p.name for p in parsers]},
            hint="Declare o formato explicitamente no Loader",
        )
    return parser


class BaseParser:
    """
    Base opcional para Parsers baseados em uma biblioteca de decodificação.

    Subclasses definem `name`, `formats` (o primeiro é o canônico),
    `decode_errors` (exceções da biblioteca) e `_load(data)`.

    Um `modifier(data, value)` opcional pode ajustar o valor interpretado
    in-place após um parse bem-sucedido.
    """

    name: str = "base"
    formats: Tuple[str, ...] = ()
    decode_errors: Tuple[Type[BaseException], ...] = (ValueError,)

    def __init__(self, *, modifier: Optional[Modifier] = None):
        self.modifier = modifier

    def supported_formats(self) -> Set[str]:
        return set(self.formats)

    def canonical_format(self) -> str:
        return self.formats[0]

    def _load(self, data: bytes) -> Any:
        raise NotImplementedError

    def _error(self, message: str, cause: Optional[BaseException] = None) -> ContentParseError:
        return ContentParseError(
            message=f"{self.name} parser with supported formats {list(self.formats)} could not parse contents: {message}",
            details={"parser": self.name, "formats": list(self.formats)},
            cause=cause,
        )

    def sniff(self, data: bytes) -> Optional[bool]:
        try:
            value = self._load(data)
        except self.decode_errors:
            return False
        return value is None or isinstance(value, dict)

    def parse(self, data: bytes) -> Any:
        try:
            value = self._load(data)
        except ContentParseError:
            raise
        except self.decode_errors as exc:
            raise self._error(str(exc), exc) from exc

        if value is None:
            value = {}
        if not isinstance(value, dict):
            raise self._error(f"root must be a mapping, got {type(value).__name__}")

        if self.modifier is not None:
            try:
                self.modifier(data, value)
            except ContentParseError:
                raise
            except Exception as exc:
                raise self._error(f"modifier failed: {exc}", exc) from exc
        return value

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(formats={list(self.formats)})"


def formats_of(parsers: Iterable[Parser]) -> Set[str]:
    result: Set[str] = set()
    for parser in parsers:
        result |= set(parser.supported_formats())
    return result
