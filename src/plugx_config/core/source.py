# src/plugx_config/core/source.py
"""
Localizador canônico de origem de configuração (Source).

Uma `Source` identifica de onde fragmentos de configuração de plugins são
carregados, no formato `scheme://authority/path?query`.

Responsabilidades do módulo:
    - Interpretar localizadores textuais em uma estrutura imutável
    - Expor o `scheme` usado para despacho de Loaders
    - Expor a query string como opções cruas (nunca interpretadas aqui)

Invariantes:
    - Igualdade e hash são estruturais
    - O `scheme` é sempre não vazio e minúsculo
    - Nenhuma opção da query é validada neste módulo (cada Loader valida as suas)

Limites explícitos:
    - Não resolve caminhos de filesystem
    - Não acessa rede nem variáveis de ambiente
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict
from urllib.parse import parse_qsl, urlsplit, urlunsplit


@dataclass(frozen=True)
class Source:
    """
    Localizador imutável de uma origem de configuração.

    Campos:
    - scheme: seleciona o Loader (ex.: `env`, `fs`)
    - netloc: autoridade do localizador (pode ser vazia)
    - path: caminho (pode ser vazio)
    - query: query string crua, interpretada apenas pelo Loader
    """

    scheme: str
    netloc: str = ""
    path: str = ""
    query: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.scheme, str) or not self.scheme.strip():
            raise ValueError("source scheme must be a non-empty string")
        object.__setattr__(self, "scheme", self.scheme.strip().lower())

    @classmethod
    def parse(cls, text: str) -> "Source":
        if isinstance(text, Source):
            return text
        if not isinstance(text, str) or "://" not in text:
            raise ValueError(f"invalid source locator: {text!r}")
        parts = urlsplit(text)
        return cls(
            scheme=parts.scheme,
            netloc=parts.netloc,
            path=parts.path,
            query=parts.query,
        )

    def options(self) -> Dict[str, str]:
        # valores repetidos: o último vence
        return dict(parse_qsl(self.query, keep_blank_values=True))

    def with_path(self, path: str) -> "Source":
        return replace(self, path=path)

    def without_query(self) -> "Source":
        return replace(self, query="")

    def __str__(self) -> str:
        rendered = urlunsplit((self.scheme, self.netloc, self.path, self.query, ""))
        # urlunsplit omite "//" quando netloc e path são vazios
        if "://" not in rendered:
            rendered = rendered.replace(f"{self.scheme}:", f"{self.scheme}://", 1)
        return rendered
