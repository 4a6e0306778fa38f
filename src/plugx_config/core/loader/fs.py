# src/plugx_config/core/loader/fs.py
"""
Loader de filesystem (schemes `fs` e `file`).

Exemplos de source:

    fs:///etc/my-app                         # diretório: um arquivo por plugin
    fs:///etc/my-app/foo.yaml                # arquivo único
    fs://config?strip-slash=true             # caminho relativo ao cwd
    fs:///etc/my-app?soft-errors=not-found   # diretório ausente não é fatal

Convenção de nomes: `<plugin>.<formato>` (ex.: `foo.yaml` → plugin `foo`,
formato `yaml`), ambos minusculizados.

Classificação de falhas:
    - caminho inexistente              → NotFoundError (soft: `not-found` ou `all`)
    - caminho que não é arquivo/dir    → InvalidSourceError (soft: só `all`)
    - arquivo sem nome/formato válido  → InvalidSourceError (soft: só `all`)
    - sem permissão (caminho, listagem ou leitura) → NoAccessError
      (soft: `permission-denied` ou `all`)
    - outra falha de I/O ao listar ou ler, inclusive bytes fora de UTF-8
      → LoadFailedError (soft: variante do erro do SO ou `all`)
    - dois formatos para o mesmo plugin → DuplicateError (sempre hard)

Decisões arquiteturais:
    - Whitelist aplicada antes de qualquer leitura de conteúdo
    - Arquivos de um diretório são processados em ordem alfabética
    - Uma leitura pulada descarta apenas a entidade afetada
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..entity import ConfigurationEntity
from ..exceptions import DuplicateError, InvalidSourceError, LoadError, LoadFailedError, NoAccessError, NotFoundError
from ..pipeline.types import Stage
from ..soft_errors import SoftErrors
from ..source import Source
from .base import BaseLoader, LoadResult, Whitelist, allowed

NAME = "File"

NOT_FOUND = "not-found"
PERMISSION_DENIED = "permission-denied"


def os_error_variant(error: BaseException) -> Optional[str]:
    if isinstance(error, FileNotFoundError):
        return NOT_FOUND
    if isinstance(error, PermissionError):
        return PERMISSION_DENIED
    return None


def plugin_name_and_format(path: Path) -> Optional[Tuple[str, str]]:
    plugin = path.stem.lower()
    format = path.suffix[1:].lower()
    if not plugin or not format:
        return None
    return plugin, format


def read_error(error: BaseException, message: str, details: Dict[str, Any]) -> LoadError:
    """Classifica uma falha de I/O: permissão vira NoAccessError, o resto LoadFailedError."""
    if isinstance(error, PermissionError):
        return NoAccessError(message=message, details=details, cause=error)
    return LoadFailedError(message=message, details=details, cause=error)


class FsLoader(BaseLoader):
    name = NAME
    schemes = ("fs", "file")
    soft_error_names = (NOT_FOUND, PERMISSION_DENIED)

    def __init__(self, *, strip_slash: bool = False, soft_errors: Optional[SoftErrors] = None):
        super().__init__(soft_errors=soft_errors)
        self.strip_slash = strip_slash

    def path_of(self, source: Source) -> Path:
        strip_slash = self.bool_option(source, "strip-slash", self.strip_slash)
        raw = f"{source.netloc}{source.path}"
        if raw in ("", "/"):
            return Path(os.getcwd())
        if strip_slash and raw.startswith("/"):
            raw = raw[1:]
        return Path(raw)

    def _load(self, source: Source, whitelist: Whitelist, skip_soft_errors: bool, ctx: Any) -> LoadResult:
        policy = self.soft_errors_for(source)
        path = self.path_of(source)
        details = {"loader": self.name, "source": str(source), "path": str(path)}

        def soft(error, variant):
            self.skip_or_raise(error, policy=policy, variant=variant, skip_soft_errors=skip_soft_errors, ctx=ctx)
            return []

        try:
            is_dir = path.is_dir()
            is_file = not is_dir and path.is_file()
            exists = is_dir or is_file or path.exists()
        except PermissionError as exc:
            return soft(
                NoAccessError(
                    message=f"{self.name} configuration loader has no access to `{source}`",
                    details=details,
                    cause=exc,
                ),
                PERMISSION_DENIED,
            )

        if is_dir:
            try:
                files = self._directory_files(path, source, whitelist, ctx)
            except OSError as exc:
                return soft(
                    read_error(
                        exc,
                        f"{self.name} configuration loader could not load directory file list `{source}`",
                        {**details, "description": "load directory file list"},
                    ),
                    os_error_variant(exc),
                )
            self._check_duplicates(files, source)
        elif is_file:
            found = plugin_name_and_format(path)
            if found is None:
                return soft(
                    InvalidSourceError(
                        message=f"{self.name} configuration loader could not parse plugin name/format from `{source}`",
                        details=details,
                        hint="Use arquivos no formato <plugin>.<formato>",
                    ),
                    None,
                )
            plugin, format = found
            files = [(plugin, format, path)] if allowed(plugin, whitelist) else []
        elif exists:
            return soft(
                InvalidSourceError(
                    message=f"{self.name} configuration loader got a path that is not a directory or regular file `{source}`",
                    details=details,
                ),
                None,
            )
        else:
            return soft(
                NotFoundError(
                    message=f"{self.name} configuration loader could not find configuration `{source}`",
                    details=details,
                    hint="Crie o caminho ou adicione `soft-errors=not-found` à source",
                ),
                NOT_FOUND,
            )

        result: LoadResult = []
        for plugin, format, file_path in files:
            entity_source = source.with_path(str(file_path))
            try:
                contents = file_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                # bytes fora de UTF-8 contam como falha de leitura
                soft(
                    read_error(
                        exc,
                        f"{self.name} configuration loader could not read contents of file `{entity_source}`",
                        {
                            "loader": self.name,
                            "source": str(entity_source),
                            "plugin": plugin,
                            "path": str(file_path),
                            "description": "read contents of file",
                        },
                    ),
                    os_error_variant(exc),
                )
                continue
            entity = ConfigurationEntity(
                source=entity_source,
                plugin_name=plugin,
                loader_name=self.name,
                format=format,
                contents=contents,
            )
            if ctx is not None:
                ctx.log(
                    stage=Stage.LOAD,
                    level="debug",
                    message="read configuration file",
                    loader=self.name,
                    plugin=plugin,
                    path=str(file_path),
                )
            result.append((plugin, entity))
        return result

    def _directory_files(self, path: Path, source: Source, whitelist: Whitelist, ctx: Any) -> List[Tuple[str, str, Path]]:
        files: List[Tuple[str, str, Path]] = []
        for child in sorted(path.iterdir()):
            found = plugin_name_and_format(child)
            if found is None:
                if ctx is not None:
                    ctx.add_warning(
                        stage=Stage.LOAD,
                        message=f"could not parse plugin name/format from {child}",
                        loader=self.name,
                        path=str(child),
                    )
                continue
            plugin, format = found
            if not allowed(plugin, whitelist):
                continue
            if not child.is_file():
                if ctx is not None:
                    ctx.add_warning(
                        stage=Stage.LOAD,
                        message=f"path is not a regular file: {child}",
                        loader=self.name,
                        path=str(child),
                    )
                continue
            files.append((plugin, format, child))
        return files

    def _check_duplicates(self, files: List[Tuple[str, str, Path]], source: Source) -> None:
        seen: Dict[str, str] = {}
        for plugin, format, _ in files:
            if plugin in seen:
                raise DuplicateError(
                    message=(
                        f"{self.name} configuration loader found duplicate configurations "
                        f"`{source.without_query()}/{plugin}.({seen[plugin]}|{format})`"
                    ),
                    details={
                        "loader": self.name,
                        "source": str(source.without_query()),
                        "plugin": plugin,
                        "formats": [seen[plugin], format],
                    },
                    hint="Mantenha apenas um arquivo por plugin em cada diretório",
                )
            seen[plugin] = format
