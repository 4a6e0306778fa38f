# src/plugx_config/core/pipeline/stages.py
"""
Estágios do pipeline de resolução (Load → Parse → Merge → Validate).

Cada estágio é uma função que recebe explicitamente seu estado de entrada e
o `ResolutionContext`, e devolve (ou preenche) o estado de saída. A
orquestração e a política de memória vivem em `Configuration`.

Princípios fundamentais:
    - Execução estritamente sequencial, sem paralelismo
    - Fail-fast: o primeiro erro hard interrompe o estágio
    - Nenhuma nova tentativa automática

Invariantes:
    - A ordem de entidades por plugin é a ordem de registro das sources
    - Falhas de Parse e Validate nunca são soft
    - O Merge nunca muta as entidades nem os valores interpretados

Limites explícitos:
    - Não decide quais sources existem (isso é papel do registry)
    - Não interpreta a query string das sources
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from ..config.merge import deep_merge
from ..entity import ConfigurationEntity
from ..exceptions import ConfigurationError, ParseError, PluginParseError, ValidationError
from ..position import Position
from .context import ResolutionContext
from .registry import SourceRegistry
from .types import Stage, StageSummary

PluginState = Dict[str, List[ConfigurationEntity]]


def _summary(ctx: Optional[ResolutionContext], summary: StageSummary) -> StageSummary:
    if ctx is not None:
        ctx.log(stage=summary.stage, level="info", message="stage finished", summary=summary.to_dict())
    return summary


def load_stage(
    registry: SourceRegistry,
    *,
    whitelist: Optional[Set[str]] = None,
    skip_soft_errors: bool = False,
    ctx: Optional[ResolutionContext] = None,
) -> PluginState:
    """
    Executa todos os Loaders, em ordem de registro das sources.

    Um erro que se declara soft é tratado como resultado vazio apenas com
    `skip_soft_errors`; qualquer outro erro interrompe o estágio e as sources
    seguintes não são tentadas.
    """
    state: PluginState = {}
    skipped = 0
    for source in registry.sources():
        loader = registry.resolve_loader(source)
        try:
            loaded = loader.load(source, whitelist, skip_soft_errors, ctx=ctx)
        except ConfigurationError as exc:
            if skip_soft_errors and exc.is_skippable():
                skipped += 1
                if ctx is not None:
                    ctx.log(
                        stage=Stage.LOAD,
                        level="info",
                        message=f"skipped soft error: {exc}",
                        skip_error=True,
                        loader=loader.name,
                        source=str(source),
                        error_type=exc.code,
                    )
                continue
            raise

        for plugin_name, entity in loaded:
            if whitelist is not None and plugin_name not in whitelist:
                continue
            state.setdefault(plugin_name, []).append(entity)

        if ctx is not None:
            ctx.log(
                stage=Stage.LOAD,
                level="debug",
                message="source loaded",
                loader=loader.name,
                source=str(source),
                plugins=sorted({plugin_name for plugin_name, _ in loaded}),
            )

    _summary(
        ctx,
        StageSummary(
            stage=Stage.LOAD,
            plugins=len(state),
            entities=sum(len(entities) for entities in state.values()),
            metrics={"sources": len(registry), "skipped_sources": skipped},
        ),
    )
    return state


def parse_stage(
    state: PluginState,
    parsers: Sequence[Any],
    *,
    ctx: Optional[ResolutionContext] = None,
) -> PluginState:
    """Interpreta toda entidade ainda sem `parsed`. Falhas são sempre hard."""
    parsed = 0
    for plugin_name, entities in state.items():
        for entity in entities:
            if entity.parsed is not None:
                continue
            try:
                entity.parse_contents_mut(parsers)
            except ParseError as exc:
                raise _plugin_parse_error(plugin_name, entity, exc, exc.details.get("parser"), exc.hint) from exc
            except Exception as exc:
                # Parsers customizados podem levantar exceções arbitrárias
                raise _plugin_parse_error(plugin_name, entity, exc, None, None) from exc
            parsed += 1

    _summary(
        ctx,
        StageSummary(stage=Stage.PARSE, plugins=len(state), entities=parsed),
    )
    return state


def _plugin_parse_error(
    plugin_name: str,
    entity: ConfigurationEntity,
    cause: BaseException,
    parser: Optional[str],
    hint: Optional[str],
) -> PluginParseError:
    return PluginParseError(
        message=f"Could not parse configuration of plugin `{plugin_name}` from `{entity.source}`: {cause}",
        details={
            "plugin": plugin_name,
            "source": str(entity.source),
            "loader": entity.loader_name,
            "format": entity.format,
            "parser": parser,
        },
        hint=hint,
        cause=cause,
    )


def merge_stage(
    state: PluginState,
    *,
    ctx: Optional[ResolutionContext] = None,
) -> Dict[str, Any]:
    """
    Combina, por plugin, os fragmentos interpretados em ordem de registro.

    Entidades sem `parsed` são ignoradas (não contam como mapa vazio). O
    resultado é sempre recalculado por inteiro.
    """
    merged: Dict[str, Any] = {}
    contributions = 0
    for plugin_name, entities in state.items():
        value: Any = {}
        for entity in entities:
            if entity.parsed is None:
                continue
            contributions += 1
            value = deep_merge(
                value,
                entity.parsed,
                position=Position((plugin_name,)),
                source_position=Position((str(entity.source),)),
                trace=_merge_trace(ctx, plugin_name) if ctx is not None else None,
            )
        merged[plugin_name] = value

    _summary(
        ctx,
        StageSummary(stage=Stage.MERGE, plugins=len(merged), entities=contributions),
    )
    return merged


def _merge_trace(ctx: ResolutionContext, plugin_name: str):
    def trace(position: Position, source_position: Position, old: Any, new: Any) -> None:
        ctx.log(
            stage=Stage.MERGE,
            level="debug",
            message="value overridden",
            plugin=plugin_name,
            path=str(position),
            source_path=str(source_position),
        )

    return trace


def validate_stage(
    merged: Dict[str, Any],
    schemas: Mapping[str, Any],
    *,
    ctx: Optional[ResolutionContext] = None,
) -> Dict[str, Any]:
    """
    Valida, in-place, cada plugin com schema declarado.

    Plugins sem schema passam intactos. A primeira falha interrompe o estágio.
    """
    validated: List[str] = []
    for plugin_name in merged:
        schema = schemas.get(plugin_name)
        if schema is None:
            continue
        position = Position((plugin_name,))
        try:
            schema.validate(merged[plugin_name], position)
        except ValidationError as exc:
            if exc.plugin is None:
                raise ValidationError(
                    message=exc.message,
                    details={**exc.details, "plugin": plugin_name},
                    hint=exc.hint,
                    cause=exc.cause,
                ) from exc
            raise
        except Exception as exc:
            raise ValidationError(
                message=f"Could not validate configuration of plugin `{plugin_name}`: {exc}",
                details={"plugin": plugin_name, "path": str(position)},
                cause=exc,
            ) from exc
        validated.append(plugin_name)
        if ctx is not None:
            ctx.log(stage=Stage.VALIDATE, level="debug", message="plugin validated", plugin=plugin_name)

    _summary(
        ctx,
        StageSummary(stage=Stage.VALIDATE, plugins=len(validated), metrics={"validated": validated}),
    )
    return merged
