"""
Engine de reordenação do pipeline (drag-and-drop).

Traduz um único gesto (card arrastado `active_id`, alvo `over_id`) em um
conjunto consistente de linhas `(id, status, position)` e as grava via
`persist_positions`.

Política de posições (v1):
- Toda coluna afetada é renumerada de forma contígua 0..N-1
- Movimento entre colunas regrava as duas colunas (origem primeiro)
- Movimento na mesma coluna regrava a coluna inteira
- No-op (mesmo índice, ou card ausente da própria coluna) não grava nada

Erros de entrada (card inexistente, alvo sem status) são levantados antes
de qualquer escrita. Erros de persistência são propagados sem rollback.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, List, Optional, Sequence

from crm_pipeline.core.config.settings import ReorderSettings
from crm_pipeline.core.errors import reorder_active_not_found, reorder_target_unresolved
from crm_pipeline.core.exceptions import ActiveItemNotFound, TargetStatusUnresolved
from crm_pipeline.core.pipeline.context import STEP_COMPUTE, ReorderContext
from crm_pipeline.core.pipeline.types import (
    MoveKind,
    PipelineItem,
    PositionUpdate,
    ReorderOutcome,
    position_value,
)
from crm_pipeline.persistence.store import StoragePort, persist_positions

ColumnPredicate = Callable[[str], bool]
StatusResolver = Callable[[str], Optional[str]]


def build_position_updates(ids: Sequence[str], status: str) -> List[PositionUpdate]:
    """Atribui posições 0..N-1 aos ids, na ordem recebida."""
    return [PositionUpdate(id=item_id, status=status, position=idx) for idx, item_id in enumerate(ids)]


def _sorted_column(items: Sequence[PipelineItem], status: str) -> List[PipelineItem]:
    # sorted() é estável: empates mantêm a ordem do snapshot
    return sorted((it for it in items if it.status == status), key=lambda it: position_value(it.position))


def _index_of(column: Sequence[PipelineItem], item_id: str) -> int:
    for idx, item in enumerate(column):
        if item.id == item_id:
            return idx
    return -1


def _warn_colliding_positions(ctx: ReorderContext, column: Sequence[PipelineItem], status: str) -> None:
    seen: Dict[float, str] = {}
    for item in column:
        value = position_value(item.position)
        if value in seen:
            ctx.add_warning(
                step_id=STEP_COMPUTE,
                message=(
                    f"posição {item.position!r} repetida na coluna '{status}' "
                    f"({seen[value]}, {item.id}); desempate pela ordem do snapshot"
                ),
            )
        else:
            seen[value] = item.id


def _clamp(value: int, upper: int) -> int:
    return max(0, min(value, upper))


def compute_reorder(
    *,
    all_items: Sequence[PipelineItem],
    active_id: str,
    over_id: str,
    is_column_id: ColumnPredicate,
    resolve_target_status: StatusResolver,
    ctx: Optional[ReorderContext] = None,
) -> ReorderOutcome:
    """
    Calcula as novas posições de um gesto, sem I/O.

    Args:
        all_items: snapshot completo do pipeline.
        active_id: id do card arrastado.
        over_id: id do alvo (coluna ou outro card).
        is_column_id: identifica ids de coluna.
        resolve_target_status: resolve o status de destino a partir de `over_id`.
        ctx: contexto opcional para logs estruturados.

    Returns:
        ReorderOutcome: updates na ordem de escrita (`chunks_written=0`).

    Raises:
        ActiveItemNotFound: `active_id` não está no snapshot.
        TargetStatusUnresolved: `over_id` não resolve para um status.
    """
    active = next((it for it in all_items if it.id == active_id), None)
    if active is None:
        raise ActiveItemNotFound.from_payload(
            reorder_active_not_found(active_id=active_id, snapshot_size=len(all_items))
        )

    from_status = active.status
    to_status = resolve_target_status(over_id)
    if not to_status:
        raise TargetStatusUnresolved.from_payload(
            reorder_target_unresolved(over_id=over_id, active_id=active_id)
        )

    from_list = _sorted_column(all_items, from_status)
    to_list = from_list if to_status == from_status else _sorted_column(all_items, to_status)

    if ctx is not None:
        _warn_colliding_positions(ctx, from_list, from_status)
        if to_list is not from_list:
            _warn_colliding_positions(ctx, to_list, to_status)

    old_index = _index_of(from_list, active_id)
    over_index = -1 if is_column_id(over_id) else _index_of(to_list, over_id)
    new_index = len(to_list) if over_index == -1 else over_index

    if from_status != to_status:
        from_ids = [it.id for it in from_list if it.id != active_id]
        to_ids = [it.id for it in to_list]
        to_ids.insert(_clamp(new_index, len(to_ids)), active_id)

        updates = build_position_updates(from_ids, from_status) + build_position_updates(to_ids, to_status)
        outcome = ReorderOutcome(
            kind=MoveKind.CROSS_COLUMN,
            from_status=from_status,
            to_status=to_status,
            updates=updates,
        )
        _log_outcome(ctx, outcome, old_index=old_index, new_index=new_index)
        return outcome

    if old_index == -1 or new_index == old_index:
        outcome = ReorderOutcome(kind=MoveKind.NOOP, from_status=from_status, to_status=to_status)
        if ctx is not None:
            ctx.log(
                step_id=STEP_COMPUTE,
                level="info",
                message="reorder is a no-op",
                reason="active not in column" if old_index == -1 else "index unchanged",
                active_id=active_id,
                status=from_status,
                index=old_index,
            )
        return outcome

    ids = [it.id for it in from_list]
    ids.pop(old_index)
    ids.insert(_clamp(new_index, len(ids)), active_id)

    outcome = ReorderOutcome(
        kind=MoveKind.SAME_COLUMN,
        from_status=from_status,
        to_status=to_status,
        updates=build_position_updates(ids, from_status),
    )
    _log_outcome(ctx, outcome, old_index=old_index, new_index=new_index)
    return outcome


def _log_outcome(ctx: Optional[ReorderContext], outcome: ReorderOutcome, *, old_index: int, new_index: int) -> None:
    if ctx is None:
        return
    ctx.log(
        step_id=STEP_COMPUTE,
        level="info",
        message="reorder computed",
        kind=outcome.kind.value,
        from_status=outcome.from_status,
        to_status=outcome.to_status,
        old_index=old_index,
        new_index=new_index,
        rows=len(outcome.updates),
    )


def handle_reorder(
    *,
    all_items: Sequence[PipelineItem],
    active_id: str,
    over_id: str,
    is_column_id: ColumnPredicate,
    resolve_target_status: StatusResolver,
    store: StoragePort,
    settings: Optional[ReorderSettings] = None,
    ctx: Optional[ReorderContext] = None,
) -> ReorderOutcome:
    """
    Calcula e persiste a nova ordenação de um gesto de drag-and-drop.

    Não muta o snapshot recebido nem estado local da UI: após uma falha o
    chamador deve recarregar o snapshot do backing store.

    Returns:
        ReorderOutcome: resultado com `chunks_written` preenchido.

    Raises:
        ActiveItemNotFound: antes de qualquer escrita.
        TargetStatusUnresolved: antes de qualquer escrita.
        PersistenceChunkError: no primeiro chunk rejeitado (sem rollback).
    """
    settings = settings or ReorderSettings()

    outcome = compute_reorder(
        all_items=all_items,
        active_id=active_id,
        over_id=over_id,
        is_column_id=is_column_id,
        resolve_target_status=resolve_target_status,
        ctx=ctx,
    )
    if outcome.is_noop:
        return outcome

    written = persist_positions(
        outcome.updates,
        store,
        chunk_size=settings.chunk_size,
        conflict_key=settings.conflict_key,
        strip_fields=settings.strip_fields,
        ctx=ctx,
    )
    return replace(outcome, chunks_written=written)


__all__ = ["build_position_updates", "compute_reorder", "handle_reorder"]
