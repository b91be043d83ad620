# tests/core/engine/test_reorder_guardrails.py
"""
Testes dos guardrails do gesto e da escrita em chunks.

Os testes asseguram que:
- card inexistente ou alvo sem status falham antes de qualquer escrita
- colunas grandes são gravadas em chunks seriais de `chunk_size`
- falha em um chunk interrompe os seguintes, sem rollback
"""

import pytest

from crm_pipeline.core.config.settings import ReorderSettings
from crm_pipeline.core.engine.reorder import build_position_updates, handle_reorder
from crm_pipeline.core.errors import (
    PERSISTENCE_CHUNK_FAILED,
    REORDER_ACTIVE_NOT_FOUND,
    REORDER_TARGET_UNRESOLVED,
)
from crm_pipeline.core.exceptions import (
    ActiveItemNotFound,
    PersistenceChunkError,
    TargetStatusUnresolved,
)
from crm_pipeline.core.pipeline.columns import PipelineColumns
from crm_pipeline.core.pipeline.types import PipelineItem
from crm_pipeline.persistence.memory_store import InMemoryStore, StoreWriteError


def _run(items, active_id, over_id, columns, store, **kwargs):
    is_column_id, resolve = columns.resolvers(items)
    return handle_reorder(
        all_items=items,
        active_id=active_id,
        over_id=over_id,
        is_column_id=is_column_id,
        resolve_target_status=resolve,
        store=store,
        **kwargs,
    )


def _big_column(n, status="Orçamento"):
    return [PipelineItem(f"p{i:03d}", status, i) for i in range(n)]


def test_unknown_active_id_raises_without_writes(small_board, columns, memory_store):
    with pytest.raises(ActiveItemNotFound) as excinfo:
        _run(small_board, "zzz", "Orçamento", columns, memory_store)

    assert excinfo.value.error_type == REORDER_ACTIVE_NOT_FOUND
    assert excinfo.value.details == {"active_id": "zzz", "snapshot_size": 6}
    assert memory_store.calls == []


def test_unresolved_target_raises_without_writes(small_board, columns, memory_store):
    with pytest.raises(TargetStatusUnresolved) as excinfo:
        _run(small_board, "a", "ghost-card", columns, memory_store)

    assert excinfo.value.error_type == REORDER_TARGET_UNRESOLVED
    assert excinfo.value.details["over_id"] == "ghost-card"
    assert memory_store.calls == []


def test_custom_resolver_returning_empty_string_is_unresolved(small_board, memory_store):
    with pytest.raises(TargetStatusUnresolved):
        handle_reorder(
            all_items=small_board,
            active_id="a",
            over_id="X",
            is_column_id=lambda i: i == "X",
            resolve_target_status=lambda over: "",
            store=memory_store,
        )
    assert memory_store.calls == []


def test_card_with_status_outside_board_can_still_move(memory_store):
    columns = PipelineColumns(["X", "Y"])
    items = [PipelineItem("a", "Legacy", 0), PipelineItem("b", "Y", 0)]

    _run(items, "a", "b", columns, memory_store)

    assert memory_store.column("Y") == ["a", "b"]


def test_fifty_one_rows_make_two_chunks(memory_store):
    columns = PipelineColumns(["Orçamento"])
    items = _big_column(51)

    outcome = _run(items, "p050", "p000", columns, memory_store)

    assert outcome.chunks_written == 2
    assert [len(c) for c in memory_store.calls] == [50, 1]
    assert memory_store.column("Orçamento")[:2] == ["p050", "p000"]


def test_chunk_size_from_settings(memory_store):
    columns = PipelineColumns(["Orçamento"])
    items = _big_column(10)

    outcome = _run(items, "p000", "Orçamento", columns, memory_store, settings=ReorderSettings(chunk_size=4))

    assert [len(c) for c in memory_store.calls] == [4, 4, 2]
    assert outcome.chunks_written == 3


def test_second_chunk_failure_keeps_first_chunk(reorder_ctx):
    columns = PipelineColumns(["Orçamento"])
    items = _big_column(120)
    store = InMemoryStore(fail_on_call=2)

    with pytest.raises(PersistenceChunkError) as excinfo:
        _run(items, "p119", "p000", columns, store, ctx=reorder_ctx)

    err = excinfo.value
    assert err.error_type == PERSISTENCE_CHUNK_FAILED
    assert err.details["chunk_index"] == 1
    assert err.details["chunks_written"] == 1
    assert err.details["exc_type"] == "StoreWriteError"
    assert len(err.details["chunk_ids"]) == 50
    assert isinstance(err.__cause__, StoreWriteError)

    # primeiro chunk aplicado, terceiro nunca enviado
    assert len(store.calls) == 2
    assert len(store.rows()) == 50

    failed = [ev for ev in reorder_ctx.events_for("reorder.persist") if ev["level"] == "error"]
    assert len(failed) == 1
    assert failed[0]["chunk_index"] == 1


def test_build_position_updates_is_contiguous():
    updates = build_position_updates(["x", "y", "z"], "Confirmado")
    assert [(u.id, u.status, u.position) for u in updates] == [
        ("x", "Confirmado", 0),
        ("y", "Confirmado", 1),
        ("z", "Confirmado", 2),
    ]
    assert build_position_updates([], "Confirmado") == []


def test_colliding_positions_emit_warning(reorder_ctx, memory_store):
    columns = PipelineColumns(["X", "Y"])
    items = [
        PipelineItem("a", "X", 0),
        PipelineItem("b", "X", 0),
        PipelineItem("c", "Y", 0),
        PipelineItem("d", "Y", 1),
    ]

    _run(items, "c", "b", columns, memory_store, ctx=reorder_ctx)

    warnings = reorder_ctx.warnings["reorder.compute"]
    assert len(warnings) == 1
    assert "'X'" in warnings[0]
    assert memory_store.column("X") == ["a", "c", "b"]


def test_distinct_positions_emit_no_warning(small_board, columns, memory_store, reorder_ctx):
    _run(small_board, "a", "d", columns, memory_store, ctx=reorder_ctx)
    assert reorder_ctx.warnings == {}
