# tests/core/pipeline/test_reorder_context.py
"""
Testes do logging estruturado do ReorderContext.

Os testes asseguram que:
- todo evento carrega run_id, step_id, level, message e timestamp
- campos extras são preservados
- eventos são acumulados em ordem (append-only)
- warnings são agrupados por etapa
"""

from crm_pipeline.core.pipeline.context import STEP_COMPUTE, STEP_PERSIST, ReorderContext


def test_log_event_shape(reorder_ctx):
    reorder_ctx.log(step_id=STEP_COMPUTE, level="info", message="reorder computed", rows=3)

    assert len(reorder_ctx.events) == 1
    ev = reorder_ctx.events[0]
    for key in ("run_id", "step_id", "level", "message", "timestamp"):
        assert key in ev
    assert ev["run_id"] == "test-run"
    assert ev["rows"] == 3


def test_events_are_append_only_and_filterable(reorder_ctx):
    reorder_ctx.log(step_id=STEP_COMPUTE, level="info", message="first")
    reorder_ctx.log(step_id=STEP_PERSIST, level="info", message="second")
    reorder_ctx.log(step_id=STEP_PERSIST, level="error", message="third")

    assert [ev["message"] for ev in reorder_ctx.events] == ["first", "second", "third"]
    assert [ev["message"] for ev in reorder_ctx.events_for(STEP_PERSIST)] == ["second", "third"]


def test_warnings_grouped_by_step(reorder_ctx):
    reorder_ctx.add_warning(step_id=STEP_PERSIST, message="slow chunk")
    reorder_ctx.add_warning(step_id=STEP_PERSIST, message="retrying manually")

    assert reorder_ctx.warnings == {STEP_PERSIST: ["slow chunk", "retrying manually"]}


def test_default_run_id_is_unique():
    assert ReorderContext().run_id != ReorderContext().run_id
