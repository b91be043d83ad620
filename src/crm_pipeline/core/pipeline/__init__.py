# src/crm_pipeline/core/pipeline/__init__.py
"""
Estruturas do board do pipeline.

- **types**: `PipelineItem`, `PositionUpdate`, `MoveKind`, `ReorderOutcome`
- **columns**: `PipelineColumns` e os resolvedores do alvo de drop
- **context**: `ReorderContext` (logs estruturados e warnings por etapa)
"""

from .columns import DEFAULT_STATUSES, PipelineColumns
from .context import ReorderContext
from .types import MoveKind, PipelineItem, PositionUpdate, ReorderOutcome

__all__ = [
    "DEFAULT_STATUSES",
    "PipelineColumns",
    "ReorderContext",
    "MoveKind",
    "PipelineItem",
    "PositionUpdate",
    "ReorderOutcome",
]
