# src/crm_pipeline/core/engine/__init__.py
"""
Engine de reordenação do CRM Pipeline.

Componentes principais:
    - reorder → cálculo do gesto e gravação contígua 0..N-1 em chunks
    - rank    → rank esparso entre vizinhos e ordenação do snapshot

Invariantes:
    - Erros de entrada são levantados antes de qualquer escrita
    - No-ops não geram chamadas ao backing store
"""

from .rank import RANK_STEP, compute_rank, order_snapshot, rank_between
from .reorder import build_position_updates, compute_reorder, handle_reorder

__all__ = [
    "RANK_STEP",
    "compute_rank",
    "order_snapshot",
    "rank_between",
    "build_position_updates",
    "compute_reorder",
    "handle_reorder",
]
