"""Rank esparso entre vizinhos e ordenação canônica do snapshot.

Utilitários usados pela movimentação via RPC do servidor, onde cada card
guarda um `pipeline_rank` com grandes saltos entre vizinhos: inserir um
card entre dois outros grava apenas uma linha (a média dos vizinhos).

O caminho de escrita do engine (`handle_reorder`) continua sendo a
renumeração contígua; estes helpers não são usados por ele.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from crm_pipeline.core.pipeline.types import POSITION_COLUMN, STATUS_COLUMN, coerce_position, position_value

RANK_STEP = 1_000_000
RANK_COLUMN = "pipeline_rank"


def compute_rank(left: Optional[int] = None, right: Optional[int] = None) -> int:
    """Rank para um card entre `left` e `right` (None = sem vizinho)."""
    if left is None and right is None:
        return RANK_STEP
    if left is None:
        return int(right) - RANK_STEP
    if right is None:
        return int(left) + RANK_STEP
    total = int(left) + int(right)
    # média truncada em direção a zero (também para ranks negativos)
    return -(-total // 2) if total < 0 else total // 2


def rank_between(ranks: Sequence[int], index: int) -> int:
    """Rank para inserir na posição `index` de uma coluna com `ranks` ordenados."""
    index = max(0, min(index, len(ranks)))
    left = ranks[index - 1] if index > 0 else None
    right = ranks[index] if index < len(ranks) else None
    return compute_rank(left, right)


def _rank_of(row: Mapping[str, Any]) -> float:
    if row.get(RANK_COLUMN) is not None:
        return coerce_position(row[RANK_COLUMN])
    return position_value(row.get(POSITION_COLUMN, row.get("position")))


def order_snapshot(rows: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Ordena linhas por status ↑, rank ↑ e `updated_at` ↓ (ausente por último).

    `updated_at` é comparado como string ISO-8601, como vem da API REST.
    """
    # sorts estáveis aplicados da chave menos significativa para a mais significativa
    with_ts = [dict(r) for r in rows if r.get("updated_at")]
    without_ts = [dict(r) for r in rows if not r.get("updated_at")]
    with_ts.sort(key=lambda r: str(r["updated_at"]), reverse=True)
    ordered = with_ts + without_ts
    ordered.sort(key=_rank_of)
    ordered.sort(key=lambda r: str(r.get(STATUS_COLUMN, r.get("status")) or ""))
    return ordered


__all__ = ["RANK_STEP", "compute_rank", "rank_between", "order_snapshot"]
