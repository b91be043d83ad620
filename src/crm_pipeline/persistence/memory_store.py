"""Implementação em memória da `StoragePort`.

Usada em testes e em execuções locais sem backing store. Segue a
semântica `resolution=merge-duplicates` do upsert da tabela REST:
linhas com o mesmo valor de `on_conflict` são mescladas campo a campo.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Iterable, List, Mapping, Optional

from crm_pipeline.core.pipeline.types import PipelineItem, position_value


class StoreWriteError(RuntimeError):
    """Falha simulada de escrita (equivalente a uma rejeição do store)."""


class InMemoryStore:
    """Tabela em memória indexada pela coluna de conflito."""

    def __init__(
        self,
        rows: Optional[Iterable[Mapping[str, Any]]] = None,
        *,
        fail_on_call: Optional[int] = None,
    ):
        self._rows: Dict[str, Dict[str, Any]] = {}
        self.calls: List[List[Dict[str, Any]]] = []
        self.fail_on_call = fail_on_call
        for row in rows or []:
            self._rows[str(row["id"])] = dict(row)

    # ------------------------------------------------------------------
    # StoragePort
    # ------------------------------------------------------------------
    def upsert(self, rows: List[Dict[str, Any]], on_conflict: str) -> None:
        call_number = len(self.calls) + 1
        self.calls.append(deepcopy(rows))
        if self.fail_on_call is not None and call_number == self.fail_on_call:
            raise StoreWriteError(f"simulated failure on upsert call {call_number}")

        for row in rows:
            key = str(row[on_conflict])
            current = self._rows.setdefault(key, {})
            current.update(deepcopy(row))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def rows_written(self) -> int:
        return sum(len(c) for c in self.calls)

    def get(self, item_id: str) -> Dict[str, Any]:
        return dict(self._rows[str(item_id)])

    def rows(self) -> List[Dict[str, Any]]:
        return [dict(r) for r in self._rows.values()]

    def items(self) -> List[PipelineItem]:
        return [PipelineItem.from_row(r) for r in self._rows.values()]

    def column(self, status: str) -> List[str]:
        """Ids da coluna em ordem de posição (empates mantêm a ordem de inserção)."""
        members = [it for it in self.items() if it.status == status]
        return [it.id for it in sorted(members, key=lambda it: position_value(it.position))]


__all__ = ["InMemoryStore", "StoreWriteError"]
