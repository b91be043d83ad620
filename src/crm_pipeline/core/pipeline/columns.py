# src/crm_pipeline/core/pipeline/columns.py
"""
Registro de colunas do board e resolvedores do alvo de drop.

No board, o id de cada coluna é o próprio nome do status. Um drop pode
cair sobre o corpo de uma coluna (o alvo é o id da coluna) ou sobre outro
card (o alvo é o id do card e o destino é o status atual desse card).

Este módulo fabrica os dois callables que `handle_reorder` consome:
`is_column_id` e `resolve_target_status`.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from crm_pipeline.core.errors import engine_configuration_error
from crm_pipeline.core.exceptions import EngineConfigurationError
from crm_pipeline.core.pipeline.types import PipelineItem, position_value

DEFAULT_STATUSES: Tuple[str, ...] = (
    "1º Contato",
    "Orçamento",
    "Negociação",
    "Confirmado",
    "Em andamento",
    "Follow-up",
    "Cancelado",
)

ColumnPredicate = Callable[[str], bool]
StatusResolver = Callable[[str], Optional[str]]


class PipelineColumns:
    """Conjunto ordenado e imutável de colunas do pipeline."""

    def __init__(self, statuses: Sequence[str] = DEFAULT_STATUSES):
        cleaned: List[str] = []
        for status in statuses:
            if not isinstance(status, str) or not status.strip():
                raise EngineConfigurationError.from_payload(
                    engine_configuration_error(
                        message="Nome de coluna vazio ou inválido",
                        details={"statuses": list(statuses)},
                    )
                )
            if status in cleaned:
                raise EngineConfigurationError.from_payload(
                    engine_configuration_error(
                        message="Coluna duplicada no pipeline",
                        details={"status": status, "statuses": list(statuses)},
                    )
                )
            cleaned.append(status)
        self._statuses: Tuple[str, ...] = tuple(cleaned)

    @property
    def statuses(self) -> Tuple[str, ...]:
        return self._statuses

    def __contains__(self, status: object) -> bool:
        return status in self._statuses

    def __len__(self) -> int:
        return len(self._statuses)

    def is_column_id(self, candidate: str) -> bool:
        return candidate in self._statuses

    def resolvers(self, items: Iterable[PipelineItem]) -> Tuple[ColumnPredicate, StatusResolver]:
        """Retorna `(is_column_id, resolve_target_status)` para um snapshot."""
        status_by_id: Dict[str, str] = {item.id: item.status for item in items}

        def resolve_target_status(over_id: str) -> Optional[str]:
            if self.is_column_id(over_id):
                return over_id
            return status_by_id.get(over_id) or None

        return self.is_column_id, resolve_target_status

    def group(self, items: Iterable[PipelineItem]) -> Dict[str, List[PipelineItem]]:
        # itens com status fora do board ficam de fora, como na UI
        grouped: Dict[str, List[PipelineItem]] = {status: [] for status in self._statuses}
        for item in items:
            if item.status in grouped:
                grouped[item.status].append(item)
        for status, column in grouped.items():
            grouped[status] = sorted(column, key=lambda it: position_value(it.position))
        return grouped

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"PipelineColumns({list(self._statuses)!r})"
