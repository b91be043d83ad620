# src/crm_pipeline/core/pipeline/types.py
"""
Tipos canônicos do pipeline CRM.

Este módulo define as estruturas que padronizam a comunicação entre o
snapshot do backing store, o engine de reordenação e a camada de
persistência.

Componentes principais:
    - PipelineItem     → card do pipeline (id, status, position)
    - PositionUpdate   → linha a ser gravada (id, status, position)
    - MoveKind         → classificação do gesto (cross/same column, noop)
    - ReorderOutcome   → resultado imutável de um gesto

Invariantes:
    - A ordem dentro de um status é determinada apenas por `position`
    - Empates de `position` preservam a ordem do snapshot (sort estável)
    - Todo item pertence a exatamente um status

Limites explícitos:
    - Não cria nem remove itens (responsabilidade dos formulários CRUD)
    - Não executa persistência
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Union

STATUS_COLUMN = "pipeline_status"
POSITION_COLUMN = "pipeline_position"


def position_value(value: Any) -> float:
    """Valor numérico de uma posição para ordenação; ausente, não numérica ou NaN vira 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def coerce_position(value: Any) -> int:
    """Converte uma posição crua em int (truncada), com os mesmos defaults de `position_value`."""
    return int(position_value(value))


def _normalize_position(value: Any) -> Union[int, float]:
    # frações são mantidas: 0.5 ordena antes de 0.7
    number = position_value(value)
    return int(number) if number.is_integer() else number


@dataclass(frozen=True)
class PipelineItem:
    """
    Card posicionado em uma coluna do pipeline.

    Campos:
        - id: identificador estável (string)
        - status: coluna/etapa atual (ex.: "Orçamento")
        - position: ordinal dentro do status; menor aparece primeiro.
          Valores ausentes ou inválidos ordenam como 0 (ver `position_value`)
    """
    id: str
    status: str = ""
    position: Union[int, float] = 0

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PipelineItem":
        """Constrói um item a partir de uma linha do backing store.

        Aceita os nomes de coluna da tabela (`pipeline_status`,
        `pipeline_position`) e os nomes curtos (`status`, `position`).
        """
        if "id" not in row or row["id"] is None:
            raise KeyError("id")

        status = row.get(STATUS_COLUMN, row.get("status"))
        position = row.get(POSITION_COLUMN, row.get("position"))
        return cls(
            id=str(row["id"]),
            status="" if status is None else str(status),
            position=_normalize_position(position),
        )


@dataclass(frozen=True)
class PositionUpdate:
    """Linha de escrita produzida pelo engine para um único card."""
    id: str
    status: str
    position: int

    def to_row(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            STATUS_COLUMN: self.status,
            POSITION_COLUMN: self.position,
        }


class MoveKind(str, Enum):
    """Classificação do gesto. Valores textuais estáveis (usados em logs)."""
    CROSS_COLUMN = "cross_column"
    SAME_COLUMN = "same_column"
    NOOP = "noop"


@dataclass(frozen=True)
class ReorderOutcome:
    """
    Resultado imutável de um gesto de drag-and-drop.

    `updates` segue a ordem de escrita: no movimento entre colunas as
    linhas da coluna de origem vêm antes das linhas da coluna de destino.
    `chunks_written` é 0 para no-ops e para resultados apenas calculados
    (`compute_reorder`).
    """
    kind: MoveKind
    from_status: str
    to_status: str
    updates: List[PositionUpdate] = field(default_factory=list)
    chunks_written: int = 0

    @property
    def is_noop(self) -> bool:
        return self.kind is MoveKind.NOOP

    def columns(self) -> Dict[str, List[PositionUpdate]]:
        grouped: Dict[str, List[PositionUpdate]] = {}
        for update in self.updates:
            grouped.setdefault(update.status, []).append(update)
        return grouped
