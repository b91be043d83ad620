# src/crm_pipeline/core/pipeline/context.py
"""
Contexto de uma reordenação do pipeline.

Este módulo define o `ReorderContext`, a estrutura utilizada para
registrar logs estruturados e warnings durante o processamento de um
gesto de drag-and-drop (cálculo + persistência em chunks).

Princípios fundamentais:
    - Um contexto por gesto (nenhum estado global compartilhado)
    - Logs são eventos estruturados, não strings livres
    - Warnings são sinais não fatais agrupados por etapa

Invariantes:
    - Todo evento inclui `run_id`, `step_id`, `level`, `message` e `timestamp`
    - A coleção de eventos cresce apenas por append

Limites explícitos:
    - Não executa a reordenação
    - Não persiste eventos automaticamente
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

STEP_COMPUTE = "reorder.compute"
STEP_PERSIST = "reorder.persist"


@dataclass
class ReorderContext:
    """
    Contexto de logging estruturado de um gesto.

    A UI pode inspecionar `events` após uma falha para exibir detalhes ou
    para anexar o chunk rejeitado a um relatório.
    """
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "step_id": step_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, step_id: str, message: str) -> None:
        if step_id not in self.warnings:
            self.warnings[step_id] = []
        self.warnings[step_id].append(message)

    def events_for(self, step_id: str) -> List[Dict[str, Any]]:
        return [ev for ev in self.events if ev.get("step_id") == step_id]
