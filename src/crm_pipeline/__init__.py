# src/crm_pipeline/__init__.py
"""
CRM Pipeline — engine de reordenação do pipeline de eventos/projetos.

Este pacote traduz gestos de drag-and-drop do board do CRM em
atualizações de posição e status, gravadas em chunks no backing store
através de uma porta de escrita injetada.

Arquitetura em alto nível:
    - core.config    → carregamento, merge e settings tipados
    - core.pipeline  → tipos do board, colunas e contexto de logging
    - core.engine    → reordenação (renumeração contígua) e rank esparso
    - persistence    → porta de escrita, chunks, store em memória, REST e snapshots

Limites explícitos:
    - Não contém UI, autenticação ou funções administrativas
    - Não cria nem remove cards
"""
# src/crm_pipeline/__init__.py
from .core.engine import compute_reorder, handle_reorder
from .core.pipeline import DEFAULT_STATUSES, PipelineColumns, PipelineItem, ReorderContext

__all__ = [
    "compute_reorder",
    "handle_reorder",
    "DEFAULT_STATUSES",
    "PipelineColumns",
    "PipelineItem",
    "ReorderContext",
]
