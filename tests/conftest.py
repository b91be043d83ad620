# tests/conftest.py
"""
Fixtures compartilhados para testes do CRM Pipeline.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações YAML mínimas (defaults + override local)
- snapshots pequenos e determinísticos do board
- store em memória e contexto de logging (ReorderContext)

Invariantes:
    - Nenhuma fixture acessa rede
    - Fixtures que escrevem arquivos usam `tmp_path`
    - Snapshots são listas novas a cada teste (sem estado compartilhado)
"""

from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def repo_defaults_path() -> Path:
    """Caminho do arquivo de defaults versionado no repositório."""
    return REPO_ROOT / "config" / "pipeline.defaults.yaml"


@pytest.fixture
def config_defaults_yaml() -> str:
    return """\
persistence:
  table: events
  conflict_key: id
  chunk_size: 50
  timeout_seconds: 30
  strip_fields:
    - created_at
    - updated_at
pipeline:
  statuses:
    - "1º Contato"
    - "Orçamento"
    - "Negociação"
"""


@pytest.fixture
def config_local_yaml() -> str:
    return """\
persistence:
  chunk_size: 10
pipeline:
  statuses:
    - "Orçamento"
    - "Confirmado"
"""


# =====================================================
# Board fixtures
# =====================================================

def _items(rows):
    from crm_pipeline.core.pipeline.types import PipelineItem

    return [PipelineItem(id=i, status=s, position=p) for i, s, p in rows]


@pytest.fixture
def make_items():
    """Fábrica de snapshots: lista de tuplas (id, status, position) -> PipelineItem."""
    return _items


@pytest.fixture
def small_board():
    """Snapshot com três colunas, posições não contíguas em uma delas."""
    return _items(
        [
            ("a", "1º Contato", 0),
            ("b", "1º Contato", 1),
            ("c", "1º Contato", 2),
            ("d", "Orçamento", 10),
            ("e", "Orçamento", 20),
            ("f", "Negociação", 0),
        ]
    )


@pytest.fixture
def columns():
    from crm_pipeline.core.pipeline.columns import PipelineColumns

    return PipelineColumns()


@pytest.fixture
def memory_store():
    from crm_pipeline.persistence.memory_store import InMemoryStore

    return InMemoryStore()


@pytest.fixture
def reorder_ctx():
    from crm_pipeline.core.pipeline.context import ReorderContext

    return ReorderContext(run_id="test-run")
