"""Adapter da `StoragePort` para a API REST auto-gerada das tabelas (PostgREST).

Endpoints usados:
- upsert: POST {base_url}/rest/v1/{table}?on_conflict={key}
          Prefer: resolution=merge-duplicates
- snapshot: GET {base_url}/rest/v1/{table}?select=id,pipeline_status,pipeline_position

Erros HTTP não são suprimidos: `raise_for_status` propaga a exceção do
`requests` e `persist_positions` a encapsula em `PersistenceChunkError`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from crm_pipeline.core.config.settings import DEFAULT_TABLE, DEFAULT_TIMEOUT_SECONDS, ReorderSettings
from crm_pipeline.core.pipeline.types import POSITION_COLUMN, STATUS_COLUMN, PipelineItem

REST_PREFIX = "/rest/v1"


class RestTableStore:
    """Cliente mínimo de uma tabela exposta pela API REST do backing store."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        table: str = DEFAULT_TABLE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        # sem sessão de usuário, a chave anônima também vale como bearer
        self.access_token = access_token or api_key
        self.table = table
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(
        cls,
        settings: ReorderSettings,
        *,
        base_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> "RestTableStore":
        """Cria o adapter com a tabela e o timeout de `persistence` da configuração."""
        return cls(
            base_url=base_url,
            api_key=api_key,
            access_token=access_token,
            table=settings.table,
            timeout=settings.timeout_seconds,
            session=session,
        )

    @property
    def table_url(self) -> str:
        return f"{self.base_url}{REST_PREFIX}/{self.table}"

    def _headers(self, **extra: str) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        headers.update(extra)
        return headers

    # ------------------------------------------------------------------
    # StoragePort
    # ------------------------------------------------------------------
    def upsert(self, rows: List[Dict[str, Any]], on_conflict: str) -> None:
        response = self.session.post(
            self.table_url,
            params={"on_conflict": on_conflict},
            json=rows,
            headers=self._headers(Prefer="resolution=merge-duplicates,return=minimal"),
            timeout=self.timeout,
        )
        response.raise_for_status()

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------
    def fetch_snapshot(self) -> List[PipelineItem]:
        """Lê o snapshot atual do pipeline (id, status, posição)."""
        response = self.session.get(
            self.table_url,
            params={"select": f"id,{STATUS_COLUMN},{POSITION_COLUMN}"},
            headers=self._headers(),
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, list):
            raise ValueError(f"Resposta inesperada do snapshot: {type(data).__name__}")
        return [PipelineItem.from_row(row) for row in data]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(table={self.table})"


__all__ = ["RestTableStore", "REST_PREFIX"]
