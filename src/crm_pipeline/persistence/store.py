"""Porta de escrita do backing store e gravação de posições em chunks (v1).

O engine não conhece nenhum cliente global: recebe uma `StoragePort`
injetada, com uma única operação:

    upsert(rows, on_conflict)

Decisões (v1):
- Escrita serial, um chunk por vez (chunk padrão: 50 linhas)
- Campos de timestamp gerenciados pelo store são removidos de cada linha
- Falha em um chunk interrompe os restantes e é propagada ao chamador
- Chunks já gravados NÃO são revertidos (não há transação entre chunks)

Limites explícitos:
- Não faz retry
- Não verifica versão/ETag antes de sobrescrever (último a gravar vence)
"""

from __future__ import annotations

from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    TypeVar,
    Union,
    runtime_checkable,
)

from crm_pipeline.core.config.settings import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CONFLICT_KEY,
    DEFAULT_STRIP_FIELDS,
)
from crm_pipeline.core.errors import engine_configuration_error, persistence_chunk_failed
from crm_pipeline.core.exceptions import EngineConfigurationError, PersistenceChunkError
from crm_pipeline.core.pipeline.context import STEP_PERSIST, ReorderContext
from crm_pipeline.core.pipeline.types import PositionUpdate

T = TypeVar("T")
Row = Dict[str, Any]


@runtime_checkable
class StoragePort(Protocol):
    """Contrato mínimo de escrita do backing store."""

    def upsert(self, rows: List[Row], on_conflict: str) -> None:
        """Insere ou atualiza `rows`, resolvendo conflitos pela coluna `on_conflict`."""
        ...


def sanitize_row(row: Mapping[str, Any], strip_fields: Iterable[str] = DEFAULT_STRIP_FIELDS) -> Row:
    """Retorna uma cópia da linha sem os campos de auditoria gerenciados pelo store."""
    clone = dict(row)
    for name in strip_fields:
        clone.pop(name, None)
    return clone


def chunked(seq: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    if size < 1:
        raise EngineConfigurationError.from_payload(
            engine_configuration_error(message="chunk_size deve ser >= 1", details={"chunk_size": size})
        )
    for start in range(0, len(seq), size):
        yield seq[start:start + size]


def persist_positions(
    updates: Sequence[Union[PositionUpdate, Mapping[str, Any]]],
    store: StoragePort,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    conflict_key: str = DEFAULT_CONFLICT_KEY,
    strip_fields: Iterable[str] = DEFAULT_STRIP_FIELDS,
    ctx: Optional[ReorderContext] = None,
) -> int:
    """Grava `updates` em chunks seriais via `store.upsert`.

    Args:
        updates: PositionUpdate (ou linhas já montadas) na ordem de escrita.
        store: porta de escrita injetada.
        chunk_size: máximo de linhas por chamada.
        conflict_key: coluna usada para resolver conflitos do upsert.
        strip_fields: campos removidos de cada linha antes do envio.
        ctx: contexto opcional para logs estruturados.

    Returns:
        int: número de chunks gravados (0 quando não há updates).

    Raises:
        EngineConfigurationError: se `chunk_size < 1`.
        PersistenceChunkError: no primeiro chunk rejeitado pelo store.
    """
    strip = tuple(strip_fields)
    rows: List[Row] = [
        u.to_row() if isinstance(u, PositionUpdate) else dict(u)
        for u in updates
    ]

    written = 0
    for index, chunk in enumerate(chunked(rows, chunk_size)):
        payload = [sanitize_row(r, strip) for r in chunk]
        try:
            store.upsert(payload, on_conflict=conflict_key)
        except Exception as e:
            if ctx is not None:
                ctx.log(
                    step_id=STEP_PERSIST,
                    level="error",
                    message="chunk upsert failed",
                    chunk_index=index,
                    chunk=payload,
                    chunks_written=written,
                    error_type=e.__class__.__name__,
                    error_message=str(e) or "error",
                )
            raise PersistenceChunkError.from_payload(
                persistence_chunk_failed(
                    chunk_index=index,
                    chunk_ids=[str(r.get("id")) for r in payload],
                    chunks_written=written,
                    exc_type=e.__class__.__name__,
                    exc_message=str(e) or None,
                )
            ) from e

        written += 1
        if ctx is not None:
            ctx.log(
                step_id=STEP_PERSIST,
                level="info",
                message="chunk upserted",
                chunk_index=index,
                rows=len(payload),
            )

    return written


__all__ = ["StoragePort", "sanitize_row", "chunked", "persist_positions"]
