"""
CRM Pipeline — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do CRM Pipeline.
Erros são artefatos de domínio e fazem parte do contrato operacional
entre o engine de reordenação e a UI que o chama, devendo ser:

- explícitos
- serializáveis
- acionáveis (a UI decide o toast e o re-fetch do snapshot)

Nenhuma correção silenciosa é permitida.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PipelineErrorPayload:
    """
    Payload canônico de erro do CRM Pipeline.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao chamador
    - decision_required: indica que a operação está bloqueada aguardando decisão humana
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    decision_required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Entrada do gesto (contrato UI -> engine)
REORDER_ACTIVE_NOT_FOUND = "REORDER_ACTIVE_NOT_FOUND"
REORDER_TARGET_UNRESOLVED = "REORDER_TARGET_UNRESOLVED"

# Persistência
PERSISTENCE_CHUNK_FAILED = "PERSISTENCE_CHUNK_FAILED"

# Engine / Configuração
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"
ENGINE_CONFIGURATION_ERROR = "ENGINE_CONFIGURATION_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def reorder_active_not_found(
    *,
    active_id: str,
    snapshot_size: int,
    hint: str = "Recarregue o snapshot do pipeline; o card arrastado não existe mais na lista atual.",
) -> PipelineErrorPayload:
    return PipelineErrorPayload(
        type=REORDER_ACTIVE_NOT_FOUND,
        message="Item arrastado não encontrado no snapshot",
        details={
            "active_id": active_id,
            "snapshot_size": snapshot_size,
        },
        hint=hint,
        decision_required=False,
    )


def reorder_target_unresolved(
    *,
    over_id: str,
    active_id: Optional[str] = None,
    hint: str = "Verifique se o alvo do drop é uma coluna declarada ou um card existente.",
) -> PipelineErrorPayload:
    return PipelineErrorPayload(
        type=REORDER_TARGET_UNRESOLVED,
        message="Não foi possível resolver o status de destino",
        details={
            "over_id": over_id,
            "active_id": active_id,
        },
        hint=hint,
        decision_required=False,
    )


def persistence_chunk_failed(
    *,
    chunk_index: int,
    chunk_ids: List[str],
    chunks_written: int,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Recarregue o snapshot: chunks anteriores já foram gravados e não são revertidos.",
) -> PipelineErrorPayload:
    return PipelineErrorPayload(
        type=PERSISTENCE_CHUNK_FAILED,
        message="Falha ao gravar chunk de posições no backing store",
        details={
            "chunk_index": chunk_index,
            "chunk_ids": chunk_ids,
            "chunks_written": chunks_written,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
        decision_required=False,
    )


def engine_execution_error(
    *,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique o log estruturado da reordenação. Nenhum fallback é aplicado automaticamente.",
) -> PipelineErrorPayload:
    return PipelineErrorPayload(
        type=ENGINE_EXECUTION_ERROR,
        message="Falha inesperada durante a reordenação",
        details={
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
        decision_required=False,
    )


def engine_configuration_error(
    *,
    message: str = "Configuração inválida para a reordenação do pipeline",
    details: Optional[Dict[str, Any]] = None,
    hint: str = "Revise as seções `persistence` e `pipeline` da configuração antes de reexecutar.",
) -> PipelineErrorPayload:
    return PipelineErrorPayload(
        type=ENGINE_CONFIGURATION_ERROR,
        message=message,
        details=details or {},
        hint=hint,
        decision_required=False,
    )


def to_error_payload(exc: BaseException) -> PipelineErrorPayload:
    """Converte exceções em PipelineErrorPayload (serializável, sem stack trace).

    Regras:
    - PipelineException: usa o código canônico da classe (`error_type`).
    - Outras exceções: encapsuladas como ENGINE_EXECUTION_ERROR.
    """
    from crm_pipeline.core.exceptions import PipelineException

    if isinstance(exc, PipelineException):
        return PipelineErrorPayload(
            type=exc.error_type,
            message=str(exc) or "Erro de reordenação",
            details=dict(exc.details or {}),
            hint=exc.hint,
            decision_required=bool(exc.decision_required),
        )

    return engine_execution_error(
        exc_type=exc.__class__.__name__,
        exc_message=str(exc) or None,
    )
