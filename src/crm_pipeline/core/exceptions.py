"""
CRM Pipeline — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do CRM Pipeline.

Objetivo:
- Permitir que o engine e a persistência levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para PipelineErrorPayload
- Evitar ValueError/RuntimeError genéricos nos guardrails do gesto

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Erros de entrada são levantados antes de qualquer escrita.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

from crm_pipeline.core.errors import (
    ENGINE_CONFIGURATION_ERROR,
    ENGINE_EXECUTION_ERROR,
    PERSISTENCE_CHUNK_FAILED,
    REORDER_ACTIVE_NOT_FOUND,
    REORDER_TARGET_UNRESOLVED,
    PipelineErrorPayload,
)


@dataclass(frozen=True)
class PipelineException(Exception):
    """Base class para exceções internas do CRM Pipeline.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    decision_required: bool = False

    error_type: ClassVar[str] = ENGINE_EXECUTION_ERROR

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    @classmethod
    def from_payload(cls, payload: "PipelineErrorPayload") -> "PipelineException":
        """Constrói a exceção a partir de um payload do catálogo canônico."""
        return cls(
            message=payload.message,
            details=dict(payload.details),
            hint=payload.hint,
            decision_required=payload.decision_required,
        )


# ---------------------------------------------------------------------------
# Entrada do gesto
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ActiveItemNotFound(PipelineException):
    """O id arrastado não existe no snapshot recebido."""

    error_type: ClassVar[str] = REORDER_ACTIVE_NOT_FOUND


@dataclass(frozen=True)
class TargetStatusUnresolved(PipelineException):
    """O alvo do drop não resolve para nenhum status utilizável."""

    error_type: ClassVar[str] = REORDER_TARGET_UNRESOLVED


# ---------------------------------------------------------------------------
# Persistência
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PersistenceChunkError(PipelineException):
    """Um chunk de upsert foi rejeitado; chunks anteriores permanecem gravados."""

    error_type: ClassVar[str] = PERSISTENCE_CHUNK_FAILED


# ---------------------------------------------------------------------------
# Engine / Configuração
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EngineConfigurationError(PipelineException):
    """Configuração inválida ou inconsistente para a reordenação."""

    error_type: ClassVar[str] = ENGINE_CONFIGURATION_ERROR
