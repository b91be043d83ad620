# src/crm_pipeline/core/config/settings.py
"""
Settings tipados da reordenação, resolvidos a partir da configuração.

Seções lidas:
    - persistence.chunk_size       (int >= 1, default 50)
    - persistence.conflict_key     (str, default "id")
    - persistence.strip_fields     (list[str], default [created_at, updated_at])
    - persistence.table            (str, default "events")
    - persistence.timeout_seconds  (número > 0, default 30)
    - pipeline.statuses            (list[str], default DEFAULT_STATUSES)

Chaves ausentes assumem o default. Valores presentes e inválidos são
rejeitados com `EngineConfigurationError`: nenhum valor é corrigido
silenciosamente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from crm_pipeline.core.errors import engine_configuration_error
from crm_pipeline.core.exceptions import EngineConfigurationError
from crm_pipeline.core.pipeline.columns import DEFAULT_STATUSES, PipelineColumns

DEFAULT_CHUNK_SIZE = 50
DEFAULT_CONFLICT_KEY = "id"
DEFAULT_STRIP_FIELDS: Tuple[str, ...] = ("created_at", "updated_at")
DEFAULT_TABLE = "events"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ReorderSettings:
    chunk_size: int = DEFAULT_CHUNK_SIZE
    conflict_key: str = DEFAULT_CONFLICT_KEY
    strip_fields: Tuple[str, ...] = DEFAULT_STRIP_FIELDS
    table: str = DEFAULT_TABLE
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    statuses: Tuple[str, ...] = field(default=DEFAULT_STATUSES)

    def columns(self) -> PipelineColumns:
        return PipelineColumns(self.statuses)


def _section(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = config.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise EngineConfigurationError.from_payload(
            engine_configuration_error(
                message=f"Seção `{name}` deve ser um mapa",
                details={"section": name, "received": type(value).__name__},
            )
        )
    return value


def _invalid(key: str, value: Any, expected: str) -> EngineConfigurationError:
    return EngineConfigurationError.from_payload(
        engine_configuration_error(
            message=f"Valor inválido para `{key}`",
            details={"key": key, "value": repr(value), "expected": expected},
        )
    )


def _non_empty_str(key: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _invalid(key, value, "string não vazia")
    return value


def _str_tuple(key: str, value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise _invalid(key, value, "lista de strings")
    return tuple(value)


def resolve_settings(config: Optional[Mapping[str, Any]] = None) -> ReorderSettings:
    """
    Converte a configuração resolvida (dict) em `ReorderSettings`.

    Raises:
        EngineConfigurationError: Se algum valor presente for inválido.
    """
    config = config or {}
    persistence = _section(config, "persistence")
    pipeline = _section(config, "pipeline")

    chunk_size = persistence.get("chunk_size", DEFAULT_CHUNK_SIZE)
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size < 1:
        raise _invalid("persistence.chunk_size", chunk_size, "inteiro >= 1")

    timeout = persistence.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise _invalid("persistence.timeout_seconds", timeout, "número > 0")

    statuses = _str_tuple("pipeline.statuses", pipeline.get("statuses", list(DEFAULT_STATUSES)))
    # valida nomes vazios/duplicados com as mesmas regras do board
    PipelineColumns(statuses)

    return ReorderSettings(
        chunk_size=chunk_size,
        conflict_key=_non_empty_str(
            "persistence.conflict_key", persistence.get("conflict_key", DEFAULT_CONFLICT_KEY)
        ),
        strip_fields=_str_tuple(
            "persistence.strip_fields", persistence.get("strip_fields", list(DEFAULT_STRIP_FIELDS))
        ),
        table=_non_empty_str("persistence.table", persistence.get("table", DEFAULT_TABLE)),
        timeout_seconds=float(timeout),
        statuses=statuses,
    )


def settings_to_dict(settings: ReorderSettings) -> Dict[str, Any]:
    """Forma serializável dos settings (mesmo shape do arquivo de defaults)."""
    return {
        "persistence": {
            "chunk_size": settings.chunk_size,
            "conflict_key": settings.conflict_key,
            "strip_fields": list(settings.strip_fields),
            "table": settings.table,
            "timeout_seconds": settings.timeout_seconds,
        },
        "pipeline": {"statuses": list(settings.statuses)},
    }
