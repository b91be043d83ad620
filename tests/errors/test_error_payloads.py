# tests/errors/test_error_payloads.py
"""
Testes do catálogo canônico de erros e do mapeamento exceção -> payload.

Os testes asseguram que:
- payloads são serializáveis (to_dict) e carregam hint
- exceções tipadas preservam o código canônico
- exceções genéricas viram ENGINE_EXECUTION_ERROR sem stack trace
"""

import json

import pytest

from crm_pipeline.core import errors
from crm_pipeline.core.exceptions import (
    ActiveItemNotFound,
    EngineConfigurationError,
    PersistenceChunkError,
    PipelineException,
    TargetStatusUnresolved,
)


@pytest.mark.parametrize(
    "factory, kwargs, expected_type",
    [
        (errors.reorder_active_not_found, {"active_id": "a", "snapshot_size": 3}, errors.REORDER_ACTIVE_NOT_FOUND),
        (errors.reorder_target_unresolved, {"over_id": "z"}, errors.REORDER_TARGET_UNRESOLVED),
        (
            errors.persistence_chunk_failed,
            {"chunk_index": 1, "chunk_ids": ["a"], "chunks_written": 1},
            errors.PERSISTENCE_CHUNK_FAILED,
        ),
        (errors.engine_execution_error, {}, errors.ENGINE_EXECUTION_ERROR),
        (errors.engine_configuration_error, {}, errors.ENGINE_CONFIGURATION_ERROR),
    ],
)
def test_factories_are_serializable(factory, kwargs, expected_type):
    payload = factory(**kwargs)
    data = payload.to_dict()

    assert data["type"] == expected_type
    assert data["message"]
    assert data["hint"]
    assert data["decision_required"] is False
    json.dumps(data)


@pytest.mark.parametrize(
    "exc_cls, factory, kwargs",
    [
        (ActiveItemNotFound, errors.reorder_active_not_found, {"active_id": "a", "snapshot_size": 0}),
        (TargetStatusUnresolved, errors.reorder_target_unresolved, {"over_id": "z"}),
        (
            PersistenceChunkError,
            errors.persistence_chunk_failed,
            {"chunk_index": 0, "chunk_ids": ["a"], "chunks_written": 0},
        ),
        (EngineConfigurationError, errors.engine_configuration_error, {}),
    ],
)
def test_from_payload_round_trip_keeps_type(exc_cls, factory, kwargs):
    payload = factory(**kwargs)
    exc = exc_cls.from_payload(payload)

    assert isinstance(exc, PipelineException)
    assert str(exc) == payload.message
    assert errors.to_error_payload(exc) == payload


def test_generic_exception_maps_to_execution_error():
    payload = errors.to_error_payload(RuntimeError("boom"))

    assert payload.type == errors.ENGINE_EXECUTION_ERROR
    assert payload.details == {"exc_type": "RuntimeError", "exc_message": "boom"}
    assert "Traceback" not in json.dumps(payload.to_dict())


def test_empty_message_exception_maps_to_none():
    payload = errors.to_error_payload(ValueError())
    assert payload.details["exc_message"] is None
