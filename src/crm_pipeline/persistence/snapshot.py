"""Leitura de snapshots exportados do pipeline (CSV / JSON / Parquet).

Um snapshot é a lista completa de cards com `id`, status e posição,
exportada da tabela de eventos. A leitura usa pandas para tratar de forma
uniforme os três formatos.

Limites explícitos (v1):
- NÃO reordena nem renumera (isso é papel do engine)
- NÃO valida se o status pertence ao board
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

import pandas as pd

from crm_pipeline.core.pipeline.types import PipelineItem


class SnapshotFormatError(ValueError):
    """Extensão de snapshot não suportada."""


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        # ids como texto: "007" não pode virar 7
        return pd.read_csv(path, dtype={"id": str})
    if suffix == ".json":
        return pd.read_json(path, orient="records", dtype={"id": str})
    if suffix == ".parquet":
        return pd.read_parquet(path)
    raise SnapshotFormatError(f"Unsupported snapshot extension: {suffix}")


def load_snapshot(path: Union[str, Path]) -> List[PipelineItem]:
    """Carrega um snapshot e normaliza cada linha em `PipelineItem`.

    Raises:
        FileNotFoundError: se o arquivo não existir.
        SnapshotFormatError: se a extensão não for suportada.
        KeyError: se a coluna `id` estiver ausente.
    """
    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(f"File not found: {p}")

    df = _read_frame(p)
    if "id" not in df.columns:
        raise KeyError("id")

    # NaN -> None para que from_row aplique os defaults (status "", posição 0)
    df = df.astype(object).where(pd.notna(df), None)
    return [PipelineItem.from_row(row) for row in df.to_dict(orient="records")]


__all__ = ["load_snapshot", "SnapshotFormatError"]
