from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from typing import Optional, Sequence

import numpy as np

from ..core.constants import SIMILARITY_EPSILON

logger = logging.getLogger(__name__)


def l2_normalize(vector: np.ndarray) -> Optional[np.ndarray]:
    norm = float(np.linalg.norm(vector))
    if norm == 0.0:
        return None
    return vector / norm


def gallery_dimension(
    entries: Sequence[tuple[str, Sequence[float]]], *, exclude: Optional[str] = None
) -> Optional[int]:
    """Dimensionality shared by most stored embeddings; None for an empty gallery.

    Equal counts resolve to the smaller dimension so the answer does not
    depend on row order.
    """

    counts = Counter(len(embedding) for employee_id, embedding in entries if employee_id != exclude)
    if not counts:
        return None
    if len(counts) > 1:
        logger.warning("Stored embeddings have mixed dimensions: %s", dict(counts))
    return min(counts, key=lambda dim: (-counts[dim], dim))


class EmbeddingIndex(ABC):
    """Strategy Pattern: how the gallery is searched for the closest face.

    Implementations return the single best (employee_id, cosine similarity),
    breaking ties on the lowest employee_id so results are reproducible.
    """

    @abstractmethod
    def nearest(self, query: np.ndarray) -> Optional[tuple[str, float]]:
        raise NotImplementedError


class BruteForceCosineIndex(EmbeddingIndex):
    """Full scan over every stored embedding.

    Fine at registration scale (hundreds to low thousands of employees).
    Entries whose dimensionality differs from `dimension` or whose norm is
    zero are skipped.
    """

    def __init__(self, entries: Sequence[tuple[str, Sequence[float]]], *, dimension: int):
        owners: list[str] = []
        rows: list[np.ndarray] = []
        for employee_id, embedding in entries:
            vec = np.asarray(embedding, dtype=np.float64)
            if vec.ndim != 1 or vec.shape[0] != dimension:
                logger.warning(
                    "Skipping embedding of employee %s: expected %d dimensions, got %s",
                    employee_id, dimension, vec.shape,
                )
                continue
            unit = l2_normalize(vec)
            if unit is None:
                logger.warning("Skipping zero-norm embedding of employee %s", employee_id)
                continue
            owners.append(employee_id)
            rows.append(unit)

        self._owners = owners
        self._gallery = np.stack(rows, axis=0) if rows else np.empty((0, dimension))

    def __len__(self) -> int:
        return len(self._owners)

    def nearest(self, query: np.ndarray) -> Optional[tuple[str, float]]:
        if not self._owners:
            return None

        unit = l2_normalize(np.asarray(query, dtype=np.float64))
        if unit is None:
            return None

        sims = np.clip(self._gallery @ unit, -1.0, 1.0)  # [M]
        best = float(sims.max())
        tied = np.flatnonzero(sims >= best - SIMILARITY_EPSILON)
        winner = min(tied, key=lambda i: self._owners[i])
        return self._owners[winner], float(sims[winner])
