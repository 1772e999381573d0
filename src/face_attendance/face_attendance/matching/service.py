from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

import numpy as np

from ..common.validators import require_embedding
from ..core.constants import DEFAULT_MATCH_THRESHOLD
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from .index import BruteForceCosineIndex, EmbeddingIndex, gallery_dimension, l2_normalize
from .model import MatchResult

logger = logging.getLogger(__name__)

IndexFactory = Callable[[Sequence[tuple[str, Sequence[float]]], int], EmbeddingIndex]


def _brute_force(entries: Sequence[tuple[str, Sequence[float]]], dimension: int) -> EmbeddingIndex:
    return BruteForceCosineIndex(entries, dimension=dimension)


class SimilarityMatcher:
    """Match a query face embedding against every active employee.

    The search itself is delegated to an `EmbeddingIndex` built from the
    store on each call; pass a different `index_factory` to swap the full
    scan for an indexed nearest-neighbour structure.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        *,
        dimension: Optional[int] = None,
        default_threshold: float = DEFAULT_MATCH_THRESHOLD,
        index_factory: IndexFactory = _brute_force,
    ):
        self._employees = employees
        self._dimension = dimension
        self._default_threshold = float(default_threshold)
        self._index_factory = index_factory

    @property
    def default_threshold(self) -> float:
        return self._default_threshold

    def match(self, query_embedding, threshold: Optional[float] = None) -> Optional[MatchResult]:
        """Return the best match scoring >= threshold, or None when nobody qualifies.

        Raises ValidationError for an empty, non-numeric, zero-norm or
        wrongly-sized query.
        """

        threshold = self._default_threshold if threshold is None else threshold
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or not -1.0 <= threshold <= 1.0:
            raise ValidationError("threshold must be a number between -1 and 1")

        query = np.asarray(require_embedding(query_embedding), dtype=np.float64)
        if l2_normalize(query) is None:
            raise ValidationError("embedding must not be a zero vector")

        entries = self._employees.list_active_embeddings()
        dimension = self._dimension if self._dimension is not None else gallery_dimension(entries)
        if dimension is None:
            return None

        if query.shape[0] != dimension:
            raise ValidationError(f"embedding must have {dimension} dimensions, got {query.shape[0]}")

        best = self._index_factory(entries, dimension).nearest(query)
        if best is None:
            return None

        employee_id, similarity = best
        if similarity < threshold:
            logger.debug("Best candidate %s scored %.4f below threshold %.4f", employee_id, similarity, threshold)
            return None
        return MatchResult(employee_id=employee_id, similarity=similarity, matched=True)
