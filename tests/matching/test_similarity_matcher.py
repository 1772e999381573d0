from __future__ import annotations

import numpy as np
import pytest

from src.face_attendance.face_attendance.core.exceptions import ValidationError
from src.face_attendance.face_attendance.matching.index import BruteForceCosineIndex, gallery_dimension
from src.face_attendance.face_attendance.matching.service import SimilarityMatcher



def test_identical_embedding_matches_with_similarity_one(employees_repo):
    matcher = SimilarityMatcher(employees_repo)

    result = matcher.match([1, 0, 0], threshold=0.95)

    assert result is not None
    assert result.employee_id == "E1"
    assert result.similarity == pytest.approx(1.0)
    assert result.matched is True


def test_orthogonal_embedding_is_not_found(employees_repo):
    matcher = SimilarityMatcher(employees_repo)

    assert matcher.match([0, 1, 0], threshold=0.95) is None


def test_no_cross_match_between_separated_employees(employees_repo):
    matcher = SimilarityMatcher(employees_repo)

    # Close to E2 only; E1 is orthogonal.
    result = matcher.match([0.0, 0.1, 1.0], threshold=0.95)

    assert result is not None
    assert result.employee_id == "E2"


def test_scale_does_not_affect_cosine_score(employees_repo):
    matcher = SimilarityMatcher(employees_repo)

    result = matcher.match([5, 0, 0], threshold=0.95)

    assert result.employee_id == "E1"
    assert result.similarity == pytest.approx(1.0)


def test_tie_goes_to_lowest_employee_id(employee_store, new_employee):
    repo = employee_store(
        [
            new_employee("B", embedding=[0.6, 0.8]),
            new_employee("A", embedding=[0.6, 0.8]),
            new_employee("C", embedding=[0.0, 1.0]),
        ]
    )
    matcher = SimilarityMatcher(repo)

    results = {matcher.match([0.6, 0.8], threshold=0.9).employee_id for _ in range(5)}

    assert results == {"A"}


def test_inactive_employees_are_not_matched(employee_store, new_employee):
    repo = employee_store([new_employee("E1", embedding=[1, 0, 0], is_active=False)])

    assert SimilarityMatcher(repo).match([1, 0, 0], threshold=0.5) is None


def test_empty_gallery_returns_none(employee_store):
    assert SimilarityMatcher(employee_store()).match([1, 0, 0], threshold=0.5) is None


@pytest.mark.parametrize("query", [[], "abc", [1, "x", 0], [0, 0, 0], [float("nan"), 0, 0], [True, 0, 0]])
def test_malformed_query_is_invalid_input(employees_repo, query):
    with pytest.raises(ValidationError):
        SimilarityMatcher(employees_repo).match(query, threshold=0.95)


def test_dimension_mismatch_is_invalid_input(employees_repo):
    with pytest.raises(ValidationError):
        SimilarityMatcher(employees_repo).match([1, 0], threshold=0.95)


def test_configured_dimension_is_enforced(employees_repo):
    matcher = SimilarityMatcher(employees_repo, dimension=4)

    with pytest.raises(ValidationError):
        matcher.match([1, 0, 0], threshold=0.95)


def test_default_threshold_used_when_omitted(employees_repo):
    matcher = SimilarityMatcher(employees_repo, default_threshold=0.99)

    # cos([1, 0.2, 0], [1, 0, 0]) ~= 0.98
    assert matcher.match([1, 0.2, 0]) is None
    assert matcher.match([1, 0.2, 0], threshold=0.95).employee_id == "E1"


def test_index_skips_wrong_dimension_and_zero_vectors():
    index = BruteForceCosineIndex(
        [("A", [1.0, 0.0]), ("B", [1.0, 0.0, 0.0]), ("C", [0.0, 0.0])],
        dimension=2,
    )

    assert len(index) == 1
    assert index.nearest(np.array([1.0, 0.0])) == ("A", pytest.approx(1.0))


def test_custom_index_factory_is_used(employees_repo):
    calls = []

    class FixedIndex:
        def nearest(self, query):
            return ("E2", 0.97)

    def factory(entries, dimension):
        calls.append((len(entries), dimension))
        return FixedIndex()

    matcher = SimilarityMatcher(employees_repo, index_factory=factory)

    assert matcher.match([1, 0, 0], threshold=0.95).employee_id == "E2"
    assert calls == [(2, 3)]


def test_majority_dimension_wins_over_a_stray_stored_vector(employee_store, new_employee):
    # "0-stray" sorts first, so a first-row rule would pick its size.
    repo = employee_store(
        [
            new_employee("0-stray", embedding=[1, 0]),
            new_employee("E1", embedding=[1, 0, 0]),
            new_employee("E2", embedding=[0, 0, 1]),
        ]
    )

    result = SimilarityMatcher(repo).match([1, 0, 0], threshold=0.95)

    assert result.employee_id == "E1"
    with pytest.raises(ValidationError):
        SimilarityMatcher(repo).match([1, 0], threshold=0.95)


def test_gallery_dimension_ties_resolve_to_smaller_size():
    assert gallery_dimension([("A", [1, 0, 0]), ("B", [1, 0])]) == 2
    assert gallery_dimension([("A", [1, 0, 0]), ("B", [1, 0])], exclude="B") == 3
    assert gallery_dimension([]) is None
