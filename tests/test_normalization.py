import math

from algoframe.normalization import (
    communities_to_arrays,
    count_communities,
    max_normalize,
    min_max_normalize,
    relabel_communities,
)


def test_min_and_max_map_to_zero_and_one() -> None:
    pct = min_max_normalize({"a": 2.0, "b": 4.0, "c": 6.0})

    assert pct == {"a": 0.0, "b": 0.5, "c": 1.0}


def test_equal_scores_are_all_zero() -> None:
    pct = min_max_normalize({"a": 3.0, "b": 3.0})

    assert pct == {"a": 0.0, "b": 0.0}


def test_missing_and_non_finite_scores_become_zero() -> None:
    pct = min_max_normalize({"a": 1.0, "b": math.nan, "c": 3.0, "d": math.inf}, keys=["a", "b", "c", "d", "e"])

    assert pct == {"a": 0.0, "b": 0.0, "c": 1.0, "d": 0.0, "e": 0.0}
    assert all(math.isfinite(value) for value in pct.values())


def test_empty_input_is_empty() -> None:
    assert min_max_normalize({}) == {}
    assert max_normalize({}) == {}


def test_max_normalize_divides_by_peak() -> None:
    assert max_normalize({"a": 0, "b": 1, "c": 4}) == {"a": 0.0, "b": 0.25, "c": 1.0}
    assert max_normalize({"a": 0, "b": 0}) == {"a": 0.0, "b": 0.0}


def test_community_arrays_ignore_iteration_order() -> None:
    forward = {"a": 1, "b": 1, "c": 2, "d": 3}
    backward = dict(reversed(list(forward.items())))

    assert communities_to_arrays(forward) == communities_to_arrays(backward)
    assert communities_to_arrays(forward) == [["a", "b"], ["c"], ["d"]]
    assert count_communities(forward) == 3


def test_community_arrays_handle_mixed_id_types() -> None:
    arrays = communities_to_arrays({1: 0, "x": 0, 2: 1})

    assert arrays == [[1, "x"], [2]]


def test_relabel_follows_node_order() -> None:
    labels = relabel_communities([{"c", "d"}, {"a", "b"}], ["a", "b", "c", "d", "e"])

    assert labels == {"a": 0, "b": 0, "c": 1, "d": 1, "e": 2}
