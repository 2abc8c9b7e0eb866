"""Tests for k-means++ clustering of RGB samples."""

import numpy as np
import pytest

from kmeans import assign, cluster, cluster_with_sizes, make_rng, seed_centroids, update_centroids


OFFSETS = np.array([[0, 0, 0], [2, 0, 0], [0, 2, 0], [0, 0, 2], [1, 1, 1]])


def make_group(center, repeats):
    """Dense group of samples around center."""
    return np.tile(np.array(center) + OFFSETS, (repeats, 1))


def rounded_mean(group):
    return tuple(int(v) for v in np.floor(group.mean(axis=0) + 0.5))


@pytest.fixture
def separated_groups():
    groups = [
        make_group([20, 20, 200], 6),   # 30 samples
        make_group([220, 30, 30], 4),   # 20 samples
        make_group([40, 210, 60], 2),   # 10 samples
    ]
    return groups, np.vstack(groups)


def test_k_below_one_is_rejected():
    with pytest.raises(ValueError):
        cluster(np.array([[1, 2, 3]]), 0)


def test_few_samples_are_returned_unchanged():
    samples = np.array([[1, 2, 3], [4, 5, 6], [1, 2, 3]])
    result = cluster(samples, 3)
    assert np.array_equal(result, samples)
    assert len(cluster(samples, 8)) == 3


def test_empty_samples():
    assert len(cluster(np.empty((0, 3), dtype=np.int64), 4)) == 0


def test_red_and_blue_buckets_converge_exactly():
    samples = np.array([[248, 0, 0]] * 4 + [[0, 0, 248]] * 4)
    for seed in range(5):
        result = cluster(samples, 2, random_state=seed)
        assert sorted(map(tuple, result.tolist())) == [(0, 0, 248), (248, 0, 0)]


def test_separated_groups_converge_to_group_means(separated_groups):
    groups, samples = separated_groups
    centroids, sizes = cluster_with_sizes(samples, 3, random_state=0)
    assert len(centroids) == 3
    # Largest group first
    assert [tuple(c) for c in centroids.tolist()] == [rounded_mean(g) for g in groups]
    assert sizes.tolist() == [30, 20, 10]


def test_same_seed_same_result(separated_groups):
    _, samples = separated_groups
    first = cluster(samples, 3, random_state=123)
    second = cluster(samples, 3, random_state=np.random.default_rng(123))
    assert np.array_equal(first, second)


def test_centroids_stay_in_range():
    rng = np.random.default_rng(5)
    samples = rng.integers(0, 256, size=(400, 3))
    result = cluster(samples, 12, random_state=rng)
    assert len(result) == 12
    assert result.min() >= 0
    assert result.max() <= 255


def test_sizes_are_descending():
    rng = np.random.default_rng(9)
    samples = rng.integers(0, 256, size=(300, 3))
    _, sizes = cluster_with_sizes(samples, 6, random_state=1)
    assert list(sizes) == sorted(sizes, reverse=True)
    assert sizes.sum() == 300


def test_duplicate_colors_seed_without_crashing():
    # Two distinct colors but three clusters requested: seeding runs out of distance
    samples = np.array([[10, 10, 10]] * 5 + [[200, 200, 200]] * 5)
    centroids, sizes = cluster_with_sizes(samples, 3, random_state=4)
    assert len(centroids) == 3
    assert {tuple(c) for c in centroids.tolist()} == {(10, 10, 10), (200, 200, 200)}
    assert sizes.sum() == 10
    assert sizes[-1] == 0


# =============================================================================
# Building blocks
# =============================================================================

def test_assign_breaks_ties_to_first_centroid():
    samples = np.array([[10, 10, 10], [0, 0, 0]])
    centroids = np.array([[0, 0, 20], [0, 20, 0], [0, 0, 0]])
    assert assign(samples, centroids).tolist() == [0, 2]


def test_update_rounds_half_up_and_keeps_empty_clusters():
    samples = np.array([[0, 0, 0], [1, 1, 2], [100, 100, 100]])
    labels = np.array([0, 0, 0])
    centroids = np.array([[5, 5, 5], [77, 88, 99]])
    updated = update_centroids(samples, np.array([0, 0, 1]), centroids)
    # Mean of first two is (0.5, 0.5, 1.0)
    assert updated.tolist() == [[1, 1, 1], [100, 100, 100]]
    kept = update_centroids(samples, labels, centroids)
    assert kept[1].tolist() == [77, 88, 99]
    assert centroids.tolist() == [[5, 5, 5], [77, 88, 99]]


def test_seeding_picks_distinct_far_points():
    samples = np.array([[0, 0, 0]] * 10 + [[255, 255, 255]] * 10)
    seeds = seed_centroids(samples, 2, make_rng(11))
    assert {tuple(s) for s in seeds.tolist()} == {(0, 0, 0), (255, 255, 255)}


def test_make_rng_passes_generators_through():
    rng = np.random.default_rng(1)
    assert make_rng(rng) is rng
    assert isinstance(make_rng(None), np.random.Generator)
    assert make_rng(5).integers(1000) == np.random.default_rng(5).integers(1000)


# =============================================================================
# Iteration cap and seeding draws
# =============================================================================

class FixedDraws:
    """Stand-in generator returning a fixed first index and fixed roulette draws."""

    def __init__(self, first, draws):
        self.first = first
        self.draws = list(draws)

    def integers(self, n):
        assert 0 <= self.first < n
        return self.first

    def random(self):
        return self.draws.pop(0)


def size_ordered(samples, centroids):
    sizes = np.bincount(assign(samples, centroids), minlength=len(centroids))
    return centroids[np.argsort(-sizes, kind='stable')]


def lloyd(samples, centroids, passes):
    """Run up to passes update steps, stopping early once centroids settle."""
    for _ in range(passes):
        new = update_centroids(samples, assign(samples, centroids), centroids)
        if np.array_equal(new, centroids):
            return new
        centroids = new
    return centroids


@pytest.fixture
def spread_samples():
    # Evenly spread samples need several passes to settle
    values = np.arange(0, 256, 5)
    return np.column_stack([values, values // 2, 255 - values])


def test_zero_iterations_returns_seeds_by_size(spread_samples):
    seeds = seed_centroids(spread_samples, 4, make_rng(21))
    result = cluster(spread_samples, 4, max_iterations=0, random_state=21)
    assert np.array_equal(result, size_ordered(spread_samples, seeds))


def test_iteration_cap_stops_after_one_pass(spread_samples):
    for seed in range(50):
        seeds = seed_centroids(spread_samples, 3, make_rng(seed))
        one_pass = lloyd(spread_samples, seeds, 1)
        settled = lloyd(spread_samples, seeds, 15)
        if not np.array_equal(one_pass, settled):
            break
    else:
        pytest.fail("no seed needed more than one pass")

    capped = cluster(spread_samples, 3, max_iterations=1, random_state=seed)
    full = cluster(spread_samples, 3, random_state=seed)
    assert np.array_equal(capped, size_ordered(spread_samples, one_pass))
    assert np.array_equal(full, size_ordered(spread_samples, settled))
    assert not np.array_equal(capped, full)


def test_roulette_picks_first_index_reaching_draw():
    samples = np.array([[0, 0, 0], [1, 0, 0], [3, 0, 0], [3, 1, 0]])
    # Squared distances to sample 0 are [0, 1, 9, 10]; running totals [0, 1, 10, 20]
    seeds = seed_centroids(samples, 2, FixedDraws(0, [0.3]))
    assert seeds.tolist() == [[0, 0, 0], [3, 0, 0]]

    # A draw landing exactly on a running total selects that index
    seeds = seed_centroids(samples, 2, FixedDraws(0, [0.5]))
    assert seeds.tolist() == [[0, 0, 0], [3, 0, 0]]

    seeds = seed_centroids(samples, 2, FixedDraws(0, [0.04]))
    assert seeds.tolist() == [[0, 0, 0], [1, 0, 0]]

    seeds = seed_centroids(samples, 2, FixedDraws(0, [0.99]))
    assert seeds.tolist() == [[0, 0, 0], [3, 1, 0]]


def test_roulette_with_no_distance_left_picks_index_zero():
    samples = np.array([[1, 1, 1], [9, 9, 9], [1, 1, 1], [9, 9, 9]])
    seeds = seed_centroids(samples, 3, FixedDraws(3, [0.3, 0.8]))
    # Third draw has zero total weight, so it lands on samples[0]
    assert seeds.tolist() == [[9, 9, 9], [1, 1, 1], [1, 1, 1]]
