import numpy as np
import pytest

from floodsim.diffusive import DiffusiveModel, StepStats, compute_stats, run


def _flat(n=6, level=1.0):
    return np.full((n, n), level, dtype=np.float32)


def _mound(n=9):
    eta = _flat(n)
    eta[n // 2, n // 2] = 2.0
    return eta


def test_flat_surface_without_rain_stays_level():
    model = DiffusiveModel(lagged_corner=False)
    eta = _flat()
    out = model.step(eta, np.zeros_like(eta), np.zeros_like(eta))
    np.testing.assert_array_equal(out, eta)


def test_first_corner_lags_one_step():
    model = DiffusiveModel()
    eta = _flat()
    z = np.zeros_like(eta)
    first = model.step(eta, z, 0.0)
    assert first[0, 0] == 0.0
    assert first[1, 1] == 1.0
    second = model.step(first, z, 0.0)
    assert second[0, 0] == first[1, 0]


def test_uniform_rain_raises_whole_grid():
    model = DiffusiveModel(dt=0.5, lagged_corner=False)
    eta = _flat()
    out = model.step(eta, np.zeros_like(eta), 0.2)
    expected = np.float32(1.0) + np.float32(0.5) * np.float32(0.2)
    np.testing.assert_allclose(out, expected, rtol=1e-6)


def test_dry_cells_exchange_no_water():
    rng = np.random.default_rng(3)
    z = rng.random((7, 8)).astype(np.float32)
    model = DiffusiveModel(lagged_corner=False)
    out = model.step(z, z, np.zeros_like(z))
    np.testing.assert_array_equal(out[1:-1, 1:-1], z[1:-1, 1:-1])


def test_edges_copy_their_inner_neighbours():
    model = DiffusiveModel(lagged_corner=False)
    eta = _mound()
    out = model.step(eta, np.zeros_like(eta), 0.0)
    np.testing.assert_array_equal(out[0, :], out[1, :])
    np.testing.assert_array_equal(out[-1, :], out[-2, :])
    np.testing.assert_array_equal(out[:, 0], out[:, 1])
    np.testing.assert_array_equal(out[:, -1], out[:, -2])


def test_mound_spreads_symmetrically():
    model = DiffusiveModel(lagged_corner=False)
    eta = _mound()
    out = model.step(eta, np.zeros_like(eta), 0.0)
    np.testing.assert_allclose(out, out.T, rtol=1e-6)
    np.testing.assert_allclose(out, out[::-1, ::-1], rtol=1e-6)
    assert out[4, 4] < eta[4, 4]


def test_damping_scales_the_change():
    eta = _mound()
    z = np.zeros_like(eta)
    damped = DiffusiveModel(damping=0.98, lagged_corner=False).step(eta, z, 0.0)
    free = DiffusiveModel(damping=1.0, lagged_corner=False).step(eta, z, 0.0)
    change_damped = (damped - eta)[1:-1, 1:-1]
    change_free = (free - eta)[1:-1, 1:-1]
    np.testing.assert_allclose(change_damped, 0.98 * change_free, rtol=1e-4, atol=1e-6)


def test_mismatched_shapes_raise():
    model = DiffusiveModel()
    with pytest.raises(ValueError):
        model.step(_flat(5), _flat(6), 0.0)


def test_too_small_grid_raises():
    model = DiffusiveModel()
    with pytest.raises(ValueError):
        model.step(_flat(2), _flat(2), 0.0)


def test_compute_stats():
    eta = np.array([[1.0, 2.0], [3.0, 4.0]], dtype=np.float32)
    rain = np.full((2, 2), 2.0, dtype=np.float32)
    stats = compute_stats(eta, rain, 0.5, 2.0, 3.0)
    assert stats.max_eta == 4.0
    assert stats.min_eta == 1.0
    assert stats.eta_volume == pytest.approx(60.0)
    assert stats.rain_volume == pytest.approx(24.0)


def test_compute_stats_is_linear_in_rain():
    eta = _flat(4)
    one = compute_stats(eta, np.ones_like(eta), 0.1, 1.0, 1.0)
    three = compute_stats(eta, 3 * np.ones_like(eta), 0.1, 1.0, 1.0)
    assert three.rain_volume == pytest.approx(3 * one.rain_volume)
    assert isinstance(one, StepStats) and one.eta_volume == three.eta_volume


def test_run_yields_every_step_and_keeps_input():
    eta = _mound()
    original = eta.copy()
    z = np.zeros_like(eta)
    asked = []

    def rain_for_step(step):
        asked.append(step)
        return 0.0

    results = list(run(DiffusiveModel(lagged_corner=False), eta, z, rain_for_step, 4))
    assert [step for step, _, _ in results] == [0, 1, 2, 3]
    assert asked == [0, 1, 2, 3]
    np.testing.assert_array_equal(eta, original)


def test_run_matches_repeated_steps():
    eta = _mound()
    z = np.zeros_like(eta)
    results = list(run(DiffusiveModel(), eta, z, lambda step: 0.01, 3))
    model = DiffusiveModel()
    current = eta
    for _ in range(3):
        current = model.step(current, z, 0.01)
    np.testing.assert_array_equal(results[-1][1], current)
    assert results[-1][2].max_eta == float(current.max())