import numpy as np
import pytest

from floodsim.overland import OverlandModel, rainfall_depth
from floodsim.rainfall import idf_intensity


def _terrain(shape=(8, 7), seed=11):
    return np.random.default_rng(seed).random(shape).astype(np.float32)


def test_rainfall_depth_follows_idf_curve():
    for t in (0.0, 30.0, 600.0):
        assert rainfall_depth(t, 0.1) == pytest.approx(idf_intensity(t) * 0.1 * 1000.0)


def test_rainfall_depth_decreases_with_time():
    depths = [rainfall_depth(t, 0.1) for t in (0.0, 60.0, 600.0, 3600.0)]
    assert depths == sorted(depths, reverse=True)


def test_rainfall_depth_scales_with_step_length():
    assert rainfall_depth(120.0, 0.4) == pytest.approx(4 * rainfall_depth(120.0, 0.1))


def test_apply_rainfall_is_uniform():
    model = OverlandModel(np.zeros((5, 4)), dx=2.0, dy=3.0)
    model.apply_rainfall(0.25)
    assert np.all(model.water == np.float32(0.25))
    assert model.total_volume() == pytest.approx(0.25 * model.water.size * 2.0 * 3.0)


def test_flat_terrain_has_no_flow():
    model = OverlandModel(np.ones((6, 6)))
    model.apply_rainfall(0.1)
    before = model.water.copy()
    model.update_flow()
    model.update_water()
    assert np.all(model.flow_x == 0.0)
    assert np.all(model.flow_y == 0.0)
    np.testing.assert_array_equal(model.water, before)


def test_flow_sign_follows_surface_difference():
    elevation = np.zeros((5, 5), dtype=np.float32)
    elevation[2, 2] = 1.0
    model = OverlandModel(elevation)
    model.update_flow()
    assert model.flow_x[2, 2] < 0.0
    assert model.flow_y[2, 2] < 0.0
    assert model.flow_x[2, 1] > 0.0
    assert model.flow_y[1, 2] > 0.0


def test_flux_edges_stay_zero():
    model = OverlandModel(_terrain())
    for t in (0.0, 0.1, 0.2):
        model.step(t)
    rows, cols = model.flow_x.shape
    zero_row = np.zeros(cols, dtype=np.float32)
    zero_col = np.zeros(rows, dtype=np.float32)
    np.testing.assert_array_equal(model.flow_x[0, :], zero_row)
    np.testing.assert_array_equal(model.flow_x[-1, :], zero_row)
    np.testing.assert_array_equal(model.flow_x[:, 0], zero_col)
    np.testing.assert_array_equal(model.flow_x[:, -1], zero_col)
    np.testing.assert_array_equal(model.flow_y[0, :], zero_row)
    np.testing.assert_array_equal(model.flow_y[-1, :], zero_row)
    np.testing.assert_array_equal(model.flow_y[:, 0], zero_col)
    np.testing.assert_array_equal(model.flow_y[:, -1], zero_col)


def test_water_never_negative():
    model = OverlandModel(_terrain() * 5.0)
    for step in range(10):
        model.step(step * model.dt)
        assert model.water.min() >= 0.0


def test_step_reports_rain_and_volume():
    model = OverlandModel(_terrain(), dt=0.2)
    rain, volume = model.step(30.0)
    assert rain == rainfall_depth(30.0, 0.2)
    assert volume == model.total_volume()


def test_one_dimensional_elevation_raises():
    with pytest.raises(ValueError):
        OverlandModel(np.zeros(9))