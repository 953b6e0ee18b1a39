import numpy as np

from impact_sim import sweep


def test_crater_grows_with_size_and_speed():
    sizes, speeds, craters, megatons = sweep.run_sweep(size_points=5, speed_points=4)

    assert craters.shape == (5, 4)
    assert sizes[0] == 10 and sizes[-1] == 10_000
    assert speeds[0] == 11 and speeds[-1] == 72
    assert np.all(np.diff(craters, axis=0) > 0)
    assert np.all(np.diff(craters, axis=1) > 0)
    assert np.all(np.diff(megatons, axis=1) > 0)


def test_heatmap_is_written(tmp_path):
    out = sweep.plot_heatmap(*sweep.run_sweep(size_points=6, speed_points=5), out_dir=tmp_path)

    assert out == tmp_path / "crater_sweep.png"
    assert out.stat().st_size > 0
