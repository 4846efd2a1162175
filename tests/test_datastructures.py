"""Tests for run configuration and metrics records."""

from Hotplate import GlobalMetrics, GlobalParams, LocalMetrics


def test_params_to_mlflow_drops_none_and_casts_bools():
    params = GlobalParams(rows=10, cols=12, top=1, left=2, right=3, bottom=4, epsilon=0.1)
    logged = params.to_mlflow()

    assert "max_iter" not in logged  # None
    assert logged["use_numba"] == 0
    assert logged["rows"] == 10
    assert logged["environment"] in ("hpc", "local")


def test_params_temperatures():
    params = GlobalParams(rows=10, cols=12, top=1, left=2, right=3, bottom=4, epsilon=0.1)
    temps = params.temperatures

    assert (temps.top, temps.left, temps.right, temps.bottom) == (1, 2, 3, 4)


def test_metrics_to_mlflow():
    metrics = GlobalMetrics(converged=True, iterations=7, final_max_diff=0.01)
    assert metrics.to_mlflow() == {"converged": 1, "iterations": 7, "final_max_diff": 0.01}


def test_local_metrics_clear():
    ts = LocalMetrics(compute_times=[1.0], sync_times=[2.0], max_diff_history=[3.0])
    ts.clear()
    assert ts.compute_times == ts.sync_times == ts.max_diff_history == []
