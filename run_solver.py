"""
Hydra Solver Runner - runs sequential or MPI hotplate solvers based on n_ranks.

Usage:
    uv run python run_solver.py rows=500 cols=500 epsilon=0.01
    uv run python run_solver.py n_ranks=4 sync=halo mlflow.mode=local output=results.h5
    uv run python run_solver.py -m n_ranks=1,2,4 sync=broadcast,halo
"""

import logging
import os
import subprocess
import sys
from pathlib import Path

import hydra
from omegaconf import DictConfig, OmegaConf

sys.path.insert(0, str(Path(__file__).parent / "src"))

log = logging.getLogger(__name__)

_CONFIG_KEYS = [
    "rows", "cols", "top", "left", "right", "bottom", "epsilon", "max_iter",
    "n_ranks", "sync", "use_numba", "numba_threads", "experiment_name", "report", "output",
]


def _create_solver(cfg: DictConfig, is_mpi: bool = False, **mpi_kwargs):
    """Create solver instance from config."""
    from Hotplate import ConvergenceReporter, HotplateSolver, HotplateMPISolver

    cls = HotplateMPISolver if is_mpi else HotplateSolver
    params = {
        "max_iter": cfg.get("max_iter"),
        "use_numba": cfg.get("use_numba", False),
        "numba_threads": cfg.get("numba_threads", 1),
        "experiment_name": cfg.get("experiment_name", "default"),
        "reporter": ConvergenceReporter(enabled=cfg.get("report", True)),
    }
    if is_mpi:
        params.update(mpi_kwargs)

    return cls(
        cfg.rows, cfg.cols, cfg.top, cfg.left, cfg.right, cfg.bottom, cfg.epsilon,
        **params,
    )


def _log_results(cfg: DictConfig, solver, topology: list = None):
    """Log solver results to MLflow."""
    import mlflow
    import pandas as pd
    from dataclasses import asdict
    from utils.mlflow.io import (
        start_mlflow_run_context, log_parameters, log_metrics_dict, log_timeseries_metrics,
        log_artifact_file,
    )

    n_ranks = solver.config.n_ranks
    run_name = f"{cfg.rows}x{cfg.cols}_p{n_ranks}" + (f"_{solver.config.sync}" if solver.config.sync else "")

    with start_mlflow_run_context(
        experiment_name=solver.config.experiment_name,
        parent_run_name=f"{cfg.rows}x{cfg.cols}",
        child_run_name=run_name,
    ):
        log_parameters(solver.config.to_mlflow())
        log_metrics_dict(solver.metrics.to_mlflow())
        log_timeseries_metrics(solver.timeseries)

        if topology:
            topo_df = pd.DataFrame([{**asdict(t), "n_rows": t.n_rows} for t in topology])
            mlflow.log_table(topo_df, artifact_file="topology.json")
            log_parameters({"nodes": topo_df["hostname"].nunique()})

        if cfg.get("output"):
            log_artifact_file(Path(cfg.output))


def _report(solver):
    m = solver.metrics
    log.info(
        f"Done: {m.iterations} iter, converged={m.converged}, max diff={m.final_max_diff:.3e}, "
        f"time={m.wall_time:.3f}s" + (f", {m.mlups:.1f} Mlup/s" if m.mlups else "")
    )


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Entry point - runs sequential or spawns MPI based on n_ranks."""
    n_ranks = cfg.get("n_ranks", 1)
    log.info(f"hotplate {cfg.rows}x{cfg.cols}, epsilon={cfg.epsilon}, n_ranks={n_ranks}")

    if n_ranks == 1:
        _run_sequential(cfg)
    else:
        _spawn_mpi(cfg, n_ranks)


def _run_sequential(cfg: DictConfig):
    """Run sequential solver."""
    solver = _create_solver(cfg)
    if cfg.get("use_numba"):
        solver.warmup()
    solver.solve()
    _report(solver)
    if cfg.get("output"):
        solver.save_hdf5(cfg.output)

    if cfg.mlflow.mode != "off":
        from utils.mlflow.io import setup_mlflow_tracking

        setup_mlflow_tracking(mode=cfg.mlflow.mode)
        _log_results(cfg, solver)


def _spawn_mpi(cfg: DictConfig, n_ranks: int):
    """Spawn MPI subprocess running this file."""
    env = os.environ.copy()
    env["MPI_SUBPROCESS"] = "1"

    cmd = ["mpiexec", "-n", str(n_ranks), sys.executable, os.path.abspath(__file__)]
    for key in _CONFIG_KEYS:
        val = cfg.get(key)
        if val is not None:
            cmd.append(f"{key}={val}")
    cmd.append(f"mlflow.mode={cfg.mlflow.mode}")

    result = subprocess.run(
        cmd, capture_output=True, text=True, env=env, timeout=cfg.mpi.get("timeout", 3600)
    )
    for line in (result.stdout or "").strip().split("\n"):
        if line:
            log.info(line)
    for line in (result.stderr or "").strip().split("\n"):
        if line:
            log.warning(line) if "error" in line.lower() else log.info(line)
    if result.returncode != 0:
        log.error(f"mpiexec exited with code {result.returncode}")
        sys.exit(result.returncode)


def _run_mpi_solver(cfg: DictConfig, comm):
    """Run MPI solver (called within mpiexec subprocess)."""
    rank = comm.Get_rank()

    solver = _create_solver(cfg, is_mpi=True, sync=cfg.get("sync", "broadcast"), comm=comm)
    if cfg.get("use_numba"):
        solver.warmup()
    solver.solve()
    topology = solver.gather_topology()
    solver.free()
    if cfg.get("output"):
        solver.save_hdf5(cfg.output)

    if rank == 0:
        _report(solver)
        if cfg.mlflow.mode != "off":
            from utils.mlflow.io import setup_mlflow_tracking

            setup_mlflow_tracking(mode=cfg.mlflow.mode)
            _log_results(cfg, solver, topology)


def _parse_value(val: str):
    """Parse a key=value override the way Hydra would for simple scalars."""
    low = val.lower()
    if low in ("true", "false"):
        return low == "true"
    if low in ("none", "null"):
        return None
    try:
        return int(val)
    except ValueError:
        pass
    try:
        return float(val)
    except ValueError:
        return val


if __name__ == "__main__":
    if os.environ.get("MPI_SUBPROCESS"):
        from mpi4py import MPI

        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

        # Parse key=value args
        cfg_dict = {}
        for arg in sys.argv[1:]:
            if "=" in arg and not arg.startswith("-"):
                key, val = arg.split("=", 1)
                d = cfg_dict
                for k in key.split(".")[:-1]:
                    d = d.setdefault(k, {})
                d[key.split(".")[-1]] = _parse_value(val)

        try:
            _run_mpi_solver(OmegaConf.create(cfg_dict), MPI.COMM_WORLD)
        except Exception:
            log.exception(f"Rank {MPI.COMM_WORLD.Get_rank()} failed")
            MPI.COMM_WORLD.Abort(1)
    else:
        main()
