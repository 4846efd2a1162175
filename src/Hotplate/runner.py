"""Run the hotplate solver via mpiexec subprocess."""

import json
import os
import subprocess
import sys
import tempfile
from pathlib import Path

# Let OpenMPI start more ranks than cores and run inside root containers
_MPI_ENV = {
    "OMPI_MCA_rmaps_base_oversubscribe": "1",
    "PRTE_MCA_rmaps_default_mapping_policy": ":oversubscribe",
    "OMPI_ALLOW_RUN_AS_ROOT": "1",
    "OMPI_ALLOW_RUN_AS_ROOT_CONFIRM": "1",
}


def run_solver(
    rows: int,
    cols: int,
    top: float,
    left: float,
    right: float,
    bottom: float,
    epsilon: float,
    n_ranks: int = 1,
    output: str = None,
    timeout: float = 300,
    **kwargs,
) -> dict:
    """Run the MPI solver on ``n_ranks`` processes and load its results.

    Parameters
    ----------
    rows, cols, top, left, right, bottom, epsilon
        Problem definition, as for :class:`HotplateMPISolver`.
    n_ranks : int
        Number of MPI ranks
    output : str, optional
        Path to save HDF5 results (uses temp file if not provided)
    **kwargs
        Extra options: sync, max_iter, use_numba, numba_threads

    Returns
    -------
    dict
        Config and metrics, plus ``max_diff_history`` (list) and ``grid``
        (ndarray); or an 'error' key on failure.
    """
    import pandas as pd

    use_temp = output is None
    if use_temp:
        tmp = tempfile.NamedTemporaryFile(suffix=".h5", delete=False)
        output = tmp.name
        tmp.close()

    config = {
        "rows": rows, "cols": cols, "top": top, "left": left, "right": right,
        "bottom": bottom, "epsilon": epsilon, "output": output, **kwargs,
    }
    cmd = [
        "mpiexec", "-n", str(n_ranks),
        sys.executable, "-m", "Hotplate.helpers.runner_helper", json.dumps(config),
    ]

    env = os.environ.copy()
    env.update(_MPI_ENV)
    src_dir = str(Path(__file__).resolve().parent.parent)
    env["PYTHONPATH"] = os.pathsep.join(p for p in [src_dir, env.get("PYTHONPATH")] if p)

    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, env=env, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        return {"error": f"mpiexec timed out after {e.timeout}s"}

    if proc.returncode != 0:
        return {"error": proc.stderr}

    if not Path(output).exists():
        return {"error": "No output file created", "stderr": proc.stderr}

    result = pd.read_hdf(output, key="results").iloc[0].to_dict()
    with pd.HDFStore(output, mode="r") as store:
        keys = set(store.keys())
    if "/timeseries" in keys:
        ts = pd.read_hdf(output, key="timeseries")
        result["max_diff_history"] = ts["max_diff_history"].dropna().tolist()
    if "/grid" in keys:
        result["grid"] = pd.read_hdf(output, key="grid").to_numpy()
    result["stdout"] = proc.stdout

    if use_temp:
        Path(output).unlink(missing_ok=True)

    return result
