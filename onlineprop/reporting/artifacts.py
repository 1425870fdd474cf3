"""Run artifact helpers: manifests and weight files."""

from __future__ import annotations

import json
import subprocess
import time
from pathlib import Path
from typing import Mapping, Tuple

import numpy as np

from ..core.types import Array, Topology
from ..core.weights import resolve_initial_weights


def _git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except (OSError, subprocess.CalledProcessError):  # pragma: no cover - git may be unavailable
        return "unknown"


def write_manifest(
    path: str | Path,
    *,
    config: Mapping[str, object],
    results: Mapping[str, object],
) -> str:
    """Write a manifest JSON file capturing the configuration and results of a run."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "git_sha": _git_sha(),
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": config,
        "results": dict(results),
    }
    path.write_text(json.dumps(manifest, indent=2, default=str))
    return str(path)


def save_weights(path: str | Path, weights: Array, topology: Topology) -> str:
    """Store ``weights`` and the topology they belong to as ``.npz``."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        np.savez_compressed(
            handle,
            weights=np.asarray(weights),
            topology=np.array(
                [topology.num_inputs, topology.num_hidden, topology.num_outputs],
                dtype=np.int64,
            ),
        )
    return str(path)


def load_weights(path: str | Path) -> Tuple[Array, Topology]:
    """Load weights written by :func:`save_weights`, checking their shape."""

    with np.load(Path(path)) as payload:
        if "weights" not in payload.files or "topology" not in payload.files:
            raise KeyError(f"{path} is not a weights file")
        num_inputs, num_hidden, num_outputs = (int(v) for v in payload["topology"])
        topology = Topology(num_inputs, num_hidden, num_outputs)
        weights = resolve_initial_weights(topology, payload["weights"])
    return weights, topology


__all__ = ["write_manifest", "save_weights", "load_weights"]
