from __future__ import annotations
import os
import csv
from typing import Dict, Tuple, List, Iterable
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401  (registers 3D projection)

from flexrod.dynamics.rod import Rod


def _load_csv(filepath: str) -> Tuple[np.ndarray, Dict[str, np.ndarray], List[str]]:
    """
    Load a CSV produced by CSVLogger.

    Returns
    -------
    t : (N,) array
        Time vector.
    cols : dict[str, np.ndarray]
        Mapping column_name -> (N,) array.
    headers : list[str]
        Column headers in order (first one should be 't').
    """
    with open(filepath, "r", newline="") as f:
        reader = csv.reader(f)
        headers = next(reader)
    if headers[0] != "t":
        raise ValueError("First column must be time 't'.")
    data = np.loadtxt(filepath, delimiter=",", skiprows=1, dtype=float, ndmin=2)
    if data.shape[0] == 0:
        raise ValueError(f"No data rows in {filepath}.")
    cols: Dict[str, np.ndarray] = {}
    for j, name in enumerate(headers):
        cols[name] = data[:, j]
    return cols["t"], cols, headers


def _get_components(cols: Dict[str, np.ndarray], names: Iterable[str]) -> List[np.ndarray]:
    out = []
    for name in names:
        if name not in cols:
            raise KeyError(f"Column '{name}' not found in CSV.")
        out.append(cols[name])
    return out


def _finish(fig: Figure, save_path: str | None, show: bool) -> Figure:
    fig.tight_layout()
    if save_path:
        os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
        fig.savefig(save_path, dpi=180, bbox_inches="tight")
    if show:
        plt.show()
    return fig


def plot_tip_trajectory(
    csv_path: str,
    save_path: str | None = None,
    show: bool = True,
) -> Figure:
    """
    Plot the 3D tip path (with the handle path) and the tip-handle distance.

    Parameters
    ----------
    csv_path : str
        Path to logger CSV (needs the "tip" and "handle" fields).
    save_path : str | None
        If given, save the figure to this path (png/svg).
    show : bool
        Whether to call plt.show().

    Returns
    -------
    fig : Figure
    """
    t, cols, _ = _load_csv(csv_path)
    tx, ty, tz = _get_components(cols, ["tip_x", "tip_y", "tip_z"])
    hx, hy, hz = _get_components(cols, ["handle_x", "handle_y", "handle_z"])
    dist = np.linalg.norm(np.column_stack([tx - hx, ty - hy, tz - hz]), axis=1)

    fig = plt.figure(figsize=(10, 6))
    gs = fig.add_gridspec(2, 2, height_ratios=[2.0, 1.0])
    ax3d = fig.add_subplot(gs[0, :], projection="3d")
    axd = fig.add_subplot(gs[1, :])

    ax3d.plot(tx, ty, tz, lw=2.0, color="#1a73e8", label="tip")
    ax3d.plot(hx, hy, hz, lw=1.0, color="#5f6368", label="handle")
    ax3d.scatter(tx[0], ty[0], tz[0], color="#34a853", s=40, label="start")
    ax3d.scatter(tx[-1], ty[-1], tz[-1], color="#ea4335", s=40, label="end")
    ax3d.set_xlabel("x"); ax3d.set_ylabel("y"); ax3d.set_zlabel("z")
    ax3d.set_title("Tip trajectory")
    ax3d.legend(loc="best")

    axd.plot(t, dist, color="#1a73e8", lw=2)
    axd.set_xlabel("t [s]"); axd.set_ylabel("|tip - handle|")
    axd.grid(True, alpha=0.3)
    axd.set_title("Tip distance vs time")

    return _finish(fig, save_path, show)


def plot_constraint_metrics(
    csv_path: str,
    max_stretch_ratio: float | None = None,
    max_bend_angle: float | None = None,
    save_path: str | None = None,
    show: bool = True,
) -> Figure:
    """
    Plot stretch ratio and bend angle over time against their hard limits.

    Limits are drawn as dashed lines when given; a bend limit of 179.9°
    or more is treated as unconstrained and not drawn.
    """
    t, cols, _ = _load_csv(csv_path)
    stretch, bend = _get_components(cols, ["stretch", "bend"])

    fig, axes = plt.subplots(2, 1, figsize=(10, 6), sharex=True)

    axes[0].plot(t, stretch, color="#1a73e8", lw=2, label="stretch")
    axes[0].axhline(1.0, color="#5f6368", lw=1, alpha=0.6)
    if max_stretch_ratio is not None:
        axes[0].axhline(max_stretch_ratio, color="#ea4335", ls="--", label="max stretch")
    axes[0].set_ylabel("distance / active length")
    axes[0].grid(True, alpha=0.3)
    axes[0].legend(loc="best")
    axes[0].set_title("Axial stretch")

    axes[1].plot(t, bend, color="#34a853", lw=2, label="bend")
    if max_bend_angle is not None and max_bend_angle < 179.9:
        axes[1].axhline(max_bend_angle, color="#ea4335", ls="--", label="max bend")
    axes[1].set_xlabel("t [s]"); axes[1].set_ylabel("angle [deg]")
    axes[1].grid(True, alpha=0.3)
    axes[1].legend(loc="best")
    axes[1].set_title("Bend angle")

    return _finish(fig, save_path, show)


def plot_rod_shape(
    rod: Rod,
    segments: int = 30,
    save_path: str | None = None,
    show: bool = True,
) -> Figure:
    """
    Plot the current rod curve with pommel / grip / tip markers.

    Parameters
    ----------
    rod : Rod
        Rod to draw (its state is only read).
    segments : int
        Curve resolution passed to ``Rod.sample_curve``.
    """
    pts = rod.sample_curve(segments)
    marks = rod.landmarks()

    fig = plt.figure(figsize=(7, 7))
    ax = fig.add_subplot(111, projection="3d")
    ax.plot(pts[:, 0], pts[:, 1], pts[:, 2], lw=3.0, color="#3b82f6")
    colors = {"pommel": "#a855f7", "grip": "#10b981", "tip": "#ef4444"}
    for name, p in marks.items():
        ax.scatter(p.x, p.y, p.z, color=colors[name], s=50, label=name)
    ax.set_xlabel("x"); ax.set_ylabel("y"); ax.set_zlabel("z")
    ax.set_title(f"Rod shape ({rod.length:g} long, grip {rod.properties.grip_ratio:.2f})")
    ax.legend(loc="best")

    return _finish(fig, save_path, show)
