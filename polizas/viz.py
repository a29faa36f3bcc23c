"""
polizas.viz
===========

Plotting helper for the policy dashboard: a bar chart of how many
policies sit in each status.  *matplotlib* is only imported when this
module is, so importing `polizas` alone stays lightweight.
"""
from __future__ import annotations

import os
from collections import Counter
from pathlib import Path
from typing import Iterable

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from .display import get_status_display  # noqa: E402
from .models import Policy, PolicyStatus  # noqa: E402

# default output dir
_IMG_DIR = Path("images")


def status_summary(
    policies: Iterable[Policy],
    out_path: str | os.PathLike = _IMG_DIR / "status_snapshot.png",
) -> Path:
    """
    Generate a bar chart of how many policies are in each status.

    Every status is plotted, including the empty ones, in enum order.

    Parameters
    ----------
    policies : iterable of Policy
        Usually a PolicyBook or a freshly re‑stamped list.
    out_path : str or Path, default='images/status_snapshot.png'
        Where to save the PNG (parent directories are created).

    Returns
    -------
    pathlib.Path
        Final image path for convenience.
    """
    counts = Counter(p.status for p in policies)
    xs = list(PolicyStatus)
    ys = [counts.get(s, 0) for s in xs]

    plt.figure()
    bars = plt.bar([get_status_display(s).label for s in xs], ys,
                   color=[get_status_display(s).color_tier.value for s in xs],
                   edgecolor="#333")
    # add counts on top of each bar
    for rect, cnt in zip(bars, ys):
        plt.text(rect.get_x() + rect.get_width() / 2,
                 cnt + 0.05,
                 str(cnt),
                 ha="center", va="bottom",
                 fontsize=8, color="#333")
    plt.grid(axis="y", linestyle=":", alpha=0.3)
    plt.xticks(rotation=30, ha="right", fontsize=7)
    plt.title("Status Snapshot")
    plt.ylabel("Policy Count")
    plt.tight_layout()

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close()
    return out_path
