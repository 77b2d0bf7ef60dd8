"""Plot a setpoint trajectory."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt


def plot_curve(
    title: str,
    xlabel: str,
    ylabel: str,
    data: Sequence[float],
    path: str | Path | None = None,
    *,
    show: bool = False,
):
    """Draw ``data`` against its sample index.

    The figure is saved to ``path`` when given and displayed when ``show`` is
    true.  It is returned so callers can tweak it further; figures that are
    neither kept for display nor returned should be closed by the caller.
    """
    fig, ax = plt.subplots(figsize=(10, 4))
    ax.plot(range(len(data)), data, linewidth=0.8)
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.grid(True)
    fig.tight_layout()
    if path is not None:
        fig.savefig(path)
    if show:
        plt.show()
    return fig
