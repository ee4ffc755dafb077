"""Headless-safe loss curve plotting."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple


class PlotAdapter:
    """Collect epoch losses and write a train/validation curve on :meth:`close`."""

    def __init__(self, path: str | Path, enable_plots: bool = True):
        self.enable_plots = enable_plots
        self.path = Path(path)
        self._history: List[Tuple[int, float, float]] = []

    def on_epoch(self, epoch: int, metrics):
        if not self.enable_plots:
            return
        train_loss = float(metrics.get("train_loss", 0.0))
        val_loss = float(metrics.get("val_loss", 0.0))
        self._history.append((epoch, train_loss, val_loss))

    def close(self) -> None:
        if not self.enable_plots or not self._history:
            return
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        epochs, train_losses, val_losses = zip(*self._history)
        fig, ax = plt.subplots()
        ax.plot(epochs, train_losses, label="train")
        ax.plot(epochs, val_losses, label="validation")
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Squared error")
        ax.set_title("Training Curve")
        ax.legend()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(self.path)
        plt.close(fig)

    __call__ = on_epoch
