"""Command line entry point for starseed-nn: train or infer on 15-minute window features."""

from __future__ import annotations

import argparse
import json
import math
from typing import Iterable, Sequence

from starseed_nn.config import TrainConfig, load_config
from starseed_nn.data import read_jsonl
from starseed_nn.models import load_artifact
from starseed_nn.reporting import CsvSink, JsonlSink, PlotAdapter
from starseed_nn.training import TrainReport, predict, train_model


def _format_result(report: TrainReport) -> str:
    best_loss = report.result.best_loss
    payload = {
        "out": report.out_path,
        "epochs": report.result.epochs_run,
        "best_val_loss": best_loss if math.isfinite(best_loss) else None,
        "threshold": report.artifact.threshold,
        "stopped_early": report.result.stopped_early,
    }
    return json.dumps(payload, sort_keys=True, allow_nan=False)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="starseed-nn", description=__doc__)
    commands = parser.add_subparsers(dest="command", required=True)

    train = commands.add_parser("train", help="Train the MLP on JSONL samples")
    train.add_argument("--config", help="Optional JSON/YAML file with train options")
    train.add_argument("--out", help="Model output path (default: model.json)")
    train.add_argument("--data", help="Training JSONL path (default: stdin)")
    train.add_argument("--hidden", type=int, help="Hidden layer width (default: 64)")
    train.add_argument("--epochs", type=int, help="Maximum number of epochs (default: 10)")
    train.add_argument("--lr", type=float, help="SGD learning rate (default: 0.01)")
    train.add_argument(
        "--val-split", type=float, help="Validation fraction in [0, 1) (default: 0.2)"
    )
    train.add_argument(
        "--patience", type=int, help="Epochs without improvement before stopping (default: 3)"
    )
    train.add_argument("--checkpoint", help="Checkpoint path (default: the output path)")
    train.add_argument(
        "--calibrate",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Calibrate a decision threshold on the validation split (default: on)",
    )
    train.add_argument("--seed", type=int, help="Seed for shuffling and initialisation")
    train.add_argument("--metrics", help="Write per-epoch metrics to this JSONL file")
    train.add_argument("--metrics-csv", help="Write per-epoch metrics to this CSV file")
    train.add_argument("--plot", help="Write the loss curve to this PNG file")

    infer = commands.add_parser("infer", help="Predict output vectors for JSONL samples")
    infer.add_argument("--model", default="model.json", help="Model artifact path")
    infer.add_argument("--data", help="Input JSONL path (default: stdin)")
    return parser.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> TrainConfig:
    config = TrainConfig()
    if args.config:
        config = TrainConfig.from_mapping({**config.to_dict(), **load_config(args.config)})
    return config.merged(
        out=args.out,
        data=args.data,
        hidden=args.hidden,
        epochs=args.epochs,
        lr=args.lr,
        val_split=args.val_split,
        patience=args.patience,
        checkpoint=args.checkpoint,
        calibrate=args.calibrate,
        seed=args.seed,
        metrics=args.metrics,
        metrics_csv=args.metrics_csv,
        plot=args.plot,
    )


def _print_startup_summary(config: TrainConfig, n_samples: int) -> None:
    print("=== starseed-nn run ===")
    print(f"Samples       : {n_samples}")
    print(f"Hidden        : {config.hidden}")
    print(f"Epochs        : {config.epochs}")
    print(f"Learning rate : {config.lr}")
    print(f"Val split     : {config.val_split}")
    print(f"Patience      : {config.patience}")
    print(f"Checkpoint    : {config.checkpoint_path}")
    print(f"Calibrate     : {config.calibrate}")
    print(f"Seed          : {config.seed}")
    print("=======================")


def run_train(args: argparse.Namespace) -> None:
    config = _resolve_config(args)
    samples = read_jsonl(config.data)
    _print_startup_summary(config, len(samples))

    callbacks: list[object] = []
    if config.metrics:
        callbacks.append(JsonlSink(config.metrics, seed=config.seed))
    if config.metrics_csv:
        callbacks.append(CsvSink(config.metrics_csv))
    plotter = PlotAdapter(config.plot) if config.plot else None
    if plotter is not None:
        callbacks.append(plotter)

    report = train_model(samples, config, callbacks=callbacks)
    if plotter is not None:
        plotter.close()
    print(_format_result(report))


def run_infer(args: argparse.Namespace) -> None:
    artifact = load_artifact(args.model)
    samples = read_jsonl(args.data, require_targets=False)
    for output in predict(artifact, samples):
        print(json.dumps(output.tolist()))


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        if args.command == "train":
            run_train(args)
        else:
            run_infer(args)
    except (OSError, ValueError, KeyError, TypeError, RuntimeError) as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    main()
