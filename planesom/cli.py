#!/usr/bin/env python3
import argparse
import logging
import sys

from planesom.errors import SOMError
from planesom.params import SOMParameters
from planesom.points import load_points
from planesom.training import Trainer
from planesom.visualization import SnapshotRenderer, make_output_dir
from planesom.winner import quantization_error

logger = logging.getLogger("planesom")


def parse_args(argv=None):
    defaults = SOMParameters()
    p = argparse.ArgumentParser(
        description="Train a 2D self-organizing map on points read from a text file"
    )

    p.add_argument(
        "--points", type=str, default="points.txt", help="File with one 'x y' pair per line"
    )

    # SOMParameters
    p.add_argument("--rows", type=int, default=defaults.rows, help="Grid rows")
    p.add_argument("--cols", type=int, default=defaults.cols, help="Grid columns")
    p.add_argument(
        "--input-dim", type=int, default=defaults.input_dim, help="Prototype dimension (>= 2)"
    )
    p.add_argument(
        "--init",
        type=str,
        choices=["lattice", "random"],
        default=defaults.init,
        help="Weight initialization: regular lattice over the plane or uniform random",
    )
    p.add_argument("--low", type=float, default=defaults.bounds[0], help="Lower bound of the coordinate plane")
    p.add_argument("--high", type=float, default=defaults.bounds[1], help="Upper bound of the coordinate plane")
    p.add_argument("--cell-size", type=float, default=defaults.cell_size, help="Lattice spacing")
    p.add_argument(
        "--seed", type=int, default=None, help="Seed for random initialization"
    )
    p.add_argument(
        "--initial-lr", type=float, default=defaults.initial_lr, help="Initial learning rate"
    )
    p.add_argument(
        "--initial-radius",
        type=float,
        default=defaults.initial_radius,
        help="Initial neighborhood radius",
    )
    p.add_argument(
        "--time-constant",
        type=float,
        default=defaults.time_constant,
        help="Decay time constant shared by learning rate and radius",
    )
    p.add_argument(
        "--lr-threshold",
        type=float,
        default=defaults.lr_threshold,
        help="Stop once the learning rate falls to this value",
    )

    # Training / rendering
    p.add_argument("--max-epochs", type=int, default=None, help="Stop after this many epochs")
    p.add_argument(
        "--snapshot-every",
        type=int,
        default=None,
        help="Render a snapshot after every n-th point of each epoch",
    )
    p.add_argument(
        "--epoch-snapshots", action="store_true", help="Render a snapshot at the end of every epoch"
    )
    p.add_argument(
        "--output-root",
        type=str,
        default=".",
        help="Directory in which the timestamped plots_* directory is created",
    )
    p.add_argument("--no-render", dest="render", action="store_false", help="Do not write any PNG")
    p.add_argument(
        "--no-logging",
        dest="enable_logging",
        action="store_false",
        help="Disable INFO-level logs",
    )
    p.add_argument(
        "--no-progress",
        dest="show_progress",
        action="store_false",
        help="Disable tqdm bars",
    )
    return p.parse_args(argv)


def setup_logging(enable_logging: bool):
    handler = logging.StreamHandler()
    fmt = "%(asctime)s %(levelname)s %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    if not logger.handlers:
        logger.addHandler(handler)
    logger.setLevel(logging.INFO if enable_logging else logging.WARNING)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.enable_logging)

    params = SOMParameters(
        rows=args.rows,
        cols=args.cols,
        input_dim=args.input_dim,
        init=args.init,
        bounds=(args.low, args.high),
        cell_size=args.cell_size,
        seed=args.seed,
        initial_lr=args.initial_lr,
        initial_radius=args.initial_radius,
        time_constant=args.time_constant,
        lr_threshold=args.lr_threshold,
    )

    try:
        points = load_points(args.points)
        grid = params.build_grid()
        logger.info(f"Loaded {len(points)} points from {args.points}, {grid}")

        trainer = Trainer(
            grid,
            points,
            schedule=params.build_schedule(),
            learning_rate_threshold=params.lr_threshold,
            snapshot_every=args.snapshot_every,
            show_progress=args.show_progress,
        )

        renderer = None
        if args.render:
            out_dir = make_output_dir(args.output_root)
            logger.info(f"Writing plots to {out_dir}")
            renderer = SnapshotRenderer(
                out_dir, points, bounds=params.bounds, render_epochs=args.epoch_snapshots
            )
            renderer.render_initial(grid)
            trainer.snapshot_hook = renderer

        epoch = trainer.train(max_epochs=args.max_epochs)
        if renderer is not None:
            renderer.render_final(grid, epoch)
        logger.info(f"Stopped at epoch {epoch} ({trainer.state.value})")
        logger.info(f"Quantization error: {quantization_error(points, grid):.4f}")
    except (OSError, SOMError, ValueError) as e:
        logger.error(f"Training failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
