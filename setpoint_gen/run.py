import argparse
import logging
import sys

import pandas as pd

from rng.rng_manager import RngManager, time_seed

from .config_loader import load_config
from .generator import ConfigError, SetPointConfig, SetPointGenerator

EPISODE_LENGTH = 10000
STREAM_NAME = "setpoint"

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

COLUMNS = [
    "step",
    "setpoint",
    "change_rate_per_step",
    "current_steps",
    "last_sequence_steps",
]


def simulate(
    config: SetPointConfig,
    steps: int = EPISODE_LENGTH,
    seed: int | None = None,
    episode: int = 0,
) -> pd.DataFrame:
    """Step a fresh generator ``steps`` times and return one row per tick.

    The generator draws from the ``episode`` stream derived from the master
    ``seed``, so every episode of a run gets its own reproducible trajectory.
    Each row holds the setpoint returned by the tick and the segment state
    right after it.
    """
    if steps <= 0:
        raise ValueError("steps must be > 0")
    if episode < 0:
        raise ValueError("episode must be >= 0")
    if seed is None:
        seed = time_seed()
    rng = RngManager(seed).get_stream(STREAM_NAME, episode)
    gen = SetPointGenerator(config, seed, rng=rng)
    rows = []
    for i in range(steps):
        value = gen.step()
        rows.append(
            (i, value, gen.change_rate_per_step, gen.current_steps, gen.last_sequence_steps)
        )
    return pd.DataFrame(rows, columns=COLUMNS)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Setpoint trajectory generator")
    parser.add_argument(
        "config",
        nargs="?",
        default="sim.properties",
        help="Properties, INI or JSON file holding the setpoint parameters",
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=EPISODE_LENGTH,
        help="Number of ticks to generate",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed (defaults to the current time in milliseconds)",
    )
    parser.add_argument(
        "--episode",
        type=int,
        default=0,
        help="Episode index selecting the random stream derived from the seed",
    )
    parser.add_argument("--csv", type=str, help="Write the trajectory to this CSV file")
    parser.add_argument("--plot", type=str, help="Save a plot of the trajectory to this file")
    parser.add_argument("--show", action="store_true", help="Display the plot")
    parser.add_argument("--debug", action="store_true", help="Log every segment and reflection")
    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    if args.steps < 1:
        parser.error("--steps must be >= 1")
    if args.episode < 0:
        parser.error("--episode must be >= 0")

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        logger.error(f"Invalid configuration: {exc}")
        sys.exit(2)

    seed = args.seed if args.seed is not None else time_seed()
    logger.info(
        f"Setpoint trajectory: steps={args.steps}, seed={seed}, episode={args.episode}, "
        f"stationary={config.stationary}, range=[{config.min_setpoint}, {config.max_setpoint}]"
    )
    df = simulate(config, args.steps, seed, args.episode)
    logger.info(
        f"SetPoint min={df['setpoint'].min():.3f} max={df['setpoint'].max():.3f} "
        f"mean={df['setpoint'].mean():.3f} segments={int((df['current_steps'] == 1).sum())}"
    )

    if args.csv:
        df.to_csv(args.csv, index=False)
        logger.info(f"Trajectory written to {args.csv}")

    if args.plot or args.show:
        import matplotlib.pyplot as plt

        from .plot import plot_curve

        fig = plot_curve(
            "SetPoint Trajectory",
            "Time",
            "SetPoint [%]",
            df["setpoint"].to_numpy(),
            args.plot,
            show=args.show,
        )
        if args.plot:
            logger.info(f"Plot saved to {args.plot}")
        plt.close(fig)

    return df


if __name__ == "__main__":
    main()
