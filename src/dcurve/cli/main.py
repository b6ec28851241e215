"""
Main CLI entry point for dcurve.

Provides subcommands:
  - dcurve curve: Decision curves with bootstrap confidence bands
  - dcurve cv: K-fold cross-validated decision curves
"""

import click

from dcurve import __version__
from dcurve.config.defaults import VALID_ESTIMATORS, VALID_PLOT_METRICS


@click.group()
@click.version_option(version=__version__, prog_name="dcurve")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v for DEBUG)",
)
@click.pass_context
def cli(ctx, verbose):
    """
    dcurve: Decision curve analysis for risk prediction models

    Estimates net benefit of treating individuals whose predicted risk
    exceeds each threshold, against the treat-all and treat-none strategies.
    """
    from dcurve.utils.random import read_seed_global

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    # SEED_GLOBAL stands in for --seed when that option is omitted
    ctx.obj["seed_global"] = read_seed_global()


def common_options(func):
    """Options shared by the curve and cv commands."""
    options = [
        click.option(
            "--config",
            "-c",
            type=click.Path(exists=True),
            help="Path to YAML configuration file",
        ),
        click.option(
            "--infile",
            type=click.Path(exists=True),
            default=None,
            help="Input CSV file with outcome and predictor columns",
        ),
        click.option(
            "--formula",
            "-f",
            multiple=True,
            help="Model formula 'outcome ~ x1 + x2' (can be repeated)",
        ),
        click.option(
            "--fitted-risk",
            is_flag=True,
            default=None,
            help="Right-hand side columns are already-estimated risks (no model fitting)",
        ),
        click.option(
            "--thresholds",
            default=None,
            help="Threshold grid as 'min,max,step' (e.g., 0,0.5,0.01)",
        ),
        click.option(
            "--threshold-values",
            default=None,
            help="Explicit comma-separated thresholds (overrides --thresholds)",
        ),
        click.option(
            "--estimator",
            type=click.Choice(VALID_ESTIMATORS),
            default=None,
            help="Risk model fitted for each formula",
        ),
        click.option("--seed", type=int, default=None, help="Random seed"),
        click.option(
            "--n-jobs",
            type=int,
            default=None,
            help="Parallel workers for replicates/folds (-1 = all cores)",
        ),
        click.option(
            "--outdir",
            type=click.Path(),
            default=None,
            help="Output directory (default: results/)",
        ),
        click.option("--prefix", default=None, help="Output filename prefix"),
        click.option("--plot", is_flag=True, default=None, help="Save a decision curve plot"),
        click.option(
            "--plot-metric",
            type=click.Choice(VALID_PLOT_METRICS),
            default=None,
            help="Metric on the plot y-axis",
        ),
        click.option(
            "--override",
            multiple=True,
            help="Override config values (format: key=value or nested.key=value)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@cli.command("curve")
@common_options
@click.option(
    "--bootstraps",
    "-b",
    type=int,
    default=None,
    help="Number of bootstrap replicates (default: 500)",
)
@click.option(
    "--confidence-intervals",
    default=None,
    help="Confidence level of the bands (e.g., 0.95) or 'none'",
)
@click.pass_context
def curve(ctx, config, **kwargs):
    """Calculate decision curves with bootstrap confidence bands."""
    from dcurve.cli.run import run_decision_curve

    if kwargs["seed"] is None:
        kwargs["seed"] = ctx.obj.get("seed_global")
    overrides = list(kwargs.pop("override", []))
    run_decision_curve(
        config_file=config,
        cli_args=kwargs,
        overrides=overrides,
        cross_validate=False,
        verbose=ctx.obj.get("verbose", 0),
    )


@cli.command("cv")
@common_options
@click.option(
    "--folds",
    "-k",
    type=int,
    default=None,
    help="Number of cross-validation folds (default: 5)",
)
@click.pass_context
def cv(ctx, config, **kwargs):
    """Calculate k-fold cross-validated decision curves."""
    from dcurve.cli.run import run_decision_curve

    if kwargs["seed"] is None:
        kwargs["seed"] = ctx.obj.get("seed_global")
    overrides = list(kwargs.pop("override", []))
    run_decision_curve(
        config_file=config,
        cli_args=kwargs,
        overrides=overrides,
        cross_validate=True,
        verbose=ctx.obj.get("verbose", 0),
    )


def main():
    """Entry point for console script."""
    cli(obj={})


if __name__ == "__main__":
    main()
