"""CLI implementation of the curve and cv commands."""

from pathlib import Path
from typing import Any

from dcurve.config.loader import load_curve_config, print_config_summary, save_config
from dcurve.config.validation import validate_curve_config
from dcurve.data.formula import as_model_specs, referenced_variables
from dcurve.data.io import read_observations_csv
from dcurve.evaluation.cross_validation import cv_decision_curve_from_config
from dcurve.evaluation.curves import decision_curve_from_config
from dcurve.evaluation.reports import save_curve_results, summarize_decision_curve
from dcurve.utils.logging import log_section, setup_logger, verbosity_to_level


def cli_args_to_overrides(cli_args: dict[str, Any]) -> list[str]:
    """
    Translate CLI option values into dot-notation config overrides.

    Options left at None (not given) are skipped.
    """
    seed = cli_args.get("seed")
    n_jobs = cli_args.get("n_jobs")
    mapping: dict[str, Any] = {
        "infile": cli_args.get("infile"),
        "fitted_risk": cli_args.get("fitted_risk") or None,
        "model.estimator": cli_args.get("estimator"),
        "bootstrap.n_boot": cli_args.get("bootstraps"),
        "bootstrap.confidence_intervals": cli_args.get("confidence_intervals"),
        "bootstrap.seed": seed,
        "bootstrap.n_jobs": n_jobs,
        "cv.folds": cli_args.get("folds"),
        "cv.random_state": seed,
        "cv.n_jobs": n_jobs,
        "output.outdir": cli_args.get("outdir"),
        "output.prefix": cli_args.get("prefix"),
        "output.plot": cli_args.get("plot") or None,
        "output.plot_metric": cli_args.get("plot_metric"),
        "thresholds.values": cli_args.get("threshold_values"),
    }

    formulas = cli_args.get("formula") or ()
    if formulas:
        mapping["formula"] = ",".join(formulas)

    grid = cli_args.get("thresholds")
    if grid:
        parts = [p.strip() for p in str(grid).split(",")]
        if len(parts) != 3:
            raise ValueError(f"--thresholds must be 'min,max,step', got {grid!r}")
        mapping["thresholds.min"], mapping["thresholds.max"], mapping["thresholds.step"] = parts

    return [f"{key}={value}" for key, value in mapping.items() if value is not None]


def run_decision_curve(
    config_file: str | None = None,
    cli_args: dict[str, Any] | None = None,
    overrides: list[str] | None = None,
    cross_validate: bool = False,
    verbose: int = 0,
) -> dict[str, str]:
    """
    Load data, compute decision curves, and write results.

    Args:
        config_file: Path to YAML config file (optional)
        cli_args: Dictionary of CLI arguments (optional)
        overrides: List of config overrides (optional)
        cross_validate: Run the k-fold variant instead of the bootstrap one
        verbose: Verbosity level (0=INFO, 1=DEBUG)

    Returns:
        Dict of written file paths
    """
    logger = setup_logger("dcurve", level=verbosity_to_level(verbose))
    title = "Cross-Validated Decision Curves" if cross_validate else "Decision Curves"
    log_section(logger, title)

    all_overrides = cli_args_to_overrides(cli_args or {}) + list(overrides or [])

    logger.info("Loading configuration...")
    config = load_curve_config(config_file=config_file, overrides=all_overrides)
    validate_curve_config(config)
    print_config_summary(config, logger=logger)

    if config.infile is None:
        raise ValueError("An input file is required. Provide 'infile' in config or via --infile.")
    if not config.formula:
        raise ValueError(
            "At least one formula is required. Provide 'formula' in config or via --formula."
        )

    log_section(logger, "Loading Data")
    specs = as_model_specs(config.formula, fitted_risk=config.fitted_risk)
    data = read_observations_csv(config.infile, usecols=referenced_variables(specs))

    log_section(logger, "Computing Curves")
    if cross_validate:
        result = cv_decision_curve_from_config(config, data)
    else:
        result = decision_curve_from_config(config, data)

    log_section(logger, "Saving Results")
    outdir = Path(config.output.outdir)
    paths = save_curve_results(result, outdir, prefix=config.output.prefix)
    config_path = outdir / f"{config.output.prefix}config.yaml"
    save_config(config, config_path)
    paths["config_yaml"] = str(config_path)

    if config.output.plot:
        from dcurve.plotting.dca import plot_decision_curve

        plot_path = outdir / f"{config.output.prefix}decision_curve.png"
        plot_decision_curve(
            result,
            str(plot_path),
            metric=config.output.plot_metric,
            meta_lines=[f"CI: {result.confidence_intervals}", f"n removed: {result.n_removed}"],
        )
        paths["plot_png"] = str(plot_path)
        logger.info(f"Saved plot to {plot_path}")

    summary = summarize_decision_curve(result, metric=config.output.plot_metric)
    for row in summary.to_dict("records"):
        logger.info(
            f"{row['model']}: beats All at {row['beats_all_range']}, "
            f"beats None at {row['beats_none_range']}"
        )

    log_section(logger, "Done")
    return paths
