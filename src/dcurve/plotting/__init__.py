"""Plotting of decision curves."""

from dcurve.plotting.dca import apply_plot_metadata, plot_decision_curve

__all__ = ["apply_plot_metadata", "plot_decision_curve"]
