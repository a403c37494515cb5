"""Plots of substance and material properties."""

from __future__ import annotations

import logging

import matplotlib.pyplot as plt
import numpy as np

logger = logging.getLogger(__name__)


def plot_vapor_pressure_curve(
    substance,
    t_min: float,
    t_max: float,
    num_points: int = 200,
    ax=None,
    save_path: str = None,
):
    """Plot the Antoine vapor pressure of a substance against temperature.

    The grid is clipped to the coefficients' validity range; points outside
    it (infinite pressures) are masked.

    Args:
        substance: Substance with Antoine coefficients
        t_min: Lowest temperature [K]
        t_max: Highest temperature [K]
        num_points: Number of grid points
        ax: Axes to draw on (a new figure when None)
        save_path: If provided, save to file and close the figure

    Returns:
        The matplotlib Figure

    Raises:
        ValueError: If the substance has no Antoine coefficients or the
            temperature range is empty
    """
    if not getattr(substance, "has_antoine", False):
        raise ValueError(f"Substance '{substance.name}' has no Antoine coefficients")
    if substance.antoine_min_temperature is not None:
        t_min = max(t_min, substance.antoine_min_temperature)
    if substance.antoine_max_temperature is not None:
        t_max = min(t_max, substance.antoine_max_temperature)
    if t_min >= t_max:
        raise ValueError(f"Empty temperature range: t_min={t_min}, t_max={t_max}")

    temperatures = np.linspace(t_min, t_max, num_points)
    pressures = np.array([substance.vapor_pressure(t) for t in temperatures], dtype=float)
    pressures = np.ma.masked_invalid(pressures)

    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 6))
    else:
        fig = ax.figure

    ax.semilogy(temperatures, pressures, linewidth=2, label=substance.name)
    ax.set_xlabel('Temperature [K]')
    ax.set_ylabel('Vapor pressure [kPa]')
    ax.set_title(f'Vapor Pressure: {substance.name}')
    ax.grid(True, alpha=0.3)
    ax.legend()

    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info("Saved: %s", save_path)
        plt.close(fig)

    return fig


def plot_composition(node, ax=None, save_path: str = None, top: int = 8):
    """Bar chart of the homogenized composition of a substance or material.

    Args:
        node: Substance, mixture, material or composite
        ax: Axes to draw on (a new figure when None)
        save_path: If provided, save to file and close the figure
        top: Number of largest constituents shown; the rest are summed
            into 'Other'

    Returns:
        The matplotlib Figure
    """
    flat = sorted(node.homogenize().items(), key=lambda item: item[1], reverse=True)
    labels = [ref.name for ref, _ in flat[:top]]
    values = [float(p) for _, p in flat[:top]]
    rest = sum(float(p) for _, p in flat[top:])
    if rest > 0:
        labels.append('Other')
        values.append(rest)

    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 6))
    else:
        fig = ax.figure

    positions = np.arange(len(values))
    ax.bar(positions, np.array(values) * 100.0)
    ax.set_xticks(positions)
    ax.set_xticklabels(labels, rotation=30, ha='right')
    ax.set_ylabel('Proportion [%]')
    ax.set_title(f'Composition: {getattr(node, "name", type(node).__name__)}')
    ax.grid(True, axis='y', alpha=0.3)

    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info("Saved: %s", save_path)
        plt.close(fig)

    return fig
