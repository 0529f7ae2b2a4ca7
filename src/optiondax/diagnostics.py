"""
Convergence diagnostics for the implied-volatility solver.

Tabulates and plots the Newton-Raphson history so a non-converged result
can be inspected: whether the iteration stalled on a vanishing vega,
oscillated, or was pushed onto the volatility floor.
"""

from __future__ import annotations

from dataclasses import asdict

import numpy as np
import pandas as pd

from .config import SolverSettings
from .contract import OptionType
from .implied_vol import implied_volatility

TRACE_COLUMNS = ["iteration", "volatility", "price", "diff", "vega"]


def implied_volatility_trace(
    target_price: float,
    spot: float,
    strike: float,
    time_to_expiry: float,
    risk_free_rate: float,
    option_type: OptionType | str = OptionType.CALL,
    *,
    settings: SolverSettings | None = None,
) -> pd.DataFrame:
    """
    Run the solver and return its per-iteration history.

    Parameters
    ----------
    target_price, spot, strike, time_to_expiry, risk_free_rate, option_type
        As for :func:`optiondax.implied_vol.implied_volatility`.
    settings : SolverSettings, optional
        Solver parameters.

    Returns
    -------
    pandas.DataFrame
        One row per model evaluation with columns:
        - iteration: 1-based evaluation number
        - volatility: volatility guess in percentage points
        - price: model price at that guess
        - diff: model price minus target
        - vega: vega per volatility point
        ``df.attrs`` holds ``"status"``, ``"converged"`` and
        ``"volatility"`` (the solver's returned value).

    Examples
    --------
    >>> df = implied_volatility_trace(405.0, 25003.0, 25100.0, 36 / 365, 2.0)
    >>> df.attrs["converged"]
    True
    """

    result = implied_volatility(
        target_price,
        spot,
        strike,
        time_to_expiry,
        risk_free_rate,
        option_type,
        settings=settings,
    )

    df = pd.DataFrame([asdict(step) for step in result.steps], columns=TRACE_COLUMNS)
    df.attrs["status"] = result.status.value
    df.attrs["converged"] = result.converged
    df.attrs["volatility"] = result.volatility
    return df


def plot_implied_volatility_trace(
    df: pd.DataFrame,
    log_scale: bool = True,
    title: str = "Implied Volatility Search",
) -> tuple:
    """
    Create diagnostic plots from a solver trace.

    Generates two plots:
    1. Volatility guess vs iteration
    2. Absolute pricing error vs iteration (log scale if log_scale=True)

    Parameters
    ----------
    df : pandas.DataFrame
        Result of :func:`implied_volatility_trace`.
    log_scale : bool, default=True
        Use a logarithmic y axis for the error plot.
    title : str, default="Implied Volatility Search"
        Title for the plots.

    Returns
    -------
    tuple
        (fig, axes) matplotlib figure and axes objects.

    Notes
    -----
    Requires matplotlib to be installed.
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError(
            "matplotlib is required for plotting. Install with: pip install matplotlib"
        )

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    ax1 = axes[0]
    ax1.plot(df["iteration"], df["volatility"], "o-", linewidth=2, markersize=8)
    ax1.set_xlabel("Iteration", fontsize=12)
    ax1.set_ylabel("Volatility (%)", fontsize=12)
    ax1.set_title(f"{title}\nVolatility Guess", fontsize=13)
    ax1.grid(True, alpha=0.3)

    ax2 = axes[1]
    errors = np.abs(df["diff"].to_numpy(dtype=float))
    # zero errors cannot be drawn on a log axis
    if log_scale and np.all(errors > 0):
        ax2.semilogy(df["iteration"], errors, "s-", linewidth=2, markersize=8, color="red")
        ax2.set_ylabel("|Price - Target| (log scale)", fontsize=12)
    else:
        ax2.plot(df["iteration"], errors, "s-", linewidth=2, markersize=8, color="red")
        ax2.set_ylabel("|Price - Target|", fontsize=12)
    ax2.set_xlabel("Iteration", fontsize=12)

    status = df.attrs.get("status")
    suffix = f" ({status})" if status else ""
    ax2.set_title(f"{title}\nPricing Error{suffix}", fontsize=13)
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig, axes
