"""
Implied volatility by Newton-Raphson iteration on the Black-Scholes price.

The solver works in volatility percentage points. Vega from
:class:`~optiondax.black_scholes.BlackScholesModel` is already expressed per
volatility point, so the Newton step ``vol - diff / vega`` needs no unit
conversion.

The solver always returns a number. Whether that number reproduces the
target price is reported through :attr:`ImpliedVolatilityResult.status`:

``CONVERGED``
    ``|price - target| < tolerance``.
``VEGA_TOO_SMALL``
    Vega fell below ``min_vega`` (deep in/out of the money, or a target the
    model cannot reach); the last evaluated volatility is returned.
``MAX_ITERATIONS``
    The iteration budget ran out; the last Newton update is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from .black_scholes import BlackScholesModel
from .config import SolverSettings
from .contract import OptionContract, OptionType

logger = logging.getLogger(__name__)


class SolverStatus(str, Enum):
    CONVERGED = "converged"
    VEGA_TOO_SMALL = "vega_too_small"
    MAX_ITERATIONS = "max_iterations"


@dataclass(frozen=True)
class NewtonStep:
    """One model evaluation of the Newton-Raphson loop."""

    iteration: int
    volatility: float
    price: float
    diff: float
    vega: float


@dataclass(frozen=True)
class ImpliedVolatilityResult:
    """
    Outcome of an implied-volatility search.

    Attributes
    ----------
    volatility : float
        Implied (or best-effort) volatility in percentage points.
    converged : bool
        True only when the target price was matched within tolerance.
    iterations : int
        Number of model evaluations performed.
    status : SolverStatus
        Reason the iteration stopped.
    steps : tuple of NewtonStep
        Per-evaluation history, oldest first.
    """

    volatility: float
    converged: bool
    iterations: int
    status: SolverStatus
    steps: tuple[NewtonStep, ...] = field(default=(), repr=False)


def implied_volatility(
    target_price: float,
    spot: float,
    strike: float,
    time_to_expiry: float,
    risk_free_rate: float,
    option_type: OptionType | str = OptionType.CALL,
    *,
    settings: SolverSettings | None = None,
) -> ImpliedVolatilityResult:
    """
    Find the volatility that reproduces an observed option price.

    Parameters
    ----------
    target_price : float
        Observed market price of the option.
    spot : float
        Spot price of the underlying.
    strike : float
        Strike price.
    time_to_expiry : float
        Time to expiry in years.
    risk_free_rate : float
        Annualized risk-free rate in percent.
    option_type : {"call", "put"}, default="call"
        Option whose price is inverted.
    settings : SolverSettings, optional
        Iteration parameters. Defaults to ``SolverSettings()`` (initial guess
        20, 100 iterations, tolerance 0.001, minimum vega 1e-4, floor 0.1).

    Returns
    -------
    ImpliedVolatilityResult
        Volatility in percentage points with convergence information. No
        exception is raised when the search fails to converge.

    Examples
    --------
    >>> result = implied_volatility(405.0, 25003.0, 25100.0, 36 / 365, 2.0, "call")
    >>> result.converged, 13.6 < result.volatility < 13.7
    (True, True)
    """

    settings = settings or SolverSettings()
    contract = OptionContract(
        spot=spot,
        strike=strike,
        time_to_expiry=time_to_expiry,
        risk_free_rate=risk_free_rate,
        volatility=settings.initial_guess,
        option_type=option_type,
    )

    vol = settings.initial_guess
    steps: list[NewtonStep] = []
    for iteration in range(1, settings.max_iterations + 1):
        model = BlackScholesModel(contract.with_volatility(vol))
        if contract.is_call:
            price, vega = model.call_price(), model.call_greeks().vega
        else:
            price, vega = model.put_price(), model.put_greeks().vega
        diff = price - target_price
        steps.append(NewtonStep(iteration, vol, price, diff, vega))
        logger.debug(
            "iv step %d: vol=%.6f price=%.6f diff=%.6f vega=%.6f",
            iteration, vol, price, diff, vega,
        )

        if abs(diff) < settings.tolerance:
            return ImpliedVolatilityResult(
                volatility=vol,
                converged=True,
                iterations=iteration,
                status=SolverStatus.CONVERGED,
                steps=tuple(steps),
            )

        if abs(vega) < settings.min_vega:
            logger.info(
                "iv search stopped: vega %.3g below %.3g at vol=%.4f (target=%.4f, K=%.2f)",
                vega, settings.min_vega, vol, target_price, strike,
            )
            return ImpliedVolatilityResult(
                volatility=vol,
                converged=False,
                iterations=iteration,
                status=SolverStatus.VEGA_TOO_SMALL,
                steps=tuple(steps),
            )

        vol = vol - diff / vega
        if vol <= 0:
            vol = settings.volatility_floor

    logger.info(
        "iv search did not converge after %d iterations (vol=%.4f, target=%.4f, K=%.2f)",
        settings.max_iterations, vol, target_price, strike,
    )
    return ImpliedVolatilityResult(
        volatility=vol,
        converged=False,
        iterations=settings.max_iterations,
        status=SolverStatus.MAX_ITERATIONS,
        steps=tuple(steps),
    )
