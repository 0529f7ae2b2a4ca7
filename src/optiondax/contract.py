"""
Option contract terms shared by the pricing model and the solver.

Rates and volatilities are quoted in *percent* (``2.0`` means 2%), the way
they are entered in the trading journal. Conversion to fractions happens
only inside the model through :attr:`OptionContract.rate` and
:attr:`OptionContract.sigma`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

# Replaces a non-positive time to expiry so d1 never divides by zero.
MIN_TIME_TO_EXPIRY = 1e-6


class OptionType(str, Enum):
    """
    Payoff direction of a European option.

    Attributes
    ----------
    CALL : str
        Right to buy at the strike.
    PUT : str
        Right to sell at the strike.
    """

    CALL = "call"
    PUT = "put"

    @classmethod
    def _missing_(cls, value: object) -> OptionType | None:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


@dataclass(frozen=True)
class OptionContract:
    """
    Inputs of a single Black-Scholes valuation.

    Parameters
    ----------
    spot : float
        Current underlying price.
    strike : float
        Strike price.
    time_to_expiry : float
        Time to expiry in years. Values that are not strictly positive are
        floored to ``MIN_TIME_TO_EXPIRY``.
    risk_free_rate : float
        Annualized risk-free rate in percent.
    volatility : float
        Annualized volatility in percent.
    option_type : OptionType or str, default=OptionType.CALL
        ``"call"`` or ``"put"`` (case-insensitive).

    Notes
    -----
    Spot, strike and volatility are deliberately not validated. Callers
    guard their inputs; invalid values surface as NaN in the results.

    Examples
    --------
    >>> contract = OptionContract(100.0, 100.0, 0.0, 2.0, 20.0, "Put")
    >>> contract.time_to_expiry, contract.option_type
    (1e-06, <OptionType.PUT: 'put'>)
    """

    spot: float
    strike: float
    time_to_expiry: float
    risk_free_rate: float
    volatility: float
    option_type: OptionType = OptionType.CALL

    def __post_init__(self) -> None:
        object.__setattr__(self, "option_type", OptionType(self.option_type))
        # NaN fails the comparison and is floored as well
        if not self.time_to_expiry > 0:
            object.__setattr__(self, "time_to_expiry", MIN_TIME_TO_EXPIRY)

    @property
    def rate(self) -> float:
        """Risk-free rate as a fraction."""
        return self.risk_free_rate / 100.0

    @property
    def sigma(self) -> float:
        """Volatility as a fraction."""
        return self.volatility / 100.0

    @property
    def is_call(self) -> bool:
        return self.option_type is OptionType.CALL

    def with_volatility(self, volatility: float) -> OptionContract:
        """Return a copy of the contract priced at another volatility (percent)."""
        return replace(self, volatility=volatility)

    def intrinsic_value(self) -> float:
        """
        Payoff if exercised now.

        Returns
        -------
        float
            ``max(S - K, 0)`` for calls, ``max(K - S, 0)`` for puts.
        """
        if self.is_call:
            return max(self.spot - self.strike, 0.0)
        return max(self.strike - self.spot, 0.0)
