"""
Black-Scholes valuation of European options.

Greeks follow the trading journal's display convention rather than the
textbook units:

* delta is per unit of the underlying;
* gamma is the change in delta for a 1% move in spot, ``phi(d1) / (100 sigma sqrt(T))``;
* theta is per calendar day (annual theta divided by 365);
* vega is per volatility percentage point (``S sqrt(T) phi(d1) / 100``).

Portfolio aggregation relies on these units, in particular on vega being
expressed in the same unit as the percentage volatility inputs.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

import numpy as np

from .contract import OptionContract, OptionType
from .normal import standard_normal_cdf, standard_normal_pdf

DAYS_PER_YEAR = 365.0


@dataclass(frozen=True)
class PricingResult:
    """Theoretical fair value of an option."""

    price: float


@dataclass(frozen=True)
class GreeksResult:
    """
    Option sensitivities in the journal's scaling convention.

    Attributes
    ----------
    delta : float
        Price change per unit change in spot.
    gamma : float
        Delta change for a 1% move in spot.
    theta : float
        Price change per calendar day.
    vega : float
        Price change per volatility percentage point.
    """

    delta: float
    gamma: float
    theta: float
    vega: float

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


def _d1_d2(contract: OptionContract) -> tuple[float, float]:
    """
    Compute d1 and d2 for a contract.

    d1 = [ln(S/K) + (r + 0.5 sigma^2) T] / (sigma sqrt(T))
    d2 = d1 - sigma sqrt(T)

    Invalid inputs (negative spot, zero volatility, ...) produce NaN or
    infinities instead of raising.
    """
    with np.errstate(all="ignore"):
        spot = np.float64(contract.spot)
        strike = np.float64(contract.strike)
        maturity = np.float64(contract.time_to_expiry)
        sigma = np.float64(contract.sigma)

        sigma_sqrt_t = sigma * np.sqrt(maturity)
        numerator = np.log(spot / strike) + (contract.rate + 0.5 * sigma**2) * maturity
        d1 = numerator / sigma_sqrt_t
        d2 = d1 - sigma_sqrt_t
    return float(d1), float(d2)


@dataclass(frozen=True)
class BlackScholesModel:
    """
    Closed-form Black-Scholes model bound to one contract.

    ``d1`` and ``d2`` are evaluated once at construction and shared by the
    price and Greeks methods.

    Parameters
    ----------
    contract : OptionContract
        Contract to value.

    Examples
    --------
    >>> model = BlackScholesModel(OptionContract(100.0, 100.0, 1.0, 5.0, 20.0))
    >>> round(model.call_price(), 4)
    10.4506
    """

    contract: OptionContract
    d1: float = field(init=False)
    d2: float = field(init=False)

    def __post_init__(self) -> None:
        d1, d2 = _d1_d2(self.contract)
        object.__setattr__(self, "d1", d1)
        object.__setattr__(self, "d2", d2)

    @classmethod
    def from_inputs(
        cls,
        spot: float,
        strike: float,
        time_to_expiry: float,
        risk_free_rate: float,
        volatility: float,
        option_type: OptionType | str = OptionType.CALL,
    ) -> BlackScholesModel:
        """Build a model from raw contract inputs (rate and volatility in percent)."""
        contract = OptionContract(
            spot=spot,
            strike=strike,
            time_to_expiry=time_to_expiry,
            risk_free_rate=risk_free_rate,
            volatility=volatility,
            option_type=option_type,
        )
        return cls(contract)

    def _discounted_strike(self) -> float:
        c = self.contract
        with np.errstate(all="ignore"):
            return float(c.strike * np.exp(-c.rate * c.time_to_expiry))

    def call_price(self) -> float:
        """Price of the call: ``S N(d1) - K e^{-rT} N(d2)``."""
        with np.errstate(all="ignore"):
            value = (
                self.contract.spot * standard_normal_cdf(self.d1)
                - self._discounted_strike() * standard_normal_cdf(self.d2)
            )
        return float(value)

    def put_price(self) -> float:
        """Price of the put: ``K e^{-rT} N(-d2) - S N(-d1)``."""
        with np.errstate(all="ignore"):
            value = (
                self._discounted_strike() * standard_normal_cdf(-self.d2)
                - self.contract.spot * standard_normal_cdf(-self.d1)
            )
        return float(value)

    def price(self) -> PricingResult:
        """Price of the contract's own option type."""
        if self.contract.is_call:
            return PricingResult(price=self.call_price())
        return PricingResult(price=self.put_price())

    def _common_greeks(self) -> tuple[float, float, float]:
        # gamma, vega and the decay term are shared by calls and puts
        c = self.contract
        with np.errstate(all="ignore"):
            sqrt_t = np.sqrt(c.time_to_expiry)
            pdf = standard_normal_pdf(self.d1)
            gamma = pdf / (100.0 * c.sigma * sqrt_t)
            vega = c.spot * sqrt_t * pdf / 100.0
            decay = -(c.spot * pdf * c.sigma) / (2.0 * sqrt_t)
        return float(gamma), float(vega), float(decay)

    def call_greeks(self) -> GreeksResult:
        gamma, vega, decay = self._common_greeks()
        with np.errstate(all="ignore"):
            carry = self.contract.rate * self._discounted_strike() * standard_normal_cdf(self.d2)
            theta = (decay - carry) / DAYS_PER_YEAR
        return GreeksResult(
            delta=float(standard_normal_cdf(self.d1)),
            gamma=gamma,
            theta=float(theta),
            vega=vega,
        )

    def put_greeks(self) -> GreeksResult:
        gamma, vega, decay = self._common_greeks()
        with np.errstate(all="ignore"):
            carry = self.contract.rate * self._discounted_strike() * standard_normal_cdf(-self.d2)
            theta = (decay + carry) / DAYS_PER_YEAR
        return GreeksResult(
            delta=float(standard_normal_cdf(self.d1) - 1.0),
            gamma=gamma,
            theta=float(theta),
            vega=vega,
        )

    def greeks(self) -> GreeksResult:
        """Greeks of the contract's own option type."""
        if self.contract.is_call:
            return self.call_greeks()
        return self.put_greeks()


def black_scholes_price(
    *,
    spot: float,
    strike: float,
    time_to_expiry: float,
    risk_free_rate: float,
    volatility: float,
    option_type: OptionType | str = OptionType.CALL,
) -> PricingResult:
    """
    Price a European call or put using the Black-Scholes model.

    Parameters
    ----------
    spot : float
        Spot price of the underlying asset.
    strike : float
        Strike price.
    time_to_expiry : float
        Time to expiry in years; non-positive values are floored to 1e-6.
    risk_free_rate : float
        Annualized risk-free rate in percent.
    volatility : float
        Annualized volatility in percent.
    option_type : {"call", "put"}, default="call"
        Selects the payoff to price.

    Returns
    -------
    PricingResult
        Theoretical price.

    Raises
    ------
    ValueError
        If the option type is not recognised.

    Examples
    --------
    >>> result = black_scholes_price(spot=100.0, strike=100.0, time_to_expiry=1.0,
    ...                              risk_free_rate=5.0, volatility=20.0, option_type="put")
    >>> round(result.price, 4)
    5.5735
    """

    model = BlackScholesModel.from_inputs(
        spot, strike, time_to_expiry, risk_free_rate, volatility, option_type
    )
    return model.price()


def black_scholes_greeks(
    *,
    spot: float,
    strike: float,
    time_to_expiry: float,
    risk_free_rate: float,
    volatility: float,
    option_type: OptionType | str = OptionType.CALL,
) -> GreeksResult:
    """
    Compute delta, gamma, theta and vega in a single pass.

    Parameters
    ----------
    spot, strike, time_to_expiry, risk_free_rate, volatility, option_type
        As for :func:`black_scholes_price`.

    Returns
    -------
    GreeksResult
        Greeks scaled per 1% spot move (gamma), per calendar day (theta)
        and per volatility point (vega).
    """

    model = BlackScholesModel.from_inputs(
        spot, strike, time_to_expiry, risk_free_rate, volatility, option_type
    )
    return model.greeks()
