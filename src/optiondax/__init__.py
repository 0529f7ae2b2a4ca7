"""
Public API for the optiondax package.
"""

from .black_scholes import (
    BlackScholesModel,
    GreeksResult,
    PricingResult,
    black_scholes_greeks,
    black_scholes_price,
)
from .config import AppSettings, SolverSettings
from .contract import MIN_TIME_TO_EXPIRY, OptionContract, OptionType
from .diagnostics import implied_volatility_trace, plot_implied_volatility_trace
from .expiry import time_to_expiry, year_fraction
from .implied_vol import (
    ImpliedVolatilityResult,
    NewtonStep,
    SolverStatus,
    implied_volatility,
)
from .normal import erf, standard_normal_cdf, standard_normal_pdf

__all__ = [
    # Contract
    "MIN_TIME_TO_EXPIRY",
    "OptionContract",
    "OptionType",
    # Normal distribution
    "erf",
    "standard_normal_cdf",
    "standard_normal_pdf",
    # Black-Scholes
    "BlackScholesModel",
    "GreeksResult",
    "PricingResult",
    "black_scholes_greeks",
    "black_scholes_price",
    # Implied volatility
    "ImpliedVolatilityResult",
    "NewtonStep",
    "SolverStatus",
    "implied_volatility",
    # Expiry
    "time_to_expiry",
    "year_fraction",
    # Settings
    "AppSettings",
    "SolverSettings",
    # Analysis tools
    "implied_volatility_trace",
    "plot_implied_volatility_trace",
]

__version__ = "0.1.0"
