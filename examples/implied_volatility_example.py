#!/usr/bin/env python3
"""
Implied Volatility Example
==========================

This script demonstrates the optiondax package on a DAX call option:
the implied volatility is backed out of an observed market price, the
option is repriced at that volatility and its Greeks are shown in the
journal's scaling convention.

To run this example:
    python examples/implied_volatility_example.py

With custom parameters:
    python examples/implied_volatility_example.py --spot 25003 --strike 25100 \
        --price 405 --valuation 2026-02-12 --expiry 2026-03-20 --rate 2 --type call

The script will:
1. Convert the valuation and expiry dates into a year fraction
2. Solve for the implied volatility with Newton-Raphson
3. Reprice the option and display its Greeks
4. Plot the solver's convergence history
"""

import argparse

import matplotlib.pyplot as plt

from optiondax import (
    BlackScholesModel,
    OptionContract,
    implied_volatility_trace,
    plot_implied_volatility_trace,
    year_fraction,
)
from optiondax.log import setup_logging


def parse_args():
    parser = argparse.ArgumentParser(
        description="Implied volatility example for the optiondax package.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--spot", type=float, default=25003.0, help="Current DAX level")
    parser.add_argument("--strike", type=float, default=25100.0, help="Strike price")
    parser.add_argument("--price", type=float, default=405.0, help="Observed option price")
    parser.add_argument("--valuation", type=str, default="2026-02-12", help="Valuation date")
    parser.add_argument("--expiry", type=str, default="2026-03-20", help="Expiry date")
    parser.add_argument("--rate", type=float, default=2.0, help="Risk-free rate in percent")
    parser.add_argument("--type", type=str, default="call", help="call or put")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    parser.add_argument("--output", type=str, default="examples/iv_convergence.png", help="Output file for the plot")
    parser.add_argument("--no-plot", action="store_true", help="Skip displaying the plot (still saves to file)")
    return parser.parse_args()


def main():
    args = parse_args()
    setup_logging(args.log_level)

    years = year_fraction(args.valuation, args.expiry)

    # ==========================================================================
    # Part 1: Implied Volatility
    # ==========================================================================
    print("=" * 60)
    print("Implied Volatility (Newton-Raphson)")
    print("=" * 60)

    trace = implied_volatility_trace(
        args.price,
        args.spot,
        args.strike,
        years,
        args.rate,
        args.type,
    )
    vol = trace.attrs["volatility"]

    print(f"Spot:         {args.spot:.2f}")
    print(f"Strike:       {args.strike:.2f}")
    print(f"Market price: {args.price:.2f}")
    print(f"Expiry:       {years:.4f} years ({years * 365:.0f} days)")
    print(f"Rate:         {args.rate:.2f}%")
    print()
    print(f"Implied vol:  {vol:.4f}%")
    print(f"Status:       {trace.attrs['status']} after {len(trace)} evaluations")

    # ==========================================================================
    # Part 2: Repricing and Greeks
    # ==========================================================================
    print()
    print("=" * 60)
    print("Repricing and Greeks")
    print("=" * 60)

    model = BlackScholesModel(
        OptionContract(args.spot, args.strike, years, args.rate, vol, args.type)
    )
    greeks = model.greeks()

    print(f"Model price: {model.price().price:.4f}")
    print(f"Delta: {greeks.delta:+.4f}  (per point of the index)")
    print(f"Gamma: {greeks.gamma:+.4f}  (delta change for a 1% index move)")
    print(f"Theta: {greeks.theta:+.4f}  (per calendar day)")
    print(f"Vega:  {greeks.vega:+.4f}  (per volatility point)")

    # ==========================================================================
    # Part 3: Visualization
    # ==========================================================================
    fig, _ = plot_implied_volatility_trace(
        trace, title=f"{args.type.title()} K={args.strike:.0f}"
    )
    fig.savefig(args.output, dpi=150)
    print()
    print(f"Convergence plot saved to: {args.output}")

    if not args.no_plot:
        plt.show()


if __name__ == "__main__":
    main()
