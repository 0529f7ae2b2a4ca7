"""
Command line front end: ``optiondax price|iv|tte``.
"""

from __future__ import annotations

import argparse
import json
import sys

from .black_scholes import BlackScholesModel
from .config import AppSettings
from .contract import OptionContract, OptionType
from .expiry import time_to_expiry, year_fraction
from .implied_vol import implied_volatility
from .log import setup_logging

LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


def _kind(s: str) -> OptionType:
    s = s.lower()
    if s in {"call", "c"}:
        return OptionType.CALL
    if s in {"put", "p"}:
        return OptionType.PUT
    raise argparse.ArgumentTypeError("type must be 'call' or 'put'")


def _years(args: argparse.Namespace) -> float:
    if args.years is not None:
        if args.valuation is not None:
            raise ValueError("--valuation only applies with --expiry")
        return args.years
    if args.valuation is not None:
        return year_fraction(args.valuation, args.expiry)
    return time_to_expiry(args.expiry)


def _emit(args: argparse.Namespace, values: dict) -> None:
    if args.json:
        print(json.dumps(values))
        return
    for key, value in values.items():
        if isinstance(value, float):
            print(f"{key:<12}{value:.6f}")
        else:
            print(f"{key:<12}{value}")


def add_contract(parser: argparse.ArgumentParser, default_rate: float) -> None:
    parser.add_argument("--spot", type=float, required=True, help="underlying price")
    parser.add_argument("--strike", type=float, required=True)
    when = parser.add_mutually_exclusive_group(required=True)
    when.add_argument("--years", type=float, help="time to expiry in years")
    when.add_argument("--expiry", help="expiry date, YYYY-MM-DD")
    parser.add_argument(
        "--valuation", help="valuation date, YYYY-MM-DD (with --expiry only; default: now)"
    )
    parser.add_argument(
        "--rate", type=float, default=default_rate, help="risk-free rate in percent"
    )
    parser.add_argument("--type", dest="kind", type=_kind, default=OptionType.CALL, help="call|put")


def cmd_price(args: argparse.Namespace) -> None:
    contract = OptionContract(
        spot=args.spot,
        strike=args.strike,
        time_to_expiry=_years(args),
        risk_free_rate=args.rate,
        volatility=args.vol,
        option_type=args.kind,
    )
    model = BlackScholesModel(contract)
    values = {"price": model.price().price}
    values.update(model.greeks().as_dict())
    _emit(args, values)


def cmd_iv(args: argparse.Namespace) -> None:
    result = implied_volatility(
        args.target,
        args.spot,
        args.strike,
        _years(args),
        args.rate,
        args.kind,
    )
    _emit(
        args,
        {
            "volatility": result.volatility,
            "converged": result.converged,
            "iterations": result.iterations,
            "status": result.status.value,
        },
    )


def cmd_tte(args: argparse.Namespace) -> None:
    if args.valuation is not None:
        years = year_fraction(args.valuation, args.expiry)
    else:
        years = time_to_expiry(args.expiry)
    _emit(args, {"years": years, "days": years * 365.0})


def build_parser(settings: AppSettings) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="optiondax", description="DAX option pricing CLI")
    p.add_argument("--json", action="store_true", help="print a JSON object")
    p.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=settings.log_level,
        help="logging threshold",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_price = sub.add_parser("price", help="Black-Scholes price and Greeks")
    add_contract(p_price, settings.risk_free_rate)
    p_price.add_argument("--vol", type=float, required=True, help="volatility in percent")
    p_price.set_defaults(func=cmd_price)

    p_iv = sub.add_parser("iv", help="implied volatility from a market price")
    add_contract(p_iv, settings.risk_free_rate)
    p_iv.add_argument("--target", type=float, required=True, help="observed option price")
    p_iv.set_defaults(func=cmd_iv)

    p_tte = sub.add_parser("tte", help="year fraction until expiry")
    p_tte.add_argument("--expiry", required=True, help="expiry date, YYYY-MM-DD")
    p_tte.add_argument("--valuation", help="valuation date, YYYY-MM-DD (default: now)")
    p_tte.set_defaults(func=cmd_tte)

    return p


def main(argv: list[str] | None = None) -> int:
    settings = AppSettings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_level, json_output=settings.log_json)
        args.func(args)
    except ValueError as exc:
        # unparseable dates and unknown log levels from the environment
        parser.error(str(exc))
    return 0


if __name__ == "__main__":
    sys.exit(main())
