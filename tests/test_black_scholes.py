"""
Tests for the Black-Scholes model and its Greeks conventions.
"""

import dataclasses
import math

import numpy as np
import pytest
from scipy.stats import norm

from optiondax import (
    MIN_TIME_TO_EXPIRY,
    BlackScholesModel,
    GreeksResult,
    OptionContract,
    OptionType,
    black_scholes_greeks,
    black_scholes_price,
)

ATM = dict(spot=100.0, strike=100.0, time_to_expiry=1.0, risk_free_rate=5.0, volatility=20.0)


def _exact_raw_greeks(S, K, T, r, sigma):
    """Textbook (unscaled) Greeks with an exact normal CDF, fractional inputs."""
    d1 = (math.log(S / K) + (r + 0.5 * sigma**2) * T) / (sigma * math.sqrt(T))
    pdf = norm.pdf(d1)
    return {
        "gamma": pdf / (S * sigma * math.sqrt(T)),
        "vega": S * pdf * math.sqrt(T),
    }


class TestOptionContract:
    """Test the contract value object."""

    def test_percent_inputs_are_converted(self):
        contract = OptionContract(100.0, 100.0, 1.0, 2.0, 20.0)
        assert contract.rate == pytest.approx(0.02)
        assert contract.sigma == pytest.approx(0.20)
        assert contract.option_type is OptionType.CALL

    @pytest.mark.parametrize("t", [0.0, -0.5, float("nan")])
    def test_non_positive_time_is_floored(self, t):
        contract = OptionContract(100.0, 100.0, t, 2.0, 20.0)
        assert contract.time_to_expiry == MIN_TIME_TO_EXPIRY

    @pytest.mark.parametrize("raw,expected", [
        ("Call", OptionType.CALL),
        ("call", OptionType.CALL),
        ("PUT", OptionType.PUT),
        (OptionType.PUT, OptionType.PUT),
    ])
    def test_option_type_is_case_insensitive(self, raw, expected):
        assert OptionContract(100.0, 100.0, 1.0, 2.0, 20.0, raw).option_type is expected

    def test_invalid_option_type_raises(self):
        with pytest.raises(ValueError):
            OptionContract(100.0, 100.0, 1.0, 2.0, 20.0, "straddle")

    def test_contract_is_immutable(self):
        contract = OptionContract(100.0, 100.0, 1.0, 2.0, 20.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            contract.spot = 101.0

    def test_with_volatility_keeps_other_fields(self):
        contract = OptionContract(100.0, 90.0, 0.5, 2.0, 20.0, "put")
        bumped = contract.with_volatility(35.0)
        assert bumped.volatility == 35.0
        assert bumped.strike == 90.0
        assert bumped.option_type is OptionType.PUT
        assert contract.volatility == 20.0

    def test_intrinsic_value(self):
        assert OptionContract(110.0, 100.0, 1.0, 2.0, 20.0, "call").intrinsic_value() == 10.0
        assert OptionContract(110.0, 100.0, 1.0, 2.0, 20.0, "put").intrinsic_value() == 0.0
        assert OptionContract(90.0, 100.0, 1.0, 2.0, 20.0, "put").intrinsic_value() == 10.0


class TestBlackScholesModel:
    """Test prices and Greeks."""

    def test_d1_d2_computed_at_construction(self):
        model = BlackScholesModel(OptionContract(**ATM))
        expected_d1 = (math.log(1.0) + (0.05 + 0.5 * 0.04) * 1.0) / 0.2
        assert model.d1 == pytest.approx(expected_d1, abs=1e-12)
        assert model.d2 == pytest.approx(expected_d1 - 0.2, abs=1e-12)

    def test_model_is_immutable(self):
        model = BlackScholesModel(OptionContract(**ATM))
        with pytest.raises(dataclasses.FrozenInstanceError):
            model.d1 = 0.0

    def test_prices_match_published_values(self):
        model = BlackScholesModel(OptionContract(**ATM))
        assert model.call_price() == pytest.approx(10.450583572185565, abs=1e-4)
        assert model.put_price() == pytest.approx(5.573526022256971, abs=1e-4)

    def test_price_follows_contract_type(self):
        call = BlackScholesModel(OptionContract(**ATM, option_type="call"))
        put = BlackScholesModel(OptionContract(**ATM, option_type="put"))
        assert call.price().price == call.call_price()
        assert put.price().price == put.put_price()

    def test_call_greeks_use_scaled_conventions(self):
        greeks = BlackScholesModel(OptionContract(**ATM)).call_greeks()
        assert isinstance(greeks, GreeksResult)
        assert greeks.delta == pytest.approx(0.6368306511756191, abs=1e-6)
        assert greeks.gamma == pytest.approx(0.018762017345846895, abs=1e-10)
        assert greeks.vega == pytest.approx(37.52403469169379 / 100, abs=1e-10)
        assert greeks.theta == pytest.approx(-6.414027546438197 / 365, abs=1e-6)

    def test_put_greeks_use_scaled_conventions(self):
        greeks = BlackScholesModel(OptionContract(**ATM, option_type="put")).put_greeks()
        assert greeks.delta == pytest.approx(-0.3631693488243809, abs=1e-6)
        assert greeks.gamma == pytest.approx(0.018762017345846895, abs=1e-10)
        assert greeks.vega == pytest.approx(37.52403469169379 / 100, abs=1e-10)
        assert greeks.theta == pytest.approx(-1.657880423934626 / 365, abs=1e-6)

    def test_gamma_and_vega_identical_for_calls_and_puts(self):
        model = BlackScholesModel(OptionContract(25003.0, 25100.0, 0.1, 2.0, 14.0))
        call, put = model.call_greeks(), model.put_greeks()
        assert call.gamma == put.gamma
        assert call.vega == put.vega
        assert call.delta - put.delta == pytest.approx(1.0, abs=1e-12)

    def test_dax_atm_greeks_scaling(self):
        spot, t = 18000.0, 30 / 365
        greeks = black_scholes_greeks(
            spot=spot, strike=spot, time_to_expiry=t, risk_free_rate=2.0, volatility=20.0
        )
        raw = _exact_raw_greeks(spot, spot, t, 0.02, 0.20)

        # gamma per 1% spot move, vega per volatility point
        assert greeks.gamma == pytest.approx(raw["gamma"] * spot / 100, rel=1e-9)
        assert greeks.vega == pytest.approx(raw["vega"] / 100, rel=1e-9)
        assert greeks.gamma == pytest.approx(0.0695, abs=1e-3)
        assert greeks.vega == pytest.approx(20.55, abs=0.05)

    def test_greeks_match_finite_differences(self):
        base = OptionContract(**ATM)
        greeks = BlackScholesModel(base).call_greeks()

        def call(**changes):
            return BlackScholesModel(dataclasses.replace(base, **changes)).call_price()

        h = 0.01
        fd_delta = (call(spot=100.0 + h) - call(spot=100.0 - h)) / (2 * h)
        assert greeks.delta == pytest.approx(fd_delta, abs=1e-4)

        fd_vega = (call(volatility=20.0 + h) - call(volatility=20.0 - h)) / (2 * h)
        assert greeks.vega == pytest.approx(fd_vega, rel=1e-4)

        def delta_at(spot):
            return BlackScholesModel(dataclasses.replace(base, spot=spot)).call_greeks().delta

        fd_gamma = (delta_at(100.0 + h) - delta_at(100.0 - h)) / (2 * h) * base.spot / 100
        assert greeks.gamma == pytest.approx(fd_gamma, rel=1e-3)

        dt = 1e-4
        fd_theta = -(call(time_to_expiry=1.0 + dt) - call(time_to_expiry=1.0 - dt)) / (2 * dt) / 365
        assert greeks.theta == pytest.approx(fd_theta, rel=1e-3)

    def test_greeks_as_dict(self):
        greeks = black_scholes_greeks(**ATM)
        assert set(greeks.as_dict()) == {"delta", "gamma", "theta", "vega"}


class TestMonotonicity:
    def test_call_increases_and_put_decreases_with_spot(self):
        spots = np.arange(80.0, 121.0, 5.0)
        calls = [black_scholes_price(spot=s, strike=100.0, time_to_expiry=0.5,
                                     risk_free_rate=2.0, volatility=20.0).price for s in spots]
        puts = [black_scholes_price(spot=s, strike=100.0, time_to_expiry=0.5,
                                    risk_free_rate=2.0, volatility=20.0,
                                    option_type="put").price for s in spots]
        assert np.all(np.diff(calls) > 0)
        assert np.all(np.diff(puts) < 0)

    @pytest.mark.parametrize("option_type", ["call", "put"])
    def test_price_increases_with_volatility(self, option_type):
        vols = np.arange(5.0, 81.0, 5.0)
        prices = [black_scholes_price(spot=18000.0, strike=18200.0, time_to_expiry=0.25,
                                      risk_free_rate=2.0, volatility=v,
                                      option_type=option_type).price for v in vols]
        assert np.all(np.diff(prices) > 0)


class TestDegenerateInputs:
    @pytest.mark.parametrize("spot,strike,call_value,put_value", [
        (105.0, 100.0, 5.0, 0.0),
        (95.0, 100.0, 0.0, 5.0),
    ])
    def test_expired_contract_converges_to_intrinsic(self, spot, strike, call_value, put_value):
        params = dict(spot=spot, strike=strike, time_to_expiry=0.0,
                      risk_free_rate=2.0, volatility=20.0)
        call = black_scholes_price(**params, option_type="call").price
        put = black_scholes_price(**params, option_type="put").price
        assert call == pytest.approx(call_value, abs=1e-3)
        assert put == pytest.approx(put_value, abs=1e-3)

    def test_expired_atm_value_bounded_by_time_floor(self):
        params = dict(spot=100.0, strike=100.0, time_to_expiry=0.0,
                      risk_free_rate=2.0, volatility=20.0)
        bound = 100.0 * 0.2 * math.sqrt(MIN_TIME_TO_EXPIRY)
        assert 0.0 <= black_scholes_price(**params).price < bound
        assert 0.0 <= black_scholes_price(**params, option_type="put").price < bound

    def test_negative_spot_propagates_nan(self):
        model = BlackScholesModel.from_inputs(-100.0, 100.0, 1.0, 2.0, 20.0)
        assert math.isnan(model.d1)
        assert math.isnan(model.call_price())
        assert math.isnan(model.put_price())
        greeks = model.call_greeks()
        assert math.isnan(greeks.delta)
        assert math.isnan(greeks.gamma)

    def test_zero_volatility_does_not_raise(self):
        model = BlackScholesModel.from_inputs(110.0, 100.0, 1.0, 2.0, 0.0)
        assert model.call_price() == pytest.approx(110.0 - 100.0 * math.exp(-0.02), abs=1e-9)
        assert model.put_price() == 0.0
        model.call_greeks()
