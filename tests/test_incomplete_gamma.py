import math

import pytest

from specjax import errors, incomplete_gamma as ig

from tests._test_checks import _check, _close


@pytest.mark.parametrize("x", [0.01, 0.5, 2.0, 7.5, 40.0])
def test_exponential_case(x) -> None:
    _close(ig.regularized_lower_incomplete_gamma(1.0, x), -math.expm1(-x), rtol=1e-13)
    _close(ig.regularized_upper_incomplete_gamma(1.0, x), math.exp(-x), rtol=1e-12)
    _close(ig.lower_incomplete_gamma(1.0, x), -math.expm1(-x), rtol=1e-15)


@pytest.mark.parametrize("x", [0.04, 0.8, 3.0, 12.0])
def test_half_order_is_erf(x) -> None:
    _close(ig.regularized_lower_incomplete_gamma(0.5, x), math.erf(math.sqrt(x)), rtol=1e-13)
    _close(ig.lower_incomplete_gamma(0.5, x), math.sqrt(math.pi) * math.erf(math.sqrt(x)), rtol=1e-14)


@pytest.mark.parametrize("s,x", [(2.0, 1.0), (3.5, 2.0), (3.5, 9.0), (10.0, 10.5), (0.3, 4.0)])
def test_lower_plus_upper_is_gamma(s, x) -> None:
    lower = ig.lower_incomplete_gamma(s, x)
    upper = ig.upper_incomplete_gamma(s, x)
    _close(lower + upper, math.gamma(s), rtol=1e-13)
    p = ig.regularized_lower_incomplete_gamma(s, x)
    q = ig.regularized_upper_incomplete_gamma(s, x)
    _close(p + q, 1.0, rtol=1e-14)


def test_integer_order_closed_form() -> None:
    # P(3, x) = 1 - e^-x (1 + x + x^2/2)
    for x in (0.5, 2.0, 4.0, 8.0):
        expected = 1.0 - math.exp(-x) * (1.0 + x + 0.5 * x * x)
        _close(ig.regularized_lower_incomplete_gamma(3.0, x), expected, rtol=1e-12)


def test_endpoints() -> None:
    _check(ig.regularized_lower_incomplete_gamma(2.5, 0.0) == 0.0)
    _check(ig.regularized_upper_incomplete_gamma(2.5, 0.0) == 1.0)
    _close(ig.upper_incomplete_gamma(2.5, 0.0), math.gamma(2.5), rtol=1e-14)
    _check(ig.regularized_lower_incomplete_gamma(2.5, math.inf) == 1.0)
    _check(ig.upper_incomplete_gamma(2.5, math.inf) == 0.0)


def test_negative_x_is_nan_not_error() -> None:
    _check(math.isnan(ig.lower_incomplete_gamma(2.0, -2.0)))
    _check(math.isnan(ig.regularized_upper_incomplete_gamma(2.0, -0.1)))


@pytest.mark.parametrize("s", [0.0, -1.0, -2.5, math.inf])
def test_nonpositive_order_raises(s) -> None:
    with pytest.raises(errors.DomainError):
        ig.lower_incomplete_gamma(s, 1.0)
    with pytest.raises(errors.DomainError):
        ig.regularized_upper_incomplete_gamma(s, 1.0)


def test_nan_propagates() -> None:
    _check(math.isnan(ig.regularized_lower_incomplete_gamma(float("nan"), 1.0)))
    _check(math.isnan(ig.upper_incomplete_gamma(2.0, float("nan"))))


def test_budget_exhaustion_raises() -> None:
    from specjax import precision

    with precision.workiter(3):
        with pytest.raises(errors.ConvergenceError):
            ig.regularized_lower_incomplete_gamma(20.0, 15.0)


@pytest.mark.parametrize("s,x", [(200.0, 100.0), (180.0, 150.0)])
def test_upper_past_gamma_overflow_is_infinite(s, x) -> None:
    _check(ig.upper_incomplete_gamma(s, x) == math.inf)
    q = ig.regularized_upper_incomplete_gamma(s, x)
    _check(0.0 < q <= 1.0)


def test_lower_past_gamma_overflow_is_infinite() -> None:
    _check(ig.lower_incomplete_gamma(200.0, 300.0) == math.inf)
    _close(ig.regularized_lower_incomplete_gamma(200.0, 300.0), 1.0, rtol=1e-9)
