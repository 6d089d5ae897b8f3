import math

import pytest

from specjax import errors, gamma

from tests._test_checks import _check, _close


def test_gamma_factorials() -> None:
    _check(gamma.gamma(5) == 24.0)
    _check(gamma.gamma(1) == 1.0)
    _close(gamma.gamma(20), 121645100408832000.0)
    _close(gamma.gamma(171), float(math.factorial(170)), rtol=1e-12)


def test_gamma_just_off_integer_skips_factorial() -> None:
    _close(gamma.gamma(2.000001), math.gamma(2.000001), rtol=1e-14)
    _check(gamma.gamma(2.000001) != 1.0)


def test_gamma_reference_values() -> None:
    _close(gamma.gamma(0.5), 1.7724538509055159, rtol=1e-14)
    _close(gamma.gamma(-0.5), -3.5449077018110318, rtol=1e-14)
    _close(gamma.gamma(0.1), 9.513507698668732, rtol=1e-13)
    _close(gamma.gamma(2.5), 1.329340388179137, rtol=1e-14)
    _close(gamma.gamma(150.5), math.exp(math.lgamma(150.5)), rtol=1e-11)


def test_gamma_overflow_and_nan() -> None:
    _check(gamma.gamma(172.0) == math.inf)
    _check(gamma.gamma(1000.5) == math.inf)
    _check(math.isnan(gamma.gamma(float("nan"))))


@pytest.mark.parametrize("x", [0.0, -1.0, -7.0])
def test_gamma_poles(x) -> None:
    with pytest.raises(errors.PoleError):
        gamma.gamma(x)
    with pytest.raises(errors.PoleError):
        gamma.log_gamma(x)


@pytest.mark.parametrize("x", [0.3, 1.7, 3.25, 9.9, 24.6])
def test_gamma_functional_equation(x) -> None:
    _close(gamma.gamma(x + 1.0), x * gamma.gamma(x), rtol=1e-13)


@pytest.mark.parametrize("x", [0.2, 0.35, 0.75])
def test_gamma_reflection(x) -> None:
    _close(gamma.gamma(x) * gamma.gamma(1.0 - x), math.pi / math.sin(math.pi * x), rtol=1e-13)


@pytest.mark.parametrize("z", [0.3, 1.25, 4.6])
def test_gamma_duplication(z) -> None:
    lhs = gamma.gamma(z) * gamma.gamma(z + 0.5)
    rhs = 2.0 ** (1.0 - 2.0 * z) * math.sqrt(math.pi) * gamma.gamma(2.0 * z)
    _close(lhs, rhs, rtol=1e-13)


@pytest.mark.parametrize("x", [1e-8, 0.5, 3.0, 7.5, 12.0, 100.0, 1e5, 1e20, -2.5, -15.5, -33.3])
def test_log_gamma_matches_math(x) -> None:
    _close(gamma.log_gamma(x), math.lgamma(x), rtol=1e-12, atol=1e-13)


def test_log_gamma_reference_values() -> None:
    _close(gamma.log_gamma(100.0), 359.1342053695754, rtol=1e-14)
    _close(gamma.log_gamma(0.5), 0.5723649429247001, rtol=1e-14)
    _check(gamma.log_gamma(1.0) == 0.0 or abs(gamma.log_gamma(1.0)) < 1e-15)
    _check(gamma.log_gamma(1e306) == math.inf)


def test_gamma_lanczos_and_stirling() -> None:
    _close(gamma.gamma_lanczos(4.5), 11.631728396567448, rtol=1e-13)
    _close(gamma.gamma_lanczos(-1.5), 2.3632718012073548, rtol=1e-13)
    _check(gamma.gamma_stirling(6.0) == 120.0)
    _close(gamma.gamma_stirling(10.5), 1133278.3889487855, rtol=1e-6)
    with pytest.raises(errors.DomainError):
        gamma.gamma_stirling(-1.0)
    with pytest.raises(errors.PoleError):
        gamma.gamma_lanczos(-2.0)


def test_stirling_error_table_and_formula() -> None:
    _check(gamma.stirling_error(0.0) == math.inf)
    _close(gamma.stirling_error(1.0), 0.0810614667953272582, rtol=1e-14)
    _close(gamma.stirling_error(10.0), 0.00833056343336287, rtol=1e-12)
    for n in (2.3, 14.9, 40.0, 200.0, 1000.0):
        expected = math.lgamma(n + 1.0) - (n + 0.5) * math.log(n) + n - 0.5 * math.log(2.0 * math.pi)
        _close(gamma.stirling_error(n), expected, rtol=1e-9, atol=1e-11)
    with pytest.raises(errors.DomainError):
        gamma.stirling_error(-0.5)


def test_log_gamma_corr() -> None:
    _close(gamma.log_gamma_corr(10.0), 0.008330563433362871, rtol=1e-13)
    _close(gamma.log_gamma_corr(1e9), 1.0 / 12e9, rtol=1e-12)
    with pytest.raises(errors.DomainError):
        gamma.log_gamma_corr(5.0)
