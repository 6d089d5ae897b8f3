import math

import pytest

from specjax import airy

from tests._test_checks import _check, _close


def test_values_at_zero() -> None:
    _close(airy.airy_ai(0.0), 0.3550280538878172, rtol=1e-15)
    _close(airy.airy_bi(0.0), 0.6149266274460007, rtol=1e-15)
    _close(airy.airy_ai_prime(0.0), -0.2588194037928068, rtol=1e-15)
    _close(airy.airy_bi_prime(0.0), 0.4482883573538264, rtol=1e-15)


def test_reference_values() -> None:
    _close(airy.airy_ai(1.0), 0.1352924163128814, rtol=1e-10)
    _close(airy.airy_bi(1.0), 1.2074235949528713, rtol=1e-10)
    _close(airy.airy_ai(-1.0), 0.5355608832923521, rtol=1e-10)
    _close(airy.airy_bi(-1.0), 0.10399738949694461, rtol=1e-10)
    _close(airy.airy_ai_prime(1.0), -0.15914744129679328, rtol=1e-10)
    _close(airy.airy_bi_prime(1.0), 0.932435933392776, rtol=1e-10)
    _close(airy.airy_ai_prime(-1.0), -0.01016056711664521, rtol=1e-8, atol=1e-12)
    _close(airy.airy_bi_prime(-1.0), 0.5923756264227923, rtol=1e-10)


@pytest.mark.parametrize("x", [-20.0, -10.0, -1.0, 0.5, 1.0, 5.0, 10.0])
def test_wronskian(x) -> None:
    w = airy.airy_ai(x) * airy.airy_bi_prime(x) - airy.airy_ai_prime(x) * airy.airy_bi(x)
    _close(w, 1.0 / math.pi, rtol=1e-9)


def test_decay_and_growth() -> None:
    _check(0.0 < airy.airy_ai(8.0) < airy.airy_ai(4.0) < airy.airy_ai(2.0))
    _check(airy.airy_bi(8.0) > airy.airy_bi(4.0) > airy.airy_bi(2.0))


def test_infinite_arguments() -> None:
    _check(airy.airy_ai(math.inf) == 0.0)
    _check(airy.airy_ai(-math.inf) == 0.0)
    _check(airy.airy_bi(math.inf) == math.inf)
    _check(airy.airy_bi(-math.inf) == 0.0)
    _check(airy.airy_ai_prime(math.inf) == 0.0)
    _check(math.isnan(airy.airy_ai_prime(-math.inf)))
    _check(math.isnan(airy.airy_bi_prime(-math.inf)))


def test_nan_propagates() -> None:
    for fn in (airy.airy_ai, airy.airy_bi, airy.airy_ai_prime, airy.airy_bi_prime):
        _check(math.isnan(fn(float("nan"))))
