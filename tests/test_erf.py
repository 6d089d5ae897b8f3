import math

import numpy as np
import pytest

from specjax import erf

from tests._test_checks import _check, _close


def test_erf_reference_values() -> None:
    _close(erf.erf(1.0), 0.8427007929497149, rtol=1e-14)
    _close(erf.erf(0.5), 0.5204998778130465, rtol=1e-14)
    _close(erf.erf(2.0), 0.9953222650189527, rtol=1e-14)
    _check(erf.erf(0.0) == 0.0)


def test_erfc_tail() -> None:
    _close(erf.erfc(3.0), 2.209049699858544e-05, rtol=1e-13)
    _close(erf.erfc(10.0), 2.088487583762545e-45, rtol=1e-12)
    _check(erf.erfc(30.0) == 0.0)
    _check(erf.erfc(-7.0) == 2.0)


@pytest.mark.parametrize("x", np.linspace(-5.5, 5.5, 23).tolist())
def test_erf_matches_math(x) -> None:
    _close(erf.erf(x), math.erf(x), rtol=1e-14, atol=1e-16)
    _close(erf.erfc(x), math.erfc(x), rtol=1e-13, atol=1e-300)


@pytest.mark.parametrize("x", [0.1, 0.9, 1.3, 4.0, 7.5])
def test_erf_odd_and_complement(x) -> None:
    _check(erf.erf(-x) == -erf.erf(x))
    _close(erf.erf(x) + erf.erfc(x), 1.0, rtol=1e-15)


def test_erf_monotone_and_saturating() -> None:
    xs = np.linspace(-4.0, 4.0, 161)
    values = [erf.erf(x) for x in xs]
    _check(all(b > a for a, b in zip(values, values[1:])))
    _check(erf.erf(6.0) == 1.0)
    _check(erf.erf(-50.0) == -1.0)
    _check(erf.erf(math.inf) == 1.0)


def test_erf_nan() -> None:
    _check(math.isnan(erf.erf(float("nan"))))
    _check(math.isnan(erf.erfc(float("nan"))))
