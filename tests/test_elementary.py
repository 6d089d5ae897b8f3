import math

import pytest

from specjax import elementary, errors

from tests._test_checks import _check, _close


def test_signum() -> None:
    _check(elementary.signum(-3.5) == -1)
    _check(elementary.signum(0.0) == 0)
    _check(elementary.signum(-0.0) == 0)
    _check(elementary.signum(2) == 1)
    _check(elementary.signum(math.inf) == 1)
    _check(math.isnan(elementary.signum(float("nan"))))


def test_logistic() -> None:
    _close(elementary.logistic(0.0, 1.0, 1.0, 0.0), 0.5, rtol=1e-15)
    _close(elementary.logistic(2.0, 3.0, 1.5, 2.0), 1.5, rtol=1e-15)
    _close(elementary.logistic(0.0, 2.0, 1.0, 1.0), 2.0 / (1.0 + math.exp(-1.0)), rtol=1e-15)
    _check(elementary.logistic(0.0, 4.0, 1.0, 1000.0) == 4.0)


@pytest.mark.parametrize("t", [-30.0, -2.5, -0.1, 0.0, 0.7, 12.0])
def test_sigmoid_symmetry(t) -> None:
    _close(elementary.sigmoid(t) + elementary.sigmoid(-t), 1.0, rtol=1e-15)
    _close(elementary.sigmoid(t), 1.0 / (1.0 + math.exp(-t)), rtol=1e-14)


def test_sigmoid_saturates_without_nan() -> None:
    _check(elementary.sigmoid(800.0) == 1.0)
    _check(elementary.sigmoid(-800.0) == 0.0)
    _check(elementary.sigmoid(0.0) == 0.5)


def test_softmax() -> None:
    out = elementary.softmax([1.0, 2.0, 3.0])
    e = [math.exp(v) for v in (1.0, 2.0, 3.0)]
    for got, expected in zip(out, e):
        _close(got, expected / sum(e), rtol=1e-14)
    _close(sum(out), 1.0, rtol=1e-15)
    _check(elementary.softmax([1000.0, 1000.0]) == [0.5, 0.5])
    _check(elementary.softmax([5.0]) == [1.0])


def test_softmax_rejects_bad_shapes() -> None:
    with pytest.raises(errors.DomainError):
        elementary.softmax([])
    with pytest.raises(errors.DomainError):
        elementary.softmax([[1.0, 2.0], [3.0, 4.0]])
