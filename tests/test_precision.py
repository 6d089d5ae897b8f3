import pytest

from specjax import errors, precision, validation

from tests._test_checks import _check


def test_budget_reflects_configuration() -> None:
    budget = precision.budget()
    _check(budget["tol"] == precision.get_tolerance())
    _check(budget["max_iter"] == precision.get_max_iter())


def test_worktol_restores_previous_value() -> None:
    before = precision.get_tolerance()
    with precision.worktol(1e-8):
        _check(precision.get_tolerance() == 1e-8)
        _check(precision.budget()["tol"] == 1e-8)
    _check(precision.get_tolerance() == before)


def test_workiter_restores_after_error() -> None:
    before = precision.get_max_iter()
    with pytest.raises(RuntimeError):
        with precision.workiter(7):
            _check(precision.get_max_iter() == 7)
            raise RuntimeError("boom")
    _check(precision.get_max_iter() == before)


@pytest.mark.parametrize("tol", [0.0, -1e-3, float("nan")])
def test_bad_tolerance_rejected(tol) -> None:
    with pytest.raises(errors.DomainError):
        precision.set_tolerance(tol)


@pytest.mark.parametrize("max_iter", [0, -5, 2.5])
def test_bad_budget_rejected(max_iter) -> None:
    with pytest.raises(errors.DomainError):
        precision.set_max_iter(max_iter)


def test_error_messages_name_the_function() -> None:
    err = errors.ConvergenceError("beta.incomplete_beta", 12)
    _check(str(err).startswith("beta.incomplete_beta:"))
    _check("12" in str(err))
    _check(err.max_iter == 12)
    pole = errors.PoleError("gamma.gamma", -2.0)
    _check(pole.point == -2.0)
    _check(isinstance(pole, ValueError))
    _check(issubclass(errors.DomainError, errors.SpecialFunctionError))


def test_reference_flag(monkeypatch) -> None:
    monkeypatch.setenv("SPECJAX_RUN_REFERENCE", "1")
    _check(validation.reference_enabled())
    monkeypatch.setenv("SPECJAX_RUN_REFERENCE", "0")
    _check(not validation.reference_enabled())
