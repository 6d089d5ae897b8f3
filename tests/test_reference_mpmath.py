import numpy as np
import pytest

from specjax import airy, bessel, beta, erf, gamma, hypgeom, incomplete_gamma, orthopoly, validation

from tests._test_checks import _close

pytestmark = pytest.mark.reference
if not validation.reference_enabled():
    pytest.skip("Reference tests disabled. Set SPECJAX_RUN_REFERENCE=1 to enable.", allow_module_level=True)

mpmath = pytest.importorskip("mpmath")
mpmath.mp.dps = 40

_RNG = np.random.default_rng(20240611)


def _ref(value) -> float:
    return float(mpmath.re(value))


@pytest.mark.parametrize("x", list(_RNG.uniform(-30.0, 170.0, 40)))
def test_gamma_against_mpmath(x) -> None:
    if x <= 0.0 and x == np.floor(x):
        pytest.skip("pole")
    _close(gamma.gamma(x), _ref(mpmath.gamma(x)), rtol=1e-12)


@pytest.mark.parametrize("x", list(_RNG.uniform(1e-3, 1e4, 40)))
def test_log_gamma_against_mpmath(x) -> None:
    _close(gamma.log_gamma(x), _ref(mpmath.loggamma(x)), rtol=1e-12, atol=1e-13)


@pytest.mark.parametrize("x", list(_RNG.uniform(-6.0, 6.0, 40)))
def test_erf_against_mpmath(x) -> None:
    _close(erf.erf(x), _ref(mpmath.erf(x)), rtol=1e-13, atol=1e-16)
    _close(erf.erfc(x), _ref(mpmath.erfc(x)), rtol=1e-12)


@pytest.mark.parametrize("s,x", [tuple(p) for p in _RNG.uniform(0.05, 60.0, (30, 2))])
def test_incomplete_gamma_against_mpmath(s, x) -> None:
    expected = _ref(mpmath.gammainc(s, 0, x, regularized=True))
    _close(incomplete_gamma.regularized_lower_incomplete_gamma(s, x), expected, rtol=1e-11, atol=1e-15)


@pytest.mark.parametrize("x,a,b", [(p[0], p[1], p[2]) for p in _RNG.uniform(0.01, 0.99, (30, 3)) * [1.0, 50.0, 50.0]])
def test_incomplete_beta_against_mpmath(x, a, b) -> None:
    expected = _ref(mpmath.betainc(a, b, 0, x, regularized=True))
    _close(beta.regularized_incomplete_beta(x, a, b), expected, rtol=1e-10, atol=1e-15)


@pytest.mark.parametrize("v,x", [tuple(p) for p in _RNG.uniform(0.0, 1.0, (40, 2)) * [12.0, 60.0]])
def test_real_order_bessel_against_mpmath(v, x) -> None:
    x = max(x, 0.05)
    _close(bessel.bessel_jv(v, x), _ref(mpmath.besselj(v, x)), rtol=1e-9, atol=1e-13)
    _close(bessel.bessel_yv(v, x), _ref(mpmath.bessely(v, x)), rtol=1e-9, atol=1e-13)
    _close(bessel.bessel_iv(v, x), _ref(mpmath.besseli(v, x)), rtol=1e-9)
    _close(bessel.bessel_kv(v, x), _ref(mpmath.besselk(v, x)), rtol=1e-9)


@pytest.mark.parametrize("n", [0, 1, 3, 8, 15])
@pytest.mark.parametrize("x", [0.2, 1.9, 7.5, 26.0, 90.0])
def test_integer_order_bessel_against_mpmath(n, x) -> None:
    _close(bessel.bessel_jn(n, x), _ref(mpmath.besselj(n, x)), rtol=1e-9, atol=1e-13)
    _close(bessel.bessel_yn(n, x), _ref(mpmath.bessely(n, x)), rtol=1e-9, atol=1e-13)
    _close(bessel.bessel_in(n, x), _ref(mpmath.besseli(n, x)), rtol=1e-9, atol=1e-300)
    _close(bessel.bessel_kn(n, x), _ref(mpmath.besselk(n, x)), rtol=1e-9)


@pytest.mark.parametrize("x", [-15.0, -4.2, -0.3, 0.8, 3.3, 11.0])
def test_airy_against_mpmath(x) -> None:
    _close(airy.airy_ai(x), _ref(mpmath.airyai(x)), rtol=1e-9, atol=1e-13)
    _close(airy.airy_bi(x), _ref(mpmath.airybi(x)), rtol=1e-9, atol=1e-13)
    _close(airy.airy_ai_prime(x), _ref(mpmath.airyai(x, derivative=1)), rtol=1e-9, atol=1e-13)
    _close(airy.airy_bi_prime(x), _ref(mpmath.airybi(x, derivative=1)), rtol=1e-9, atol=1e-13)


@pytest.mark.parametrize("a,b,z", [(0.5, 1.5, 2.0), (-3.5, 2.0, 4.0), (2.0, 0.7, -2.0)])
def test_confluent_against_mpmath(a, b, z) -> None:
    _close(hypgeom.confluent_hypergeometric(a, b, z), _ref(mpmath.hyp1f1(a, b, z)), rtol=1e-11)


@pytest.mark.parametrize("a,b,c,z", [(0.5, 1.5, 2.5, 0.3), (1.2, -0.4, 3.0, -0.8), (2.0, 3.0, 4.5, 0.6)])
def test_gauss_against_mpmath(a, b, c, z) -> None:
    _close(hypgeom.hypergeometric(a, b, c, z), _ref(mpmath.hyp2f1(a, b, c, z)), rtol=1e-11)


@pytest.mark.parametrize("n", [0, 2, 7, 16])
@pytest.mark.parametrize("x", [-0.8, 0.1, 0.65])
def test_orthogonal_polynomials_against_mpmath(n, x) -> None:
    _close(orthopoly.legendre_p(n, x), _ref(mpmath.legendre(n, x)), rtol=1e-12, atol=1e-14)
    _close(orthopoly.chebyshev_t(n, x), _ref(mpmath.chebyt(n, x)), rtol=1e-12, atol=1e-14)
    _close(orthopoly.chebyshev_u(n, x), _ref(mpmath.chebyu(n, x)), rtol=1e-12, atol=1e-14)
    _close(orthopoly.hermite_h(n, x), _ref(mpmath.hermite(n, x)), rtol=1e-12, atol=1e-10)
    _close(orthopoly.laguerre_l(n, x), _ref(mpmath.laguerre(n, 0, x)), rtol=1e-12, atol=1e-14)
