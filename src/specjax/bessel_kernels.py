from __future__ import annotations

import jax
from jax import lax
import jax.numpy as jnp

from .gamma import FACTORIAL_MAX, gamma_value, log_gamma_value
from .kernels import is_odd, lentz, polevl, safe_pow, sum_series

jax.config.update("jax_enable_x64", True)

_PI = jnp.float64(jnp.pi)
_TWO_OVER_PI = jnp.float64(0.63661977236758134308)
_FPMIN = 1e-30
_EPS = 1e-16
_XMIN = 2.0
_MILLER_BIG = 1e10
_MILLER_SMALL = 1e-10
_RECUR_BIG = 1e200
_RECUR_SMALL = 1e-200

# -(1/Gamma(1+z) - 1/Gamma(1-z)) / 2z expanded in z^2, highest order first
_GAMMA1_TAYLOR = jnp.asarray(
    [
        0.0000011330272320,
        -0.0000201348547807,
        -0.0002152416741149,
        0.0072189432466630,
        -0.0421977345555443,
        -0.0420026350340952,
        0.5772156649015329,
    ],
    dtype=jnp.float64,
)


def _f64(x) -> jax.Array:
    return jnp.asarray(x, dtype=jnp.float64)


def temme_gammas(mu: jax.Array):
    """Gamma1, Gamma2, 1/Gamma(1+mu), 1/Gamma(1-mu) for |mu| <= 1/2."""
    gampl = 1.0 / gamma_value(1.0 + mu)
    gammi = 1.0 / gamma_value(1.0 - mu)
    gam2 = 0.5 * (gammi + gampl)
    safe_mu = jnp.where(mu == 0.0, 1.0, mu)
    gam1 = jnp.where(jnp.abs(mu) < 0.1, -polevl(mu * mu, _GAMMA1_TAYLOR), (gammi - gampl) / (2.0 * safe_mu))
    return gam1, gam2, gampl, gammi


def power_series(nu: jax.Array, x: jax.Array, sign: float, tol: float, max_iter: int):
    """Ascending series (x/2)^nu sum (sign x^2/4)^k / (k! Gamma(nu+k+1)); sign -1 for J, +1 for I."""
    nu = _f64(nu)
    x = _f64(x)
    half = 0.5 * x
    g = gamma_value(nu + 1.0)
    direct = safe_pow(half, nu) / g
    logged = jnp.sign(g) * jnp.exp(nu * jnp.log(half) - log_gamma_value(nu + 1.0))
    term0 = jnp.where(jnp.abs(nu + 1.0) <= FACTORIAL_MAX, direct, logged)
    quarter = sign * half * half
    return sum_series(term0, lambda k: quarter / (k * (k + nu)), tol, max_iter)


def hankel_sums(nu: jax.Array, x: jax.Array, tol: float, max_iter: int):
    """Large-x expansion sums built from t_k = prod_j (4nu^2 - (2j-1)^2) / (8 j x).

    Returns (P, Q, sum (-1)^k t_k, sum t_k, converged). Terms are summed until
    they fall below tolerance; a term that grows ends the sum unconverged.
    """
    nu = _f64(nu)
    x = _f64(x)
    mu = 4.0 * nu * nu

    def cond(state):
        k, _, _, _, _, _, done, _ = state
        return (~done) & (k < max_iter)

    def body(state):
        k, t, p, q, s_alt, s_all, _, _ = state
        k1 = k + 1.0
        t_new = t * (mu - (2.0 * k1 - 1.0) ** 2) / (8.0 * k1 * x)
        m = jnp.mod(k1, 4.0)
        p = p + jnp.where(m == 0.0, t_new, jnp.where(m == 2.0, -t_new, 0.0))
        q = q + jnp.where(m == 1.0, t_new, jnp.where(m == 3.0, -t_new, 0.0))
        s_alt = s_alt + jnp.where(is_odd(k1), -t_new, t_new)
        s_all = s_all + t_new
        small = jnp.abs(t_new) <= tol * (jnp.abs(p) + jnp.abs(q))
        growing = jnp.abs(t_new) > jnp.abs(t)
        return k1, t_new, p, q, s_alt, s_all, small | growing, small

    one = _f64(1.0)
    init = (_f64(0.0), one, one, _f64(0.0), one, one, jnp.asarray(False), jnp.asarray(False))
    _, _, p, q, s_alt, s_all, _, ok = lax.while_loop(cond, body, init)
    return p, q, s_alt, s_all, ok


def _hankel_phase(nu, x):
    return x - (0.5 * nu + 0.25) * _PI


def hankel_j(nu, x, tol, max_iter):
    p, q, _, _, ok = hankel_sums(nu, x, tol, max_iter)
    w = _hankel_phase(nu, x)
    return jnp.sqrt(_TWO_OVER_PI / x) * (p * jnp.cos(w) - q * jnp.sin(w)), ok


def hankel_y(nu, x, tol, max_iter):
    p, q, _, _, ok = hankel_sums(nu, x, tol, max_iter)
    w = _hankel_phase(nu, x)
    return jnp.sqrt(_TWO_OVER_PI / x) * (p * jnp.sin(w) + q * jnp.cos(w)), ok


def hankel_i(nu, x, tol, max_iter):
    _, _, s_alt, _, ok = hankel_sums(nu, x, tol, max_iter)
    return jnp.exp(x - 0.5 * jnp.log(2.0 * _PI * x)) * s_alt, ok


def hankel_k(nu, x, tol, max_iter):
    _, _, _, s_all, ok = hankel_sums(nu, x, tol, max_iter)
    return jnp.sqrt(0.5 * _PI / x) * jnp.exp(-x) * s_all, ok


def _jy_ratio(nu, x, nl, tol, max_iter):
    """CF1 for J'_nu/J_nu, then unnormalized downward recurrence to order mu = nu - nl."""
    xi = 1.0 / x
    xi2 = 2.0 * xi
    h0 = jnp.maximum(nu * xi, _FPMIN)

    def cond(state):
        i, _, _, _, _, _, done = state
        return (~done) & (i <= max_iter)

    def body(state):
        i, b, c, d, h, isign, _ = state
        b = b + xi2
        d = b - d
        d = jnp.where(jnp.abs(d) < _FPMIN, _FPMIN, d)
        c = b - 1.0 / c
        c = jnp.where(jnp.abs(c) < _FPMIN, _FPMIN, c)
        d = 1.0 / d
        delta = c * d
        h = delta * h
        isign = jnp.where(d < 0.0, -isign, isign)
        return i + 1.0, b, c, d, h, isign, jnp.abs(delta - 1.0) < tol

    init = (_f64(1.0), xi2 * nu, h0, _f64(0.0), h0, _f64(1.0), jnp.asarray(False))
    _, _, _, _, h, isign, ok = lax.while_loop(cond, body, init)

    rjl = isign * _FPMIN
    rjpl = h * rjl

    def down(_, state):
        rjl, rjpl, fact, rjl1, rjp1 = state
        rjtemp = fact * rjl + rjpl
        fact = fact - xi
        rjpl = fact * rjtemp - rjl
        rjl = rjtemp
        scale = jnp.where(jnp.abs(rjl) > _RECUR_BIG, _RECUR_SMALL, 1.0)
        return rjl * scale, rjpl * scale, fact, rjl1 * scale, rjp1 * scale

    rjl, rjpl, _, rjl1, rjp1 = lax.fori_loop(0, nl.astype(jnp.int32), down, (rjl, rjpl, nu * xi, rjl, rjpl))
    rjl = jnp.where(rjl == 0.0, _EPS, rjl)
    return rjl, rjl1, rjp1, rjpl / rjl, ok


def _temme_y(xmu, x, f, rjl, tol, max_iter):
    """Y_mu, Y_mu+1 from Temme's series (x < 2), and J_mu from the Wronskian."""
    xi = 1.0 / x
    xi2 = 2.0 * xi
    w = xi2 / _PI
    x2 = 0.5 * x
    pimu = _PI * xmu
    fact = jnp.where(jnp.abs(pimu) < _EPS, 1.0, pimu / jnp.sin(pimu))
    d = -jnp.log(x2)
    e = xmu * d
    fact2 = jnp.where(jnp.abs(e) < _EPS, 1.0, jnp.sinh(e) / e)
    gam1, gam2, gampl, gammi = temme_gammas(xmu)
    ff = _TWO_OVER_PI * fact * (gam1 * jnp.cosh(e) + gam2 * fact2 * d)
    e = jnp.exp(e)
    p = e / (gampl * _PI)
    q = 1.0 / (e * _PI * gammi)
    pimu2 = 0.5 * pimu
    fact3 = jnp.where(jnp.abs(pimu2) < _EPS, 1.0, jnp.sin(pimu2) / pimu2)
    r = _PI * pimu2 * fact3 * fact3
    dd = -x2 * x2
    xmu2 = xmu * xmu

    def cond(state):
        i, _, _, _, _, _, _, done = state
        return (~done) & (i <= max_iter)

    def body(state):
        i, ff, c, p, q, total, total1, _ = state
        ff = (i * ff + p + q) / (i * i - xmu2)
        c = c * dd / i
        p = p / (i - xmu)
        q = q / (i + xmu)
        delta = c * (ff + r * q)
        total = total + delta
        total1 = total1 + c * p - i * delta
        return i + 1.0, ff, c, p, q, total, total1, jnp.abs(delta) < (1.0 + jnp.abs(total)) * tol

    init = (_f64(1.0), ff, _f64(1.0), p, q, ff + r * q, p, jnp.asarray(False))
    _, _, _, _, _, total, total1, ok = lax.while_loop(cond, body, init)
    rymu = -total
    ry1 = -total1 * xi2
    rymup = xmu * xi * rymu - ry1
    rjmu = w / (rymup - f * rymu)
    return rjmu, rymu, ry1, ok


def _steed_jy(xmu, x, f, rjl, tol, max_iter):
    """Steed's CF2 for p + iq = (J' + iY')/(J + iY), combined with CF1 through the Wronskian."""
    xi = 1.0 / x
    w = 2.0 * xi / _PI
    a = 0.25 - xmu * xmu
    p = -0.5 * xi
    q = _f64(1.0)
    br = 2.0 * x
    bi = _f64(2.0)
    fact = a * xi / (p * p + q * q)
    cr = br + q * fact
    ci = bi + p * fact
    den = br * br + bi * bi
    dr = br / den
    di = -bi / den
    dlr = cr * dr - ci * di
    dli = cr * di + ci * dr
    p, q = p * dlr - q * dli, p * dli + q * dlr

    def cond(state):
        i, _, _, _, _, _, _, _, _, done = state
        return (~done) & (i <= max_iter)

    def body(state):
        i, a, bi, cr, ci, dr, di, p, q, _ = state
        a = a + 2.0 * (i - 1.0)
        bi = bi + 2.0
        dr = a * dr + br
        di = a * di + bi
        dr = jnp.where(jnp.abs(dr) + jnp.abs(di) < _FPMIN, _FPMIN, dr)
        fact = a / (cr * cr + ci * ci)
        cr = br + cr * fact
        ci = bi - ci * fact
        cr = jnp.where(jnp.abs(cr) + jnp.abs(ci) < _FPMIN, _FPMIN, cr)
        den = dr * dr + di * di
        dr = dr / den
        di = -di / den
        dlr = cr * dr - ci * di
        dli = cr * di + ci * dr
        p, q = p * dlr - q * dli, p * dli + q * dlr
        return i + 1.0, a, bi, cr, ci, dr, di, p, q, jnp.abs(dlr - 1.0) + jnp.abs(dli) < tol

    init = (_f64(2.0), a, bi, cr, ci, dr, di, p, q, jnp.asarray(False))
    _, _, _, _, _, _, _, p, q, ok = lax.while_loop(cond, body, init)
    gam = (p - f) / q
    rjmu = jnp.sqrt(w / ((p - f) * gam + q))
    rjmu = jnp.where(rjl < 0.0, -rjmu, rjmu)
    rymu = rjmu * gam
    rymup = rymu * (p + q / gam)
    ry1 = xmu * xi * rymu - rymup
    return rjmu, rymu, ry1, ok


def bessel_jy(nu: jax.Array, x: jax.Array, tol: float, max_iter: int):
    """J_nu, Y_nu, J'_nu, Y'_nu for nu >= 0, x > 0 by Steed's method with Temme's series below x = 2."""
    nu = _f64(nu)
    x = _f64(x)
    xi = 1.0 / x
    xi2 = 2.0 * xi
    nl = jnp.where(x < _XMIN, jnp.floor(nu + 0.5), jnp.maximum(0.0, jnp.floor(nu - x + 1.5)))
    xmu = nu - nl
    rjl, rjl1, rjp1, f, ok1 = _jy_ratio(nu, x, nl, tol, max_iter)
    rjmu, rymu, ry1, ok2 = lax.cond(
        x < _XMIN,
        lambda ops: _temme_y(*ops, tol, max_iter),
        lambda ops: _steed_jy(*ops, tol, max_iter),
        (xmu, x, f, rjl),
    )
    fact = rjmu / rjl

    def up(i, state):
        rymu, ry1 = state
        return ry1, (xmu + jnp.float64(i)) * xi2 * ry1 - rymu

    rymu, ry1 = lax.fori_loop(1, nl.astype(jnp.int32) + 1, up, (rymu, ry1))
    return rjl1 * fact, rymu, rjp1 * fact, nu * xi * rymu - ry1, ok1 & ok2


def _ik_ratio(nu, x, nl, tol, max_iter):
    """CF1 for I'_nu/I_nu, then unnormalized downward recurrence to order mu = nu - nl."""
    xi = 1.0 / x
    xi2 = 2.0 * xi
    h0 = jnp.maximum(nu * xi, _FPMIN)

    def cond(state):
        i, _, _, _, _, done = state
        return (~done) & (i <= max_iter)

    def body(state):
        i, b, c, d, h, _ = state
        b = b + xi2
        d = 1.0 / (b + d)
        c = b + 1.0 / c
        delta = c * d
        h = delta * h
        return i + 1.0, b, c, d, h, jnp.abs(delta - 1.0) < tol

    init = (_f64(1.0), xi2 * nu, h0, _f64(0.0), h0, jnp.asarray(False))
    _, _, _, _, h, ok = lax.while_loop(cond, body, init)

    ril = _f64(_FPMIN)
    ripl = h * ril

    def down(_, state):
        ril, ripl, fact, ril1, rip1 = state
        ritemp = fact * ril + ripl
        fact = fact - xi
        ripl = fact * ritemp + ril
        ril = ritemp
        scale = jnp.where(jnp.abs(ril) > _RECUR_BIG, _RECUR_SMALL, 1.0)
        return ril * scale, ripl * scale, fact, ril1 * scale, rip1 * scale

    ril, ripl, _, ril1, rip1 = lax.fori_loop(0, nl.astype(jnp.int32), down, (ril, ripl, nu * xi, ril, ripl))
    return ril, ril1, rip1, ripl / ril, ok


def _temme_k(xmu, x, tol, max_iter):
    """K_mu, K_mu+1 from Temme's series for x < 2."""
    xi2 = 2.0 / x
    x2 = 0.5 * x
    pimu = _PI * xmu
    fact = jnp.where(jnp.abs(pimu) < _EPS, 1.0, pimu / jnp.sin(pimu))
    d = -jnp.log(x2)
    e = xmu * d
    fact2 = jnp.where(jnp.abs(e) < _EPS, 1.0, jnp.sinh(e) / e)
    gam1, gam2, gampl, gammi = temme_gammas(xmu)
    ff = fact * (gam1 * jnp.cosh(e) + gam2 * fact2 * d)
    e = jnp.exp(e)
    p = 0.5 * e / gampl
    q = 0.5 / (e * gammi)
    dd = x2 * x2
    xmu2 = xmu * xmu

    def cond(state):
        i, _, _, _, _, _, _, done = state
        return (~done) & (i <= max_iter)

    def body(state):
        i, ff, c, p, q, total, total1, _ = state
        ff = (i * ff + p + q) / (i * i - xmu2)
        c = c * dd / i
        p = p / (i - xmu)
        q = q / (i + xmu)
        delta = c * ff
        total = total + delta
        total1 = total1 + c * (p - i * ff)
        return i + 1.0, ff, c, p, q, total, total1, jnp.abs(delta) < jnp.abs(total) * tol

    init = (_f64(1.0), ff, _f64(1.0), p, q, ff, p, jnp.asarray(False))
    _, _, _, _, _, total, total1, ok = lax.while_loop(cond, body, init)
    return total, total1 * xi2, ok


def _steed_k(xmu, x, tol, max_iter):
    """K_mu, K_mu+1 from Steed's CF2 for x >= 2, in exponentially scaled form."""
    xi = 1.0 / x
    b = 2.0 * (1.0 + x)
    d = 1.0 / b
    a1 = 0.25 - xmu * xmu

    def cond(state):
        i, _, _, _, _, _, _, _, _, _, _, done = state
        return (~done) & (i <= max_iter)

    def body(state):
        i, a, b, c, d, delh, h, q, q1, q2, s, _ = state
        a = a - 2.0 * (i - 1.0)
        c = -a * c / i
        qnew = (q1 - b * q2) / a
        q1, q2 = q2, qnew
        q = q + c * qnew
        b = b + 2.0
        d = 1.0 / (b + a * d)
        delh = (b * d - 1.0) * delh
        h = h + delh
        dels = q * delh
        s = s + dels
        return i + 1.0, a, b, c, d, delh, h, q, q1, q2, s, jnp.abs(dels / s) < tol

    init = (_f64(2.0), -a1, b, a1, d, d, d, a1, _f64(0.0), _f64(1.0), 1.0 + a1 * d, jnp.asarray(False))
    state = lax.while_loop(cond, body, init)
    h, s, ok = state[6], state[10], state[11]
    h = a1 * h
    rkmu = jnp.sqrt(0.5 * _PI * xi) * jnp.exp(-x) / s
    rk1 = rkmu * (xmu + x + 0.5 - h) * xi
    return rkmu, rk1, ok


def _k_pair(xmu, x, tol, max_iter):
    return lax.cond(
        x < _XMIN,
        lambda ops: _temme_k(*ops, tol, max_iter),
        lambda ops: _steed_k(*ops, tol, max_iter),
        (xmu, x),
    )


def _k_upward(xmu, x, nl, rkmu, rk1):
    xi2 = 2.0 / x

    def up(i, state):
        rkmu, rk1 = state
        return rk1, (xmu + jnp.float64(i)) * xi2 * rk1 + rkmu

    return lax.fori_loop(1, nl.astype(jnp.int32) + 1, up, (rkmu, rk1))


def bessel_ik(nu: jax.Array, x: jax.Array, tol: float, max_iter: int):
    """I_nu, K_nu, I'_nu, K'_nu for nu >= 0, x > 0; I follows from CF1 and the Wronskian."""
    nu = _f64(nu)
    x = _f64(x)
    xi = 1.0 / x
    nl = jnp.floor(nu + 0.5)
    xmu = nu - nl
    ril, ril1, rip1, f, ok1 = _ik_ratio(nu, x, nl, tol, max_iter)
    rkmu, rk1, ok2 = _k_pair(xmu, x, tol, max_iter)
    rkmup = xmu * xi * rkmu - rk1
    rimu = xi / (f * rkmu - rkmup)
    rkmu, rk1 = _k_upward(xmu, x, nl, rkmu, rk1)
    return rimu * ril1 / ril, rkmu, rimu * rip1 / ril, nu * xi * rkmu - rk1, ok1 & ok2


def bessel_k(nu: jax.Array, x: jax.Array, tol: float, max_iter: int):
    """K_nu and K_nu+1 for nu >= 0, x > 0 without the I continued fraction."""
    nu = _f64(nu)
    x = _f64(x)
    nl = jnp.floor(nu + 0.5)
    xmu = nu - nl
    rkmu, rk1, ok = _k_pair(xmu, x, tol, max_iter)
    rkmu, rk1 = _k_upward(xmu, x, nl, rkmu, rk1)
    return rkmu, rk1, ok


def miller_start(n: jax.Array, x: jax.Array) -> jax.Array:
    """Even starting order for the J backward recurrence."""
    m = jnp.maximum(n + jnp.floor(jnp.sqrt(40.0 * n)), jnp.floor(x + 10.0 * jnp.cbrt(x)) + 20.0)
    return 2.0 * jnp.floor(0.5 * (m + 1.0))


def _miller_j_loop(n, x, buffer_len: int | None = None):
    m = miller_start(n, x).astype(jnp.int32)
    tox = 2.0 / x
    buf = jnp.zeros((buffer_len if buffer_len is not None else 1,), dtype=jnp.float64)

    def body(i, state):
        bj, bjp, ans, total, buf = state
        j = (m - i).astype(jnp.float64)
        bj, bjp = j * tox * bj - bjp, bj
        scale = jnp.where(jnp.abs(bj) > _MILLER_BIG, _MILLER_SMALL, 1.0)
        bj, bjp, ans, total, buf = bj * scale, bjp * scale, ans * scale, total * scale, buf * scale
        # bj now holds order j - 1
        total = total + jnp.where(is_odd(j), bj, 0.0)
        ans = jnp.where(j == n, bjp, ans)
        if buffer_len is not None:
            idx = jnp.clip(j - 1.0, 0, buffer_len - 1).astype(jnp.int32)
            buf = jnp.where(j - 1.0 < buffer_len, buf.at[idx].set(bj), buf)
        return bj, bjp, ans, total, buf

    zero = _f64(0.0)
    bj, _, ans, total, buf = lax.fori_loop(0, m, body, (_f64(1.0), zero, zero, zero, buf))
    norm = 2.0 * total - bj
    return jnp.where(n == 0.0, bj, ans) / norm, buf / norm


def miller_j(n: jax.Array, x: jax.Array) -> jax.Array:
    """J_n(x), n >= 0, x > 0, normalized with J_0 + 2 sum J_2k = 1."""
    value, _ = _miller_j_loop(_f64(n), _f64(x))
    return value


def miller_j_sequence(n: int, x: jax.Array) -> jax.Array:
    """J_0 .. J_n(x) for static n >= 0 and x > 0."""
    _, buf = _miller_j_loop(_f64(n), _f64(x), buffer_len=n + 1)
    return buf


def miller_i_scaled(n: jax.Array, x: jax.Array, tol: float, max_iter: int):
    """exp(-x) I_n(x) by backward recurrence seeded with the continued fraction for I_{m+1}/I_m."""
    n = _f64(n)
    x = _f64(x)
    m = jnp.maximum(n, jnp.ceil(jnp.sqrt(80.0 * x))) + 10.0
    cf, ok = lentz(2.0 * (m + 1.0) / x, lambda i: (_f64(1.0), 2.0 * (m + 1.0 + i) / x), tol, max_iter)
    ratio = 1.0 / cf
    tox = 2.0 / x

    def body(i, state):
        bi, bip, ans, total = state
        j = m - jnp.float64(i)
        bi, bip = j * tox * bi + bip, bi
        scale = jnp.where(jnp.abs(bi) > _MILLER_BIG, _MILLER_SMALL, 1.0)
        bi, bip, ans, total = bi * scale, bip * scale, ans * scale, total * scale
        total = total + 2.0 * bi
        ans = jnp.where(j - 1.0 == n, bi, ans)
        return bi, bip, ans, total

    init = (_f64(1.0), ratio, _f64(0.0), 2.0 * (1.0 + ratio))
    bi, _, ans, total = lax.fori_loop(0, m.astype(jnp.int32), body, init)
    # I_0 + 2 sum_{k>=1} I_k = e^x
    return ans / (total - bi), ok


def upward_y(y0, y1, n, x):
    def body(k, state):
        ym, y = state
        return y, (2.0 * jnp.float64(k) / x) * y - ym

    _, yn = lax.fori_loop(1, _f64(n).astype(jnp.int32), body, (y0, y1))
    return jnp.where(n == 0, y0, yn)


def upward_k(k0, k1, n, x):
    def body(k, state):
        km, kk = state
        return kk, km + (2.0 * jnp.float64(k) / x) * kk

    _, kn = lax.fori_loop(1, _f64(n).astype(jnp.int32), body, (k0, k1))
    return jnp.where(n == 0, k0, kn)


__all__ = [
    "temme_gammas",
    "power_series",
    "hankel_sums",
    "hankel_j",
    "hankel_y",
    "hankel_i",
    "hankel_k",
    "bessel_jy",
    "bessel_ik",
    "bessel_k",
    "miller_start",
    "miller_j",
    "miller_j_sequence",
    "miller_i_scaled",
    "upward_y",
    "upward_k",
]
