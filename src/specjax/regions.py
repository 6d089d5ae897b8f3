from __future__ import annotations

from typing import Callable, Sequence

import jax
from jax import lax
import jax.numpy as jnp

jax.config.update("jax_enable_x64", True)


def classify(conditions: Sequence[jax.Array], tags: Sequence[int], default: int) -> jax.Array:
    """First matching tag wins; conditions are tested in order."""
    return jnp.select(list(conditions), [jnp.int32(t) for t in tags], jnp.int32(default)).astype(jnp.int32)


def dispatch(tag: jax.Array, branches: Sequence[Callable], *operands):
    return lax.switch(tag, tuple(branches), *operands)


def describe(names: Sequence[str], tag) -> str:
    idx = int(tag)
    return names[idx] if 0 <= idx < len(names) else f"region{idx}"


__all__ = ["classify", "dispatch", "describe"]
