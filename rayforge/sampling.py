"""
Random number streams for Monte Carlo sampling.

Every render task owns its own numpy Generator so that workers never
share state and a fixed seed reproduces the same image regardless of
how tasks are scheduled.
"""

from __future__ import annotations
from typing import Optional
import numpy as np


# Fallback stream for callers that do not pass their own generator
_default_rng = np.random.default_rng()


def resolve(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else _default_rng


def random_double(
    rng: Optional[np.random.Generator] = None,
    min_val: float = 0.0,
    max_val: float = 1.0
) -> float:
    """Uniform float in [min_val, max_val)."""
    rng = resolve(rng)
    if min_val == 0.0 and max_val == 1.0:
        return float(rng.random())
    return float(rng.uniform(min_val, max_val))


def spawn_seeds(seed: Optional[int], count: int) -> list[np.random.SeedSequence]:
    """Derive `count` independent child seed sequences from one root seed.

    Args:
        seed: Root seed (None draws fresh entropy from the OS)
        count: Number of children, one per task

    Returns:
        List of SeedSequence objects, picklable for process pools
    """
    return np.random.SeedSequence(seed).spawn(count)
