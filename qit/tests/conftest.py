"""Shared fixtures: a seeded RNG and the kernel backends to run against."""

import os

import numpy as np
import pytest


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Deterministic RNG; override the seed with TEST_RNG_SEED when debugging."""
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(params=["serial", "numpy", "numba"])
def backend(request) -> str:
    if request.param == "numba":
        pytest.importorskip("numba")
    return request.param
