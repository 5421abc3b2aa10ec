import os
import platform

import numpy as np
import pytest
from hypothesis import settings

# Some OS can be slow or have higher variability in their runtimes on CI
settings.register_profile("local", deadline=None, max_examples=50)
settings.register_profile("CI", deadline=None, max_examples=10)
if os.getenv("CI"):
    settings.load_profile("CI")
else:
    settings.load_profile("local")


def pytest_configure(config):
    config.addinivalue_line("markers", "skip_pypy: skip this test on PyPy")


def pytest_runtest_setup(item):
    if "skip_pypy" in item.keywords and platform.python_implementation() == "PyPy":
        pytest.skip("skipped on PyPy")


def gen_entropy(kind: str, size: int) -> bytes:
    """Deterministic sample data, `kind` picks how random it is."""
    rng = np.random.default_rng(0)
    if kind == "min":
        return bytes(size)
    if kind == "medium":
        return rng.integers(0, 128, size=size, dtype=np.uint8).tobytes()
    return rng.integers(0, 256, size=size, dtype=np.uint8).tobytes()


@pytest.fixture(
    params=[
        (kind, size)
        for kind in ("min", "medium", "max")
        for size in (32, 512, 8192)
    ],
    ids=lambda p: f"{p[0]}-entropy-{p[1]}",
)
def sample(request):
    return gen_entropy(*request.param)


@pytest.fixture(scope="session")
def plaintext():
    """A couple hundred KiB of text: spans several encoder blocks."""
    line = b"oh what a beautiful morning, oh what a beautiful day!! %d\n"
    return b"".join(line % i for i in range(4000))
