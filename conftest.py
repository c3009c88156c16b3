"""Configures pytest further."""
from cryptography.hazmat.primitives.asymmetric import rsa
import pytest

REFERENCE_SIZES = [1024, 2048]
_reference_keys: dict[int, rsa.RSAPrivateKey] = {}


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip slower tests")
    parser.addoption("--run-extreme", action="store_true", default=False, help="run extreme value extremely slow tests")


def pytest_collection_modifyitems(config, items):
    skipdict = {}
    if config.getoption("--skip-slow"):
        skipdict["slow"] = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    if not config.getoption("--run-extreme"):
        skipdict["extreme"] = pytest.mark.skip(reason="Extreme test: needs --run-extreme option")
    if not skipdict:
        return
    for item in items:
        for k, v in skipdict.items():
            if k in item.keywords:
                item.add_marker(v)


@pytest.fixture(scope="session", params=REFERENCE_SIZES, ids=lambda size: f"ref{size}")
def reference_key(request) -> rsa.RSAPrivateKey:
    """An independently generated RSA key, made once per size and session."""
    if request.param not in _reference_keys:
        _reference_keys[request.param] = rsa.generate_private_key(public_exponent=65537, key_size=request.param)
    return _reference_keys[request.param]


@pytest.fixture
def textbook() -> dict[str, int]:
    """The classic worked example with p = 61 and q = 53."""
    return {"p": 61, "q": 53, "n": 3233, "phi": 3120, "e": 17, "d": 2753, "m": 65, "c": 2790}
