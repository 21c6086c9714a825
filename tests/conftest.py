import asyncio
from typing import Any, Dict, Optional

import pytest

from did_io.crypto import CryptoProvider, KeyPair
from did_io.driver import MethodDriver

MULTIKEY = "z6MkhaXgBZDvotDkL5257faiztiGiC2QtKLGpbnnEGta2doK"


def pytest_addoption(parser):
    parser.addoption(
        "--runexternal",
        action="store_true",
        default=False,
        help="run tests that make external requests",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "external_fetch: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--runexternal"):
        return
    skip_external = pytest.mark.skip(reason="need --runexternal option to run")
    for item in items:
        if "external_fetch" in item.keywords:
            item.add_marker(skip_external)


class MockKeyPair(KeyPair):
    def __init__(self, type: str, controller: Optional[str] = None, n: int = 0):
        self.type = type
        self.controller = controller
        self.multikey = MULTIKEY if n == 0 else f"{MULTIKEY[:-1]}{n}"
        self.id = f"{controller}#key-{n}" if controller else None

    def export(self, public_key: bool = True) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "controller": self.controller,
            "publicKeyMultibase": self.multikey,
        }


class MockCryptoProvider(CryptoProvider):
    def __init__(self):
        self.generated = []

    async def generate(self, type: str, controller: Optional[str] = None, **options):
        key = MockKeyPair(type, controller, n=len(self.generated) + 1)
        self.generated.append(key)
        return key


class MockDriver(MethodDriver):
    """Records calls; get resolves after a short delay."""

    def __init__(self, method: str = "ex", delay: float = 0.01, fail: int = 0):
        self.method = method
        self.delay = delay
        self.fail = fail
        self.calls: Dict[str, list] = {
            "get": [],
            "generate": [],
            "update": [],
            "register": [],
        }

    async def get(self, did: str, **options) -> Dict[str, Any]:
        self.calls["get"].append((did, options))
        await asyncio.sleep(self.delay)
        if self.fail:
            self.fail -= 1
            raise RuntimeError(f"driver failed for {did}")
        return {"id": did, "fetch": len(self.calls["get"])}

    async def generate(self, **options):
        self.calls["generate"].append(options)
        return {"did_document": {"id": f"did:{self.method}:new"}, "key_pairs": {}}

    async def update(self, did_document, **options):
        self.calls["update"].append((did_document, options))
        return "updated"

    async def register(self, did_document, **options):
        self.calls["register"].append((did_document, options))
        return "registered"


@pytest.fixture
def crypto():
    yield MockCryptoProvider()


@pytest.fixture
def driver():
    yield MockDriver()


@pytest.fixture
def make_driver():
    yield MockDriver
