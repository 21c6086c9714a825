"""Register a custom DID method driver with the resolver."""

import asyncio

from did_io import CachedResolver, MethodDriver, UnsupportedOperation

MULTIKEY = "z6MkhaXgBZDvotDkL5257faiztiGiC2QtKLGpbnnEGta2doK"

DOCUMENTS = {
    "did:example:alice": {
        "id": "did:example:alice",
        "verificationMethod": [
            {
                "id": "did:example:alice#key-1",
                "type": "Multikey",
                "controller": "did:example:alice",
                "publicKeyMultibase": MULTIKEY,
            }
        ],
        "authentication": ["did:example:alice#key-1"],
    }
}


class InMemoryDriver(MethodDriver):
    """did:example documents held in a dict."""

    method = "example"

    def __init__(self, documents):
        self.documents = documents
        self.fetches = 0

    async def get(self, did, **options):
        self.fetches += 1
        await asyncio.sleep(0.01)
        return self.documents[did]

    async def generate(self, **options):
        raise UnsupportedOperation("read only")

    async def update(self, did_document, **options):
        self.documents[did_document.id] = did_document.serialize()

    async def register(self, did_document, **options):
        raise UnsupportedOperation("read only")


async def main():
    driver = InMemoryDriver(DOCUMENTS)
    resolver = CachedResolver()
    resolver.use(driver)

    first, second = await asyncio.gather(
        resolver.resolve_and_parse("did:example:alice"),
        resolver.resolve_and_parse("did:example:alice"),
    )
    assert first is not second
    assert driver.fetches == 1

    assert first.approves_method_for("did:example:alice#key-1", "authentication")
    assert not first.approves_method_for("did:example:alice#key-1", "keyAgreement")

    first.add_service(fragment="hub", type="Hub", endpoint="https://hub.example")
    assert second.service is None
    await resolver.update(first)
    print(DOCUMENTS["did:example:alice"]["service"])


if __name__ == "__main__":
    asyncio.run(main())
