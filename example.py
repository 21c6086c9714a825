"""Example of resolving DIDs with did-io."""

from did_io import CachedResolver
from did_io.methods.key import DIDKey
from did_io.methods.web import DIDWeb

DID = "did:key:z6MkhaXgBZDvotDkL5257faiztiGiC2QtKLGpbnnEGta2doK"


async def main():
    """An example of resolving a did:key through a caching resolver."""
    resolver = CachedResolver(max=100, max_age=60_000)
    resolver.use(DIDKey())
    resolver.use(DIDWeb())

    doc = await resolver.resolve_and_parse(DID)
    print(doc.serialize())

    method = doc.find_verification_method(purpose="assertionMethod")
    print(method["id"], doc.approves_method_for(method["id"], "assertionMethod"))

    key = await resolver.get(url=method["id"])
    print(key)


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())
