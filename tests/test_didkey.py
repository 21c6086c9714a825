import pytest

from did_io.cached import CachedResolver
from did_io.document import DIDDocument, MissingCryptoProvider
from did_io.methods.key import DIDKey
from did_io.resolver import DIDResolutionError, UnsupportedOperation

MULTIKEY = "z6MkhaXgBZDvotDkL5257faiztiGiC2QtKLGpbnnEGta2doK"
DIDKEY = f"did:key:{MULTIKEY}"
KID = f"{DIDKEY}#{MULTIKEY}"


@pytest.mark.asyncio
async def test_is_resolvable():
    resolver = DIDKey()
    assert await resolver.is_resolvable(DIDKEY)
    assert await resolver.is_resolvable(KID)
    assert not await resolver.is_resolvable("did:key:abc")
    assert not await resolver.is_resolvable("did:web:example.com")


@pytest.mark.asyncio
async def test_get_document():
    result = await DIDKey().get(DIDKEY)
    assert isinstance(result, dict)
    assert result["@context"][0] == "https://www.w3.org/ns/did/v1"

    doc = DIDDocument.deserialize(result)
    assert doc.id == DIDKEY
    assert doc.find_verification_method(id=KID)["publicKeyMultibase"] == MULTIKEY
    for purpose in (
        "authentication",
        "assertionMethod",
        "capabilityDelegation",
        "capabilityInvocation",
    ):
        assert doc.approves_method_for(KID, purpose)
    assert not doc.approves_method_for(KID, "keyAgreement")


@pytest.mark.asyncio
async def test_get_key_id_returns_method():
    method = await DIDKey().get(KID)
    assert method == {
        "id": KID,
        "type": "Multikey",
        "controller": DIDKEY,
        "publicKeyMultibase": MULTIKEY,
    }


@pytest.mark.asyncio
async def test_get_unknown_key_id():
    with pytest.raises(DIDResolutionError):
        await DIDKey().get(f"{DIDKEY}#other")


@pytest.mark.asyncio
async def test_get_invalid():
    with pytest.raises(DIDResolutionError):
        await DIDKey().get("did:key:abc")


@pytest.mark.asyncio
async def test_generate(crypto):
    driver = DIDKey(crypto=crypto)
    result = await driver.generate()

    (key,) = crypto.generated
    doc = result["did_document"]
    assert key.type == "Ed25519VerificationKey2020"
    assert doc.id == f"did:key:{key.multikey}"
    assert key.controller == doc.id
    assert result["key_pairs"] == {key.id: key}
    assert doc.find_verification_method(purpose="authentication") == key.export()


@pytest.mark.asyncio
async def test_generate_requires_crypto():
    with pytest.raises(MissingCryptoProvider):
        await DIDKey().generate()


@pytest.mark.asyncio
async def test_update_and_register_unsupported():
    driver = DIDKey()
    doc = DIDDocument.deserialize(await driver.get(DIDKEY))
    with pytest.raises(UnsupportedOperation):
        await driver.update(did_document=doc)
    with pytest.raises(UnsupportedOperation):
        await driver.register(did_document=doc)


@pytest.mark.asyncio
async def test_cached_resolution():
    resolver = CachedResolver()
    resolver.use(DIDKey())

    doc = await resolver.get(did=DIDKEY)
    assert await resolver.get(did=DIDKEY) is doc
    key = await resolver.get(url=KID)
    assert key["id"] == KID
    assert len(resolver.cache) == 2


@pytest.mark.asyncio
async def test_cached_documents_are_not_shared():
    resolver = CachedResolver()
    resolver.use(DIDKey())

    first = await resolver.resolve_and_parse(DIDKEY)
    first.add_service(fragment="hub", type="Hub", endpoint="https://hub.test")
    first.remove_verification_method(KID)

    second = await resolver.resolve_and_parse(DIDKEY)
    assert second is not first
    assert second.service is None
    assert second.approves_method_for(KID, "authentication")
    assert "service" not in await resolver.get(did=DIDKEY)
