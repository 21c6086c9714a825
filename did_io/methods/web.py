"""did:web driver.

Resolve did:web style dids to a did document. did:web method:
https://w3c-ccg.github.io/did-method-web/
"""

import json
import logging
import re
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlparse

import aiohttp
from pydid import DID

from did_io.crypto import CryptoProvider, KeyPair
from did_io.document import DIDDocument
from did_io.driver import MethodDriver
from did_io.resolver import DIDNotFound, DIDResolutionError, UnsupportedOperation

LOG = logging.getLogger(__name__)

domain_regex = (
    r"((?!-))(xn--)?[a-z0-9][a-z0-9-_]{0,61}[a-z0-9]{0,1}"
    r"\.(xn--)?([a-z0-9\._-]{1,61}|[a-z0-9-]{1,30})"
    r"(%3[aA]\d+)?"  # Port
    r"(:[a-zA-Z0-9\._-]+)*"  # Path
)
did_web_pattern = re.compile(rf"^did:web:{domain_regex}$")


class DIDWeb(MethodDriver):
    """did:web driver.

    Documents are fetched over HTTPS on every ``get``; wrap the driver in a
    CachedResolver to avoid refetching. Publishing a document means hosting
    its ``did.json``, which is outside this driver, so ``update`` and
    ``register`` are not supported.
    """

    method = "web"

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        crypto: Optional[CryptoProvider] = None,
        user_agent: str = "did-io/1.0",
    ):
        """Initialize the driver.

        Args:
            session: HTTP session to reuse; a short-lived one is opened per
                request otherwise
            crypto: provider used by ``generate`` for keys given by type name
            user_agent: User-Agent header sent with requests
        """
        self.session = session
        self.crypto = crypto
        self.user_agent = user_agent

    async def get(self, did: str, **options) -> Dict[str, Any]:
        """Resolve a did:web to a did document via http request."""
        if not await self.is_resolvable(did.split("#")[0]):
            raise DIDResolutionError(f"Invalid did:web: {did}")
        uri = DIDWeb._did_to_uri(did.split("#")[0])
        LOG.debug("Fetching %s from %s", did, uri)

        session = self.session or aiohttp.ClientSession()
        try:
            async with session.get(
                uri, headers={"User-Agent": self.user_agent}
            ) as response:
                if response.status == 404:
                    raise DIDNotFound(
                        f"The did:web {did} returned a 404 not found while resolving"
                    )
                if response.status != 200:
                    raise DIDResolutionError(
                        f"Unknown server error ({response.status}) "
                        f"while resolving did:web: {did}"
                    )
                try:
                    doc = json.loads(await response.text())
                except json.decoder.JSONDecodeError as e:
                    raise DIDNotFound(f"The did:web {did} returned invalid JSON {e}")
        except aiohttp.ClientError as e:
            raise DIDResolutionError("Failed to fetch did document") from e
        finally:
            if not self.session:
                await session.close()

        if not isinstance(doc, dict):
            raise DIDNotFound(f"The did:web {did} did not return a JSON object")
        return doc

    async def generate(
        self,
        url: str,
        key_map: Optional[Mapping[str, Union[str, KeyPair]]] = None,
        **options,
    ) -> Dict[str, Any]:
        """Create a did:web document for the given URL.

        The resulting document still has to be served at the URL returned by
        ``_did_to_uri`` for the DID to resolve.
        """
        doc = DIDDocument(
            id=DIDWeb.did_from_url(url),
            **{"@context": ["https://www.w3.org/ns/did/v1"]},
        )
        result = await doc.init_keys(crypto=self.crypto, key_map=key_map)
        return {"did_document": doc, "key_pairs": result["key_pairs"]}

    async def update(self, did_document: DIDDocument, **options):
        """Publish updates by hosting the new did.json instead."""
        raise UnsupportedOperation("did:web documents are updated by their host")

    async def register(self, did_document: DIDDocument, **options):
        """Publish by hosting did.json instead."""
        raise UnsupportedOperation("did:web documents are registered by their host")

    async def is_resolvable(self, did: str) -> bool:
        """Determine if the did is a valid did:web did that can be resolved."""
        if DID.is_valid(did) and did_web_pattern.match(did):
            return True
        return False

    @staticmethod
    def _did_to_uri(did: str) -> str:
        # Split the did by it's segments
        did_segments = did.split(":")

        # Get the hostname & port
        hostname = did_segments[2].lower()
        hostname = hostname.replace("%3a", ":")

        # Resolve the path portion of the DID, if there is no path, default to
        # a .well-known address
        path = ".well-known"
        if len(did_segments) > 3:
            path = "/".join(did_segments[3:])

        return f"https://{hostname}/{path}/did.json"

    @staticmethod
    def did_from_url(url: str) -> str:
        """Convert a URL into a did:web did."""

        # Make sure that the URL starts with a scheme
        if not url.startswith("http"):
            url = f"https://{url}"

        parsed_url = urlparse(url)

        did = "did:web:%s" % parsed_url.netloc.replace(":", "%3A")

        path = parsed_url.path.replace(".well-known/did.json", "")
        path = path.replace("/did.json", "")

        if len(path) > 1:
            did += path.rstrip("/").replace("/", ":")
        return did
