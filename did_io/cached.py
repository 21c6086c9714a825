"""Caching DID resolver."""

import time
from typing import Any, Callable, Mapping, Optional, Union

from did_io.cache import CacheOptions, MemoizingCache
from did_io.document import DIDDocument
from did_io.driver import MethodDriver
from did_io.resolver import DIDResolver, parse_document


class CachedResolver:
    """DID resolver memoizing ``get`` results by DID or DID URL.

    Only ``get`` is cached. ``generate``, ``update`` and ``register`` change
    state on the method's side and always go to the driver.

    Usage::

        resolver = CachedResolver(max=500, max_age=60_000)
        resolver.use(DIDKey())
        doc = await resolver.resolve_and_parse("did:key:z6Mk...")
    """

    def __init__(
        self,
        options: Optional[CacheOptions] = None,
        resolver: Optional[DIDResolver] = None,
        timer: Optional[Callable[[], float]] = None,
        **cache_options,
    ):
        """Initialize the resolver.

        Args:
            options: cache bounds; alternatively pass ``max``, ``max_age``
                (milliseconds) and ``update_age_on_get`` as keywords
            resolver: resolver holding the method drivers; a new, empty one
                is created if not given
            timer: clock used to age cache entries
        """
        if options and cache_options:
            raise TypeError("Pass either options or cache keyword arguments")
        options = options or CacheOptions(**cache_options)

        self.resolver = resolver or DIDResolver()
        self._cache = MemoizingCache(options, timer=timer or time.monotonic)

    @property
    def cache(self) -> MemoizingCache:
        """Return the underlying cache."""
        return self._cache

    def use(self, driver: MethodDriver):
        """Register a driver under the method name it declares."""
        method = getattr(driver, "method", None)
        if not method:
            raise TypeError(f"{type(driver).__name__} does not declare a method")
        self.resolver.use(method, driver)

    async def get(
        self, did: Optional[str] = None, url: Optional[str] = None, **options
    ) -> Any:
        """Fetch a DID document, from cache when possible.

        Either ``did`` or ``url`` is required. ``url`` reads better when the
        value is a key id or other DID URL. The value given is the cache key
        as-is, so a DID and a DID URL into its document are cached apart.

        Args:
            did: DID to fetch
            url: DID URL to fetch, instead of ``did``
            options: passed through to the driver's ``get``
        """
        did = did or url
        if not did:
            raise TypeError('A string "did" or "url" parameter is required.')

        # Routing errors surface here instead of being memoized
        self.resolver.method_for_did(did)

        return await self._cache.memoize(
            did, lambda: self.resolver.get(did=did, **options)
        )

    async def resolve_and_parse(self, did: str, **options) -> DIDDocument:
        """Fetch a DID document, from cache when possible, as a new DIDDocument.

        Cached results are shared between callers; the returned document is
        not, so it may be edited before an ``update``.
        """
        return parse_document(await self.get(did=did, **options))

    async def generate(self, method: str, **options) -> Mapping[str, Any]:
        """Generate a new DID document with the driver for a method."""
        return await self.resolver.generate(method, **options)

    async def update(
        self, did_document: Union[DIDDocument, Mapping[str, Any]], **options
    ) -> Any:
        """Commit changes to a DID document through its method driver."""
        return await self.resolver.update(did_document, **options)

    async def register(
        self, did_document: Union[DIDDocument, Mapping[str, Any]], **options
    ) -> Any:
        """Register a DID document through its method driver."""
        return await self.resolver.register(did_document, **options)
