"""Report acquisition: cache, else model, then parse and remember.

``ReportAcquisitionOrchestrator.acquire`` is the single asynchronous entry
point the UI calls per search:

1. normalize the query into a cache key;
2. on a cache hit, return immediately;
3. otherwise make exactly one backend call, parse the reply, write the
   result through to the cache (ambiguous results included) and return it.

Backend and parser failures surface as
:class:`~startup_guardian.domain.exceptions.AcquisitionError` subclasses
with no partial result.  Cache failures never surface.  Concurrent
acquisitions of the same query are not de-duplicated; the last cache write
wins.
"""

from __future__ import annotations

import logging

from startup_guardian.domain.exceptions import AcquisitionError, BackendUnavailableError
from startup_guardian.domain.values import ReportResult, result_mode
from startup_guardian.infrastructure.cache import ReportCache
from startup_guardian.infrastructure.llm import ModelBackend
from startup_guardian.services.normalizer import normalize_query
from startup_guardian.services.parser import ResponseParser

logger = logging.getLogger(__name__)


class ReportAcquisitionOrchestrator:
    """Composes cache, backend and parser into one acquisition step.

    Parameters
    ----------
    backend:
        The model backend to ask on a cache miss.
    cache:
        Report cache.  Defaults to an in-memory cache.
    parser:
        Response parser.  Defaults to a fresh :class:`ResponseParser`.
    """

    def __init__(
        self,
        backend: ModelBackend,
        cache: ReportCache | None = None,
        parser: ResponseParser | None = None,
    ) -> None:
        self._backend = backend
        self._cache = cache if cache is not None else ReportCache()
        self._parser = parser or ResponseParser()

    @property
    def cache(self) -> ReportCache:
        return self._cache

    async def acquire(self, raw_query: str, use_cache: bool = True) -> ReportResult:
        """Return the report for *raw_query*.

        Parameters
        ----------
        raw_query:
            The user's free-text query.
        use_cache:
            If ``False``, skip the cache lookup (the fresh result is still
            written through).

        Raises
        ------
        BackendUnavailableError
            The backend could not produce a reply.
        MalformedResponseError
            The reply held no decodable JSON object.
        """
        key = normalize_query(raw_query)

        if use_cache:
            cached = self._cache.get(key)
            if cached is not None:
                logger.info("Serving cached report for %r", raw_query)
                return cached

        try:
            reply = await self._backend.generate(raw_query)
        except AcquisitionError:
            raise
        except Exception as exc:
            logger.exception("Backend %s failed", self._backend.backend_name)
            raise BackendUnavailableError(
                f"Backend failed: {exc}", query=raw_query
            ) from exc

        result = self._parser.parse(reply.text, reply.citations, query=raw_query)
        logger.info(
            "Acquired %s report for %r from %s",
            result_mode(result).value,
            raw_query,
            self._backend.backend_name,
        )

        self._cache.put(key, result)
        return result

    def __repr__(self) -> str:
        return f"ReportAcquisitionOrchestrator(backend={self._backend.backend_name!r})"
