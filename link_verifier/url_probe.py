"""
Reachability probing for external links.

Each URL gets a HEAD request (falling back to GET when the server refuses
HEAD or answers with a client error) under a per-URL timeout. Any status in
200-399 after redirects counts as reachable. Connection errors and timeouts
are retried a configurable number of times.

Verdicts are cached for the lifetime of the prober, so a URL linked from
many documents is fetched once. prefetch() probes a whole list concurrently
(bounded by a semaphore); reachable() answers from the cache and probes
synchronously on a miss.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import aiohttp

from .verifier_config import config

logger = logging.getLogger(__name__)

# Statuses for which HEAD is retried as GET
HEAD_REJECTED_STATUSES = (405, 501)


@dataclass
class ProbeResult:
    """Outcome of probing one URL"""
    url: str
    reachable: bool = False
    status: Optional[int] = None
    error: Optional[str] = None
    attempts: int = 0
    elapsed: float = 0.0


class UrlProber:
    """Network oracle: reachable(url) -> bool"""

    def __init__(self, timeout: float = None, retry_attempts: int = None,
                 retry_delay: float = None, max_concurrent: int = None,
                 user_agent: str = None):
        self.timeout = timeout if timeout is not None else config.request_timeout
        self.retry_attempts = max(0, retry_attempts if retry_attempts is not None
                                  else config.retry_attempts)
        self.retry_delay = retry_delay if retry_delay is not None else config.retry_delay
        self.max_concurrent = max(1, max_concurrent if max_concurrent is not None
                                  else config.max_concurrent_probes)
        self.user_agent = user_agent or config.user_agent

        self._results: Dict[str, ProbeResult] = {}
        self._stats = {
            'probed': 0,
            'reachable': 0,
            'unreachable': 0,
            'cache_hits': 0,
            'total_probe_time': 0.0,
        }

    def reachable(self, url: str) -> bool:
        """Return True if url answered with a 2xx or 3xx status"""
        result = self._results.get(url)
        if result is not None:
            self._stats['cache_hits'] += 1
        else:
            result = asyncio.run(self._probe_all([url]))[0]
        return result.reachable

    def prefetch(self, urls: Iterable[str]) -> Dict[str, ProbeResult]:
        """Probe every URL not probed yet, concurrently; return all verdicts"""
        wanted = list(dict.fromkeys(urls))
        pending = [u for u in wanted if u not in self._results]
        if pending:
            start = time.perf_counter()
            asyncio.run(self._probe_all(pending))
            logger.info(
                f"Prefetched {len(pending)} URL(s) in {time.perf_counter() - start:.2f}s "
                f"(concurrency={self.max_concurrent})")
        return {u: self._results[u] for u in wanted}

    def get_result(self, url: str) -> Optional[ProbeResult]:
        return self._results.get(url)

    def get_stats(self) -> Dict[str, float]:
        """Get prober statistics"""
        return dict(self._stats, cached=len(self._results))

    async def _probe_all(self, urls: List[str]) -> List[ProbeResult]:
        semaphore = asyncio.Semaphore(self.max_concurrent)
        connector = aiohttp.TCPConnector(
            limit=self.max_concurrent,
            enable_cleanup_closed=True,
            ttl_dns_cache=300,
        )
        timeout = aiohttp.ClientTimeout(
            total=self.timeout,
            connect=min(self.timeout, 10),
        )

        async with aiohttp.ClientSession(
            connector=connector,
            timeout=timeout,
            headers={'User-Agent': self.user_agent},
        ) as session:

            async def throttled_probe(url: str) -> ProbeResult:
                async with semaphore:
                    return await self._probe_url(session, url)

            results = await asyncio.gather(*(throttled_probe(u) for u in urls))

        for result in results:
            self._results[result.url] = result
            self._stats['probed'] += 1
            self._stats['total_probe_time'] += result.elapsed
            if result.reachable:
                self._stats['reachable'] += 1
            else:
                self._stats['unreachable'] += 1
        return list(results)

    async def _probe_url(self, session: aiohttp.ClientSession, url: str) -> ProbeResult:
        result = ProbeResult(url=url)
        start = time.perf_counter()

        for attempt in range(1, self.retry_attempts + 2):
            result.attempts = attempt
            try:
                result.status = await self._request_status(session, url)
                result.reachable = 200 <= result.status < 400
                result.error = None if result.reachable else f"HTTP {result.status}"
                break
            except aiohttp.InvalidURL as e:
                result.error = f"invalid URL: {e}"
                break
            except asyncio.TimeoutError:
                result.error = f"timeout after {self.timeout}s"
            except aiohttp.ClientError as e:
                result.error = str(e) or e.__class__.__name__
            except Exception as e:
                logger.error(f"Unexpected error probing {url}: {e}")
                result.error = str(e)
                break

            if attempt <= self.retry_attempts:
                logger.debug(
                    f"Retrying {url} after error: {result.error} (attempt {attempt})")
                await asyncio.sleep(self.retry_delay)

        result.elapsed = time.perf_counter() - start
        if not result.reachable:
            logger.debug(f"URL unreachable: {url} ({result.error})")
        return result

    async def _request_status(self, session: aiohttp.ClientSession, url: str) -> int:
        async with session.head(url, allow_redirects=True) as response:
            status = response.status

        if status in HEAD_REJECTED_STATUSES or 400 <= status < 500:
            async with session.get(url, allow_redirects=True) as response:
                status = response.status

        return status
