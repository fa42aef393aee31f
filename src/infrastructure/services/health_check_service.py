"""Infrastructure implementation for system health checks."""

from __future__ import annotations

import asyncio
from time import perf_counter
from typing import Dict, Iterable, List, Optional
from urllib.parse import urljoin

import httpx
import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.domain.entities.health import DependencyStatus, ServiceStatus, SystemHealth
from src.domain.ports.health_check import IHealthCheckService
from src.shared import EnumCacheBackend


class HealthCheckService(IHealthCheckService):
    """Collect health information for the history source and the cache store."""

    def __init__(
        self,
        history_url: str,
        cache_backend: str,
        redis_url: str,
        *,
        history_token: Optional[str] = None,
        http_timeout: float = 5.0,
        socket_timeout: float = 5.0,
    ) -> None:
        self._history_url = history_url
        self._history_token = history_token
        self._cache_backend = cache_backend
        self._redis_url = redis_url
        self._http_timeout = http_timeout
        self._socket_timeout = socket_timeout

    async def evaluate(self) -> SystemHealth:
        """Run checks concurrently and aggregate system health."""

        dependency_statuses: List[DependencyStatus] = list(
            await asyncio.gather(self._check_history_source(), self._check_cache())
        )
        overall_status = self._aggregate_status(dependency_statuses)
        return SystemHealth(status=overall_status, dependencies=dependency_statuses)

    def _aggregate_status(self, statuses: Iterable[DependencyStatus]) -> ServiceStatus:
        has_unknown = False
        has_degraded = False

        for status in statuses:
            if status.status == ServiceStatus.DOWN:
                return ServiceStatus.DOWN
            if status.status == ServiceStatus.DEGRADED:
                has_degraded = True
            if status.status == ServiceStatus.UNKNOWN:
                has_unknown = True

        if has_degraded:
            return ServiceStatus.DEGRADED
        if has_unknown:
            return ServiceStatus.UNKNOWN
        return ServiceStatus.UP

    async def _check_cache(self) -> DependencyStatus:
        if self._cache_backend != EnumCacheBackend.REDIS.value:
            return DependencyStatus(
                name="cache",
                status=ServiceStatus.UP,
                message="In-memory cache store",
                details={"backend": self._cache_backend},
            )
        if not self._redis_url:
            return DependencyStatus(
                name="cache",
                status=ServiceStatus.UNKNOWN,
                message="Redis URL not configured.",
            )

        start = perf_counter()
        client = aioredis.from_url(
            self._redis_url,
            socket_connect_timeout=self._socket_timeout,
            socket_timeout=self._socket_timeout,
        )
        try:
            await client.ping()
            return DependencyStatus(
                name="cache",
                status=ServiceStatus.UP,
                message="Redis ping successful",
                latency_ms=(perf_counter() - start) * 1000,
                details={"backend": self._cache_backend},
            )
        except (RedisError, OSError) as exc:
            # the engine keeps working without a cache, only slower
            return DependencyStatus(
                name="cache",
                status=ServiceStatus.DEGRADED,
                message=f"Redis ping failed: {exc}",
                latency_ms=(perf_counter() - start) * 1000,
                details={"backend": self._cache_backend},
            )
        finally:
            await client.aclose()

    async def _check_history_source(self) -> DependencyStatus:
        name = "history_source"
        if not self._history_url:
            return DependencyStatus(
                name=name,
                status=ServiceStatus.UNKNOWN,
                message="History source URL not configured.",
            )

        url = urljoin(self._history_url.rstrip("/") + "/", "api/")
        headers: Dict[str, str] = {}
        if self._history_token:
            headers["Authorization"] = f"Bearer {self._history_token}"

        start = perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self._http_timeout) as client:
                response = await client.get(url, headers=headers)
        except httpx.RequestError as exc:
            return DependencyStatus(
                name=name,
                status=ServiceStatus.DOWN,
                message=f"HTTP request failed: {exc}",
                latency_ms=(perf_counter() - start) * 1000,
                details={"url": url},
            )

        status_code = response.status_code
        if status_code >= 500:
            status = ServiceStatus.DOWN
        elif status_code >= 400:
            status = ServiceStatus.DEGRADED
        else:
            status = ServiceStatus.UP

        return DependencyStatus(
            name=name,
            status=status,
            message=f"HTTP {status_code}",
            latency_ms=(perf_counter() - start) * 1000,
            details={"url": url, "status_code": status_code},
        )
