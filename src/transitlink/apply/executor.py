"""Applying a build plan through a provider."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from transitlink.apply.provider import Provider
from transitlink.core.graph import BuildPlan
from transitlink.core.schema import ResourceKind
from transitlink.errors import ApplyAborted, ApplyError, DependencyFailure
from transitlink.logging import get_logger

logger = get_logger(__name__)


class ApplyStatus(str, Enum):
    """Outcome of one resource."""

    CREATED = "created"
    FAILED = "failed"
    DEPENDENCY_FAILED = "dependency_failed"
    CANCELLED = "cancelled"


@dataclass
class ApplyResult:
    """Result of applying one planned resource."""

    key: str
    kind: str
    status: ApplyStatus
    resource_id: str | None = None
    error: Exception | None = None
    latency_ms: float | None = None

    @property
    def ok(self) -> bool:
        return self.status == ApplyStatus.CREATED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "key": self.key,
            "kind": self.kind,
            "status": self.status.value,
            "resource_id": self.resource_id,
            "error": str(self.error) if self.error else None,
            "latency_ms": self.latency_ms,
        }


@dataclass
class ApplyReport:
    """Per-resource results in plan order."""

    results: dict[str, ApplyResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results.values())

    def by_status(self, status: ApplyStatus) -> list[ApplyResult]:
        return [r for r in self.results.values() if r.status == status]

    def handle_for(self, key: str) -> str | None:
        """Provider id of a resource, only once its creation succeeded."""
        result = self.results.get(key)
        if result is None or not result.ok:
            return None
        return result.resource_id

    def errors(self) -> list[Exception]:
        return [r.error for r in self.results.values() if r.error is not None]

    def raise_for_failures(self) -> None:
        """Raise ApplyError if any resource did not apply."""
        if self.ok:
            return
        failed = self.by_status(ApplyStatus.FAILED)
        raise ApplyError(
            f"{len(failed)} resource(s) failed, "
            f"{len(self.by_status(ApplyStatus.DEPENDENCY_FAILED))} skipped, "
            f"{len(self.by_status(ApplyStatus.CANCELLED))} cancelled",
            {"failed": [r.key for r in failed]},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "results": [r.to_dict() for r in self.results.values()],
        }

    def __len__(self) -> int:
        return len(self.results)


class Applier:
    """
    Walks a build plan in dependency generations and creates each resource.

    A resource is submitted only after every dependency was created.
    Failures are not retried; everything downstream of a failure is
    reported as DependencyFailure. After abort() (or a provider raising
    ApplyAborted) nothing else is submitted.
    """

    def __init__(self, provider: Provider, *, max_workers: int = 1) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._provider = provider
        self._max_workers = max_workers
        self._aborted = threading.Event()
        self._creators: dict[ResourceKind, Callable[[Any, dict[str, str]], str]] = {
            ResourceKind.NETWORK: self._create_network,
            ResourceKind.SUBNET_TIER: self._create_subnet_tier,
            ResourceKind.SECURITY_CONTEXT: self._create_security_context,
            ResourceKind.TRANSIT_HUB: self._create_transit_hub,
            ResourceKind.ATTACHMENT: self._create_attachment,
            ResourceKind.ROUTE: self._create_route,
            ResourceKind.INSTANCE: self._create_instance,
        }

    @property
    def aborted(self) -> bool:
        return self._aborted.is_set()

    def abort(self) -> None:
        """Stop submitting resources; in-flight calls are left to the provider."""
        self._aborted.set()

    def apply(self, plan: BuildPlan) -> ApplyReport:
        """Apply every resource of the plan. Cycles are rejected before any call."""
        generations = plan.generations()
        results: dict[str, ApplyResult] = {}
        handles: dict[str, str] = {}

        for generation in generations:
            ready = []
            for key in generation:
                skipped = self._check_dependencies(plan, key, results)
                if skipped is not None:
                    results[key] = skipped
                else:
                    ready.append(key)

            if self._max_workers > 1 and len(ready) > 1:
                with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                    futures = {key: pool.submit(self._apply_one, plan, key, handles) for key in ready}
                    outcomes = {key: future.result() for key, future in futures.items()}
            else:
                outcomes = {key: self._apply_one(plan, key, handles) for key in ready}

            for key in ready:
                result = outcomes[key]
                results[key] = result
                if result.ok:
                    handles[key] = result.resource_id

        report = ApplyReport({key: results[key] for key in plan.order()})
        logger.info(
            "Applied plan: %d created, %d failed, %d skipped, %d cancelled",
            len(report.by_status(ApplyStatus.CREATED)),
            len(report.by_status(ApplyStatus.FAILED)),
            len(report.by_status(ApplyStatus.DEPENDENCY_FAILED)),
            len(report.by_status(ApplyStatus.CANCELLED)),
        )
        return report

    def _check_dependencies(
        self, plan: BuildPlan, key: str, results: dict[str, ApplyResult]
    ) -> ApplyResult | None:
        """Result for a resource that must not be submitted, else None."""
        if self.aborted:
            return self._cancelled(plan, key)

        for dependency in plan.dependencies(key):
            upstream = results[dependency]
            if upstream.ok:
                continue
            root = dependency
            if isinstance(upstream.error, DependencyFailure):
                root = upstream.error.root
            error = DependencyFailure(key, dependency, root)
            logger.warning("%s", error)
            return ApplyResult(
                key=key,
                kind=plan.kind(key).value,
                status=ApplyStatus.DEPENDENCY_FAILED,
                error=error,
            )
        return None

    def _cancelled(self, plan: BuildPlan, key: str) -> ApplyResult:
        return ApplyResult(key=key, kind=plan.kind(key).value, status=ApplyStatus.CANCELLED)

    def _apply_one(self, plan: BuildPlan, key: str, handles: dict[str, str]) -> ApplyResult:
        # Pool tasks queued behind an abort must not reach the provider.
        if self.aborted:
            return self._cancelled(plan, key)

        kind = plan.kind(key)
        resource = plan.resource(key)
        start = time.monotonic()
        resource_id = None

        try:
            resource_id = self._creators[kind](resource, handles)
            tags = plan.tags(key)
            if tags:
                self._provider.tag(resource_id, tags)
            for dependency in plan.explicit_dependencies(key):
                self._provider.add_dependency(resource_id, handles[dependency])
        except ApplyAborted as e:
            self.abort()
            logger.warning("Apply aborted while creating %s: %s", key, e)
            return ApplyResult(
                key=key,
                kind=kind.value,
                status=ApplyStatus.CANCELLED,
                resource_id=resource_id,
                error=e,
            )
        except Exception as e:
            logger.warning("Failed to create %s: %s", key, e)
            return ApplyResult(
                key=key,
                kind=kind.value,
                status=ApplyStatus.FAILED,
                resource_id=resource_id,
                error=e,
            )

        latency = (time.monotonic() - start) * 1000
        logger.info("Created %s (%s)", key, resource_id)
        return ApplyResult(
            key=key,
            kind=kind.value,
            status=ApplyStatus.CREATED,
            resource_id=resource_id,
            latency_ms=latency,
        )

    def _create_network(self, spec: Any, handles: dict[str, str]) -> str:
        return self._provider.create_network(spec)

    def _create_subnet_tier(self, spec: Any, handles: dict[str, str]) -> str:
        return self._provider.create_subnet_tier(handles[spec.network_key], spec)

    def _create_security_context(self, spec: Any, handles: dict[str, str]) -> str:
        return self._provider.create_security_context(handles[spec.network_key], spec)

    def _create_transit_hub(self, spec: Any, handles: dict[str, str]) -> str:
        return self._provider.create_transit_hub(spec)

    def _create_attachment(self, spec: Any, handles: dict[str, str]) -> str:
        return self._provider.create_attachment(
            handles[spec.network_key], handles[spec.tier_key], handles[spec.hub], spec
        )

    def _create_route(self, spec: Any, handles: dict[str, str]) -> str:
        return self._provider.create_route(
            handles[spec.tier_key], spec, handles[spec.target], handles[spec.depends_on]
        )

    def _create_instance(self, spec: Any, handles: dict[str, str]) -> str:
        return self._provider.create_instance(
            handles[spec.network_key], handles[spec.tier_key], handles[spec.context_key], spec
        )


def apply_plan(plan: BuildPlan, provider: Provider, *, max_workers: int = 1) -> ApplyReport:
    """Apply a plan in one call."""
    return Applier(provider, max_workers=max_workers).apply(plan)
