"""Applying build plans through a provisioning provider."""

from transitlink.apply.executor import Applier, ApplyReport, ApplyResult, ApplyStatus, apply_plan
from transitlink.apply.provider import Provider, RecordingProvider, load_provider

__all__ = [
    "Applier",
    "ApplyReport",
    "ApplyResult",
    "ApplyStatus",
    "apply_plan",
    "Provider",
    "RecordingProvider",
    "load_provider",
]
