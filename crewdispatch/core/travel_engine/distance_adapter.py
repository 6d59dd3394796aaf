"""
Distance adapter for scoring. Default implementation: zip-prefix heuristic (no network).

A real provider (driving distance service) is authoritative when plugged in; the
zip heuristic is a degraded fallback and can misclassify distant areas that share
a 3-digit prefix.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

_ZIP_RE = re.compile(r"\b\d{5}\b")

SAME_3_DIGIT_DISTANCE = 5.0
SAME_2_DIGIT_DISTANCE = 15.0
FAR_DISTANCE = 25.0
UNKNOWN_DISTANCE = 10.0


def extract_zip(location: Optional[str]) -> Optional[str]:
    """First 5-digit group in an address or zip string."""
    if not location or not isinstance(location, str):
        return None
    m = _ZIP_RE.search(location)
    return m.group(0) if m else None


def zip_prefix_distance(zip_a: Optional[str], zip_b: Optional[str]) -> float:
    if not zip_a or not zip_b:
        return UNKNOWN_DISTANCE
    if zip_a[:3] == zip_b[:3]:
        return SAME_3_DIGIT_DISTANCE
    if zip_a[:2] == zip_b[:2]:
        return SAME_2_DIGIT_DISTANCE
    return FAR_DISTANCE


def estimate_travel_time_minutes(distance_miles: float) -> int:
    """City ~20 mph up to 5 mi, suburban ~30 mph up to 15 mi, highway ~45 mph beyond."""
    if not distance_miles or distance_miles <= 0:
        return 0
    if distance_miles <= 5:
        minutes = distance_miles * 3
    elif distance_miles <= 15:
        minutes = distance_miles * 2
    else:
        minutes = distance_miles * 1.33
    return int(-(-minutes // 1))


class DistanceEstimator(Protocol):
    """Distance (miles or cost units) between two locations (address or zip strings)."""

    def __call__(self, location_a: str, location_b: str) -> float:
        ...


class ZipPrefixEstimator:
    """Same 3 digits -> 5, same 2 digits -> 15, else 25, missing zip -> 10."""

    def __call__(self, location_a: str, location_b: str) -> float:
        return zip_prefix_distance(extract_zip(location_a), extract_zip(location_b))


class BoundedDistanceEstimator:
    """
    Wraps a provider with a timeout. On error or timeout falls back to the zip heuristic,
    so a slow provider degrades one score instead of stalling an assignment batch.

    A call that times out cannot be cancelled once it is running. Without an injected
    executor every call runs on its own single-thread executor, so a hung provider call
    keeps only its own thread and later calls are not queued behind it. An injected
    executor is shared, and hung calls hold its workers until they return.
    """

    def __init__(
        self,
        provider: DistanceEstimator,
        timeout_seconds: float = 2.0,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.provider = provider
        self.timeout_seconds = max(0.01, timeout_seconds)
        self._executor = executor
        self._fallback = ZipPrefixEstimator()

    def __call__(self, location_a: str, location_b: str) -> float:
        executor = self._executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="distance")
        future = executor.submit(self.provider, location_a, location_b)
        try:
            distance = future.result(timeout=self.timeout_seconds)
        except FutureTimeout:
            logger.warning(
                "Distance provider timed out after %.2fs for %s -> %s; using zip fallback",
                self.timeout_seconds, location_a, location_b,
            )
            return self._fallback(location_a, location_b)
        except Exception as e:
            logger.warning("Distance provider failed (%s); using zip fallback", e)
            return self._fallback(location_a, location_b)
        finally:
            if executor is not self._executor:
                executor.shutdown(wait=False)
        if distance is None or distance < 0:
            return self._fallback(location_a, location_b)
        return float(distance)

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)


DEFAULT_DISTANCE_ESTIMATOR = ZipPrefixEstimator()
