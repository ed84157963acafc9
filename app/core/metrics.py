"""
In-process metrics for reservation admission and ticket scanning
"""

import time
import logging
import asyncio
from typing import Dict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from app.core.exceptions import ConflictError, ValidationError, StoreError

logger = logging.getLogger(__name__)


@dataclass
class ReservationMetrics:
    """Reservation system metrics"""
    reservation_attempts: int = 0
    reservations_created: int = 0
    seat_conflicts: int = 0
    rejected_requests: int = 0
    store_failures: int = 0
    reservations_released: int = 0

    # Ticket scanning
    ticket_scans: int = 0
    ticket_check_ins: int = 0
    already_used_scans: int = 0
    unknown_ticket_scans: int = 0

    rate_limited_requests: int = 0

    concurrent_reservations: int = 0
    max_concurrent_reservations: int = 0

    # Durations for percentile calculation
    reservation_times: list = field(default_factory=list)

    def add_reservation_time(self, duration: float):
        self.reservation_times.append(duration)
        if len(self.reservation_times) > 1000:  # Keep only last 1000 for memory
            self.reservation_times = self.reservation_times[-1000:]

    def get_percentiles(self) -> Dict[str, float]:
        """Calculate reservation time percentiles"""
        if not self.reservation_times:
            return {"p50": 0.0, "p95": 0.0, "p99": 0.0}

        sorted_times = sorted(self.reservation_times)
        length = len(sorted_times)

        return {
            "p50": sorted_times[int(length * 0.5)],
            "p95": sorted_times[min(int(length * 0.95), length - 1)],
            "p99": sorted_times[min(int(length * 0.99), length - 1)],
        }

    def get_success_rate(self) -> float:
        if self.reservation_attempts == 0:
            return 0.0
        return (self.reservations_created / self.reservation_attempts) * 100

    def to_dict(self) -> Dict:
        percentiles = self.get_percentiles()

        return {
            "reservation_attempts": self.reservation_attempts,
            "reservations_created": self.reservations_created,
            "seat_conflicts": self.seat_conflicts,
            "rejected_requests": self.rejected_requests,
            "store_failures": self.store_failures,
            "reservations_released": self.reservations_released,
            "success_rate_percent": round(self.get_success_rate(), 2),
            "tickets": {
                "scans": self.ticket_scans,
                "check_ins": self.ticket_check_ins,
                "already_used": self.already_used_scans,
                "unknown": self.unknown_ticket_scans,
            },
            "performance": {
                "percentiles_ms": {
                    name: value * 1000 for name, value in percentiles.items()
                }
            },
            "concurrency": {
                "current_concurrent_reservations": self.concurrent_reservations,
                "max_concurrent_reservations": self.max_concurrent_reservations,
            },
            "rate_limiting": {
                "rate_limited_requests": self.rate_limited_requests,
            },
        }


class MetricsCollector:
    """Metrics collector for the reservation core"""

    def __init__(self):
        self.metrics = ReservationMetrics()
        self.logger = logging.getLogger(__name__)
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def track_reservation(self):
        """Context manager to track one reservation attempt"""
        start_time = time.time()

        async with self._lock:
            self.metrics.reservation_attempts += 1
            self.metrics.concurrent_reservations += 1
            if self.metrics.concurrent_reservations > self.metrics.max_concurrent_reservations:
                self.metrics.max_concurrent_reservations = self.metrics.concurrent_reservations

        try:
            yield
        except ConflictError:
            async with self._lock:
                self.metrics.seat_conflicts += 1
            raise
        except ValidationError:
            async with self._lock:
                self.metrics.rejected_requests += 1
            raise
        except StoreError:
            async with self._lock:
                self.metrics.store_failures += 1
            raise
        else:
            async with self._lock:
                self.metrics.reservations_created += 1
        finally:
            duration = time.time() - start_time
            async with self._lock:
                self.metrics.concurrent_reservations -= 1
                self.metrics.add_reservation_time(duration)
            if duration > 5.0:
                self.logger.warning(f"Slow reservation operation: {duration:.2f}s")

    async def record_release(self):
        async with self._lock:
            self.metrics.reservations_released += 1

    async def record_ticket_scan(self, status: str):
        """Record the outcome of one ticket validation"""
        async with self._lock:
            self.metrics.ticket_scans += 1
            if status == "used":
                self.metrics.ticket_check_ins += 1
            elif status == "already_used":
                self.metrics.already_used_scans += 1
            elif status == "unknown":
                self.metrics.unknown_ticket_scans += 1

    async def record_rate_limit_hit(self):
        async with self._lock:
            self.metrics.rate_limited_requests += 1

    async def get_metrics(self) -> Dict:
        """Get current metrics"""
        async with self._lock:
            return self.metrics.to_dict()

    async def reset_metrics(self):
        """Reset all metrics (useful for testing)"""
        async with self._lock:
            self.metrics = ReservationMetrics()
            self.logger.info("Metrics reset")


# Global instance
metrics_collector = MetricsCollector()
