import logging
import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerOpenError(Exception):
    def __init__(self, name: str):
        super().__init__(f"Circuit breaker '{name}' is open")
        self.name = name


class CircuitBreaker:
    def __init__(self, name: str, failure_threshold: int = 5, recovery_timeout: int = 60):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.last_failure_time: Optional[float] = None
        self.state = CircuitState.CLOSED
        self.success_count = 0
        self.total_requests = 0
        self._lock = threading.Lock()
        self._trial_in_flight = False

    def call(self, func: Callable, *args, **kwargs) -> Any:
        # func runs outside the lock; only state changes are guarded
        with self._lock:
            self.total_requests += 1

            if self.state == CircuitState.OPEN:
                if not self._should_attempt_reset():
                    raise CircuitBreakerOpenError(self.name)
                logger.info("Circuit breaker %s half-open, trying one call", self.name)
                self.state = CircuitState.HALF_OPEN
                self._trial_in_flight = True
            elif self.state == CircuitState.HALF_OPEN:
                # Only one trial call at a time
                if self._trial_in_flight:
                    raise CircuitBreakerOpenError(self.name)
                self._trial_in_flight = True

        try:
            result = func(*args, **kwargs)
        except Exception:
            self._on_failure()
            raise
        self._on_success()
        return result

    def _should_attempt_reset(self) -> bool:
        return (time.monotonic() - self.last_failure_time) > self.recovery_timeout

    def _on_success(self):
        with self._lock:
            self.failure_count = 0
            self.success_count += 1
            if self.state == CircuitState.HALF_OPEN:
                logger.info("Circuit breaker %s closed", self.name)
                self.state = CircuitState.CLOSED
            self._trial_in_flight = False

    def _on_failure(self):
        with self._lock:
            self.failure_count += 1
            self.last_failure_time = time.monotonic()
            if self.state == CircuitState.HALF_OPEN or self.failure_count >= self.failure_threshold:
                if self.state != CircuitState.OPEN:
                    logger.warning(
                        "Circuit breaker %s opened after %d failures", self.name, self.failure_count
                    )
                self.state = CircuitState.OPEN
            self._trial_in_flight = False

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            total = self.total_requests
            uptime = (self.success_count / total * 100) if total > 0 else 100
            return {
                "state": self.state.value,
                "failure_count": self.failure_count,
                "success_count": self.success_count,
                "total_requests": total,
                "uptime_percentage": round(uptime, 2),
            }
