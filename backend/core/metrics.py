"""Lightweight in-memory metrics collector."""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass
from typing import Dict


@dataclass
class MetricSnapshot:
    turns_started: int
    turns_failed: int
    rejected_sends: int
    tool_calls: Dict[str, int]
    confirmations_committed: int


class MetricsCollector:
    """Thread-safe counter storage for basic service metrics."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._turns_started = 0
        self._turns_failed = 0
        self._rejected_sends = 0
        self._confirmations = 0
        self._tool_calls: Counter[str] = Counter()

    def record_turn(self) -> None:
        with self._lock:
            self._turns_started += 1

    def record_failure(self) -> None:
        with self._lock:
            self._turns_failed += 1

    def record_rejected_send(self) -> None:
        with self._lock:
            self._rejected_sends += 1

    def record_tool_call(self, name: str) -> None:
        with self._lock:
            self._tool_calls[name] += 1

    def record_confirmation(self) -> None:
        with self._lock:
            self._confirmations += 1

    def snapshot(self) -> MetricSnapshot:
        with self._lock:
            return MetricSnapshot(
                turns_started=self._turns_started,
                turns_failed=self._turns_failed,
                rejected_sends=self._rejected_sends,
                tool_calls=dict(self._tool_calls),
                confirmations_committed=self._confirmations,
            )
