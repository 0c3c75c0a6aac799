# SPDX-License-Identifier: AGPL-3.0-only

"""
Metrics and observability utilities.
"""
import time
from typing import Dict, Any, List
from datetime import datetime


class RequestMetrics:
    """Track metrics for one question/answer exchange."""

    def __init__(self):
        self.start_time = time.time()
        self.end_time = None
        self.stages: Dict[str, float] = {}
        self.attempts = 0
        self.llm_calls = 0
        self.total_tokens = 0
        self.errors: List[str] = []
        self.repairs: List[str] = []

    def mark_stage(self, stage_name: str):
        """Mark completion of a stage."""
        self.stages[stage_name] = time.time()

    def start_attempt(self):
        self.attempts += 1

    def finish(self):
        """Mark the exchange as finished."""
        self.end_time = time.time()

    def add_llm_call(self, tokens: int):
        """Record an LLM call."""
        self.llm_calls += 1
        self.total_tokens += tokens

    def add_error(self, error: str):
        """Record an error."""
        self.errors.append(error)

    def add_repairs(self, repairs: List[str]):
        self.repairs.extend(repairs)

    def duration(self) -> float:
        """Get total duration in seconds."""
        if self.end_time:
            return self.end_time - self.start_time
        return time.time() - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dict."""
        return {
            "duration_seconds": self.duration(),
            "attempts": self.attempts,
            "llm_calls": self.llm_calls,
            "total_tokens": self.total_tokens,
            "stages": {k: v - self.start_time for k, v in self.stages.items()},
            "errors": self.errors,
            "repairs": self.repairs,
            "start_time": datetime.fromtimestamp(self.start_time).isoformat(),
            "end_time": datetime.fromtimestamp(self.end_time).isoformat() if self.end_time else None
        }
