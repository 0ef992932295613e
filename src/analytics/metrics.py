"""Metrics tracking"""

import time
from typing import Dict, Any
from datetime import datetime
from loguru import logger
from collections import defaultdict


class ForwardingMetrics:
    """Track forwarding and HTTP metrics in-process.

    One instance is shared by concurrent requests; every update is a
    single synchronous step on the event loop.
    """

    def __init__(self):
        """Initialize metrics tracker"""
        self.reset()
        logger.info("Metrics tracker initialized")

    def record_start(self) -> float:
        """Record a forwarding request starting. Returns the start timestamp."""
        self.metrics['active_requests'] += 1
        self.metrics['started'] += 1
        return time.monotonic()

    def record_end(self, started: float, success: bool):
        """Record a forwarding request finishing"""
        duration = max(0.0, time.monotonic() - started)
        status = 'success' if success else 'failure'

        self.metrics['requests_by_status'][status] += 1
        self.metrics['durations_by_status'][status].append(duration)
        self.metrics['active_requests'] = max(0, self.metrics['active_requests'] - 1)

    def record_browser_opened(self):
        """Record a browser process being acquired"""
        self.metrics['active_browsers'] += 1

    def record_browser_closed(self):
        """Record a browser process being released"""
        self.metrics['active_browsers'] = max(0, self.metrics['active_browsers'] - 1)

    def record_launch_attempt(self, label: str, success: bool):
        """Record one browser launch configuration being tried"""
        outcome = 'success' if success else 'failure'
        self.metrics['launch_attempts'][f"{label}|{outcome}"] += 1

    def record_error(self, error_code: str):
        """Record a failed request by error code"""
        self.metrics['errors_by_code'][error_code] += 1
        self.metrics['last_error'] = {
            'timestamp': datetime.now().isoformat(),
            'code': error_code,
        }

    def record_http_request(self, method: str, route: str, status_code: int, duration: float):
        """Record an HTTP request served"""
        key = f"{method} {route} {status_code}"
        self.metrics['http_requests'][key] += 1
        self.metrics['http_durations'][key].append(duration)

    def set_health(self, component: str, healthy: bool):
        """Set component health (1 = healthy, 0 = unhealthy)"""
        self.metrics['health'][component] = 1 if healthy else 0

    def get_summary(self) -> Dict[str, Any]:
        """Get metrics summary"""
        durations = self.metrics['durations_by_status']
        return {
            'requests_started': self.metrics['started'],
            'requests_by_status': dict(self.metrics['requests_by_status']),
            'avg_duration_seconds': {
                status: sum(values) / len(values)
                for status, values in durations.items() if values
            },
            'active_requests': self.metrics['active_requests'],
            'active_browsers': self.metrics['active_browsers'],
            'launch_attempts': dict(self.metrics['launch_attempts']),
            'errors_by_code': dict(self.metrics['errors_by_code']),
            'last_error': self.metrics['last_error'],
            'http_requests': dict(self.metrics['http_requests']),
            'http_avg_duration_seconds': {
                key: sum(values) / len(values)
                for key, values in self.metrics['http_durations'].items() if values
            },
            'health': dict(self.metrics['health']),
        }

    def reset(self):
        """Reset metrics"""
        self.metrics = {
            'started': 0,
            'active_requests': 0,
            'active_browsers': 0,
            'requests_by_status': defaultdict(int),
            'durations_by_status': defaultdict(list),
            'launch_attempts': defaultdict(int),
            'errors_by_code': defaultdict(int),
            'last_error': None,
            'http_requests': defaultdict(int),
            'http_durations': defaultdict(list),
            'health': {},
        }
