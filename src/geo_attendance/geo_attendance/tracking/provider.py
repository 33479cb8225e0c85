from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class LocationFix:
    """Raw output of the operating system's location API."""

    latitude: float
    longitude: float
    accuracy_meters: float
    timestamp: datetime


class LocationProvider(Protocol):
    def current_fix(self) -> LocationFix:
        """Return a fix or raise ``LocationUnavailableError`` / ``LocationPermissionError``."""

        raise NotImplementedError


class ConnectivityMonitor(Protocol):
    def is_online(self) -> bool:
        raise NotImplementedError


class AlwaysOnline(ConnectivityMonitor):
    def is_online(self) -> bool:
        return True
