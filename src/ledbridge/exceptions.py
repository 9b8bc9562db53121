"""Custom exception hierarchy for ledbridge."""

from __future__ import annotations


class LedBridgeError(Exception):
    """Base exception for all ledbridge errors."""


class LedBridgeConfigError(LedBridgeError):
    """Invalid or missing configuration."""


class LedBridgeDecodeError(LedBridgeError):
    """Malformed inbound payload or undecodable store record."""


class LedBridgeStoreError(LedBridgeError):
    """Record store unavailable, or a lookup/write failed."""

    def __init__(
        self,
        message: str,
        *,
        table: str = "",
        operation: str = "",
    ) -> None:
        self.table = table
        self.operation = operation
        super().__init__(message)


class LedBridgeTransportError(LedBridgeError):
    """Outbound publish failed (broker not connected, queue full, ...)."""

    def __init__(
        self,
        message: str,
        *,
        topic: str = "",
    ) -> None:
        self.topic = topic
        super().__init__(message)
