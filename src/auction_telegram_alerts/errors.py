from __future__ import annotations


class AlertsError(Exception):
    pass


class StartupError(AlertsError):
    """The node could not be reached or the address is unusable."""


class SubscriptionError(StartupError):
    """The node refused or never acknowledged the block subscription."""


class TransportError(AlertsError):
    """The subscription stream failed after it was established."""


class TransportDecodeError(TransportError):
    """A frame from the node was not a JSON-RPC object."""


class PayloadDecodeError(AlertsError):
    """One block's events did not match the expected shape."""
