"""Python client for the Launchpad API."""

from client.poller import ApplicationPoller

__all__ = ["ApplicationPoller"]
