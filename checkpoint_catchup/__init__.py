"""Checkpoint catch-up monitor.

Polls a node's Prometheus endpoint and shows how far the synced checkpoint
is behind the highest known one until the gap closes.
"""

__version__ = "0.1.0"
