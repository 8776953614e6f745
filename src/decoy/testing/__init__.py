"""Test utilities for decoy servers.

    from decoy.testing import TestClient
"""

from decoy.testing.client import TestClient

__all__ = ["TestClient"]
