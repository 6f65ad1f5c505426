"""Test utilities for gazelle applications::

    from gazelle.testing import TestClient
"""

from gazelle.testing.client import TestClient

__all__ = ["TestClient"]
