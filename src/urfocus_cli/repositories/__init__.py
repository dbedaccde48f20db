"""Repository interfaces for UR Focus.

``RecordStore`` is the port every storage backend implements. Adapters are in
``urfocus_cli.adapters``.
"""

from .repository import RecordStore
from .subscription import Subscription

__all__ = ["RecordStore", "Subscription"]
