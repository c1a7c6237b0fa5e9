"""
Snapshot → JSON text.

Output shape::

    {
      "retrieval_datetime": "2024-02-06T17:03:12.123456Z",
      "products": [
        {"name": "wow", "versions": [{"region": "us", "version": "10.2.5", "build": "53584"}]}
      ]
    }
"""

from __future__ import annotations

import json

from wownow.models.version import Snapshot


def render_snapshot(snapshot: Snapshot, pretty: bool = True) -> str:
    """Serialize ``snapshot`` to JSON (indent 2 when ``pretty``, else compact)."""
    if pretty:
        return json.dumps(snapshot.to_dict(), indent=2)
    return json.dumps(snapshot.to_dict(), separators=(",", ":"))

