"""
Fingerprint generator for registry state.

Generates deterministic SHA-256 fingerprints so two registries (or one
registry at two points in time) can be compared cheaply.
"""

import hashlib
import json
from typing import Any, Dict, Iterable, List, Mapping, Optional


class FingerprintGenerator:
    """
    Generates deterministic fingerprints for registry state.

    Fingerprint includes:
    - Library names and versions
    - Lock flags
    - Dependency edges (in registration order per consumer)

    Excludes:
    - Payload contents (opaque to the registry)
    - Library insertion order
    """

    def generate(
        self,
        versions: Mapping[str, int],
        locked: Iterable[str],
        dependencies: Mapping[str, List[Dict[str, Any]]],
    ) -> str:
        """
        Generate fingerprint from registry state.

        Args:
            versions: Library name to version
            locked: Names of locked libraries
            dependencies: Consumer to ordered edge dicts

        Returns:
            SHA-256 hex digest string
        """
        canonical = self.canonical_repr(versions, locked, dependencies)
        json_str = json.dumps(canonical, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(json_str.encode("utf-8")).hexdigest()

    def canonical_repr(
        self,
        versions: Mapping[str, int],
        locked: Iterable[str],
        dependencies: Mapping[str, List[Dict[str, Any]]],
    ) -> Dict[str, Any]:
        """
        Build canonical representation of registry state.

        Libraries are sorted by name; edge lists keep their order because
        ``check_dependencies`` reports the first unmet edge.
        """
        locked_set = set(locked)
        return {
            "version": "1.0",
            "libraries": [
                {"name": name, "version": versions[name], "locked": name in locked_set}
                for name in sorted(versions)
            ],
            "dependencies": {
                consumer: [dict(edge) for edge in edges]
                for consumer, edges in sorted(dependencies.items())
            },
        }

    def short(self, fingerprint: str, length: Optional[int] = 12) -> str:
        """Abbreviated fingerprint for logs."""
        return fingerprint[:length]
