"""Field id allocation.

Field ids are formatted ``<prefix>_<n>`` where the prefix is the palette
type (``text_3``, ``email_1``). The allocator is an explicit object owned by
the builder session; there are no module-level counters.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from formflow.contracts.types import FieldID

ID_PATTERN = re.compile(r"^([a-zA-Z]+)_(\d+)$")


class IdAllocator:
    """Issue ``prefix_<n>`` ids with a per-prefix monotonically rising counter.

    ``reseed`` is the only way to learn about ids issued elsewhere (imports).
    It raises counters and never lowers them, so calling it repeatedly with
    any mix of old and new ids is safe and a later ``allocate`` can never
    collide with a seeded id.

    Example:
        ids = IdAllocator()
        ids.reseed(["text_4", "static_1", "custom-id"])
        ids.allocate("text")   # 'text_5'
        ids.allocate("radio")  # 'radio_1'
    """

    def __init__(self, counters: Mapping[str, int] | None = None) -> None:
        self._counters: dict[str, int] = dict(counters or {})

    def allocate(self, prefix: str) -> FieldID:
        n = self._counters.get(prefix, 0) + 1
        self._counters[prefix] = n
        return FieldID(f"{prefix}_{n}")

    def reseed(self, existing_ids: Iterable[object]) -> None:
        """Raise each prefix counter to at least the highest seen sequence number.

        Non-string ids and ids not matching ``prefix_<number>`` are ignored.
        """
        for candidate in existing_ids:
            if not isinstance(candidate, str):
                continue
            match = ID_PATTERN.match(candidate)
            if match is None:
                continue
            prefix, number = match.group(1), int(match.group(2))
            self._counters[prefix] = max(self._counters.get(prefix, 0), number)

    def peek(self, prefix: str) -> int:
        """Last number issued or seeded for ``prefix`` (0 if none)."""
        return self._counters.get(prefix, 0)

    def snapshot(self) -> dict[str, int]:
        return dict(self._counters)
