"""Key manager view.

Holds the state of one key manager session: fetch the list on load,
generate on demand, render whatever state it is in. Every client failure
is caught here and turned into a single message; none escape.

State machine:

    LOADING --load ok--> READY
    LOADING --load failed--> ERROR
    READY/ERROR --generate()--> GENERATING --ok--> READY (record prepended)
    GENERATING --failed--> state it started from, error message set

With refresh_after_generate the list is re-fetched while still GENERATING;
if that fetch fails the new record is prepended to the old list instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, tzinfo
from enum import Enum
from typing import Protocol

from keysmith.console.errors import KeyServiceError
from keysmith.console.types import ApiKeyInfo

logger = logging.getLogger("keysmith.console")

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


class KeysSource(Protocol):
    """What the view needs from a client."""

    async def list_keys(self) -> list[ApiKeyInfo]: ...

    async def create_key(self) -> ApiKeyInfo: ...


class ViewState(str, Enum):
    """Key manager state."""

    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
    GENERATING = "generating"


def format_created(value: datetime, tz: tzinfo | None = None) -> str:
    """Format a creation time as e.g. ``October 19, 2026``.

    Uses the local timezone unless ``tz`` is given.
    """
    local = value.astimezone(tz)
    return f"{MONTHS[local.month - 1]} {local.day}, {local.year}"


class KeyManager:
    """Key manager session over a ``KeysSource``."""

    def __init__(
        self,
        source: KeysSource,
        *,
        clipboard: Callable[[str], None] | None = None,
        refresh_after_generate: bool = False,
    ) -> None:
        """Initialize the view in the LOADING state.

        Args:
            source: Client to fetch and create keys with
            clipboard: Called with the key text on ``copy()``
            refresh_after_generate: Re-fetch the list after a successful
                generate instead of prepending the new record
        """
        self._source = source
        self._clipboard = clipboard
        self._refresh_after_generate = refresh_after_generate

        self.state = ViewState.LOADING
        self.keys: list[ApiKeyInfo] = []
        self.error: str | None = None
        self.copied_id: int | None = None

    @property
    def can_generate(self) -> bool:
        """Whether the generate control is enabled."""
        return self.state in (ViewState.READY, ViewState.ERROR)

    async def load(self) -> None:
        """Fetch the key list.

        LOADING (or any state) moves to READY on success, ERROR on failure.
        """
        self.state = ViewState.LOADING
        self.error = None
        keys = await self._fetch()
        if keys is None:
            self.keys = []
            self.state = ViewState.ERROR
            return
        self.keys = keys
        self.state = ViewState.READY

    async def _fetch(self) -> list[ApiKeyInfo] | None:
        """Fetch the list; on failure set ``error`` and return None."""
        try:
            return await self._source.list_keys()
        except KeyServiceError as exc:
            logger.warning("Error fetching API keys: %s", exc.message)
            self.error = exc.message
            return None

    async def generate(self) -> ApiKeyInfo | None:
        """Issue one new key.

        Ignored (returns None) while a fetch or another generate is in
        flight.

        Returns:
            The new record, or None if ignored or failed
        """
        if not self.can_generate:
            logger.debug("generate ignored in state %s", self.state.value)
            return None

        previous = self.state
        self.state = ViewState.GENERATING
        self.error = None

        try:
            created = await self._source.create_key()
        except KeyServiceError as exc:
            logger.debug("Error generating API key: %s", exc.message)
            self.error = exc.message
            self.state = previous
            return None

        refreshed = await self._fetch() if self._refresh_after_generate else None
        if refreshed is not None:
            self.keys = refreshed
        else:
            # Prepend locally; also the fallback when the re-fetch failed,
            # in which case its message stays in ``error``
            self.keys = [created, *self.keys]
        self.state = ViewState.READY
        return created

    def copy(self, record_id: int) -> bool:
        """Copy a listed key to the clipboard.

        Returns:
            True if the key was handed to the clipboard
        """
        record = next((k for k in self.keys if k.id == record_id), None)
        if record is None or self._clipboard is None:
            return False
        self._clipboard(record.key)
        self.copied_id = record_id
        return True

    def render(self) -> str:
        """Render the current state as text."""
        button = "Generating..." if self.state is ViewState.GENERATING else "Generate New Key"
        lines = [
            "API Keys",
            "Generate new keys for your applications.",
            f"[{button}]" if self.can_generate else f"[{button}] (disabled)",
            "",
        ]
        if self.error:
            lines.extend([f"Error: {self.error}", ""])

        if self.state is ViewState.LOADING:
            lines.append("Loading API keys...")
        elif self.keys:
            for record in self.keys:
                marker = "  (copied)" if record.id == self.copied_id else ""
                lines.append(f"{record.key}{marker}")
                lines.append(f"  Created on {format_created(record.created_at)}")
        elif self.state is not ViewState.ERROR:
            lines.append("You haven't generated any API keys yet.")
            lines.append('Click "Generate New Key" to create your first one.')

        return "\n".join(lines).rstrip() + "\n"
