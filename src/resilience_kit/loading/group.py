"""
Loading State Group - Several Keyed Loading Sessions.

Tracks one LoadingStateMachine per key (e.g. per widget on a page) and
answers aggregate questions: is anything loading, did everything
succeed, did anything fail.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, List, Optional

from resilience_kit.config.models import LoadingConfig
from resilience_kit.domain.loading import LoadingSnapshot
from resilience_kit.loading.state_machine import LoadingStateMachine

logger = logging.getLogger(__name__)

GroupListener = Callable[[str, LoadingSnapshot], None]


class LoadingStateGroup:
    """Collection of named loading state machines."""

    def __init__(
        self,
        default_config: Optional[LoadingConfig] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        """
        Initialize group.

        Args:
            default_config: Config for machines created without one
            loop: Event loop handed to every machine
        """
        self._default_config = default_config or LoadingConfig()
        self._loop = loop
        self._machines: Dict[str, LoadingStateMachine] = {}
        self._unsubscribers: Dict[str, Callable[[], None]] = {}
        self._listeners: List[GroupListener] = []

    def create(
        self,
        key: str,
        config: Optional[LoadingConfig] = None,
    ) -> LoadingStateMachine:
        """
        Create the machine for ``key``, replacing (and disposing) any previous one.
        """
        self.remove(key)
        machine = LoadingStateMachine(
            config or self._default_config,
            loop=self._loop,
            name=key,
        )
        self._machines[key] = machine
        self._unsubscribers[key] = machine.subscribe(
            lambda snapshot: self._forward(key, snapshot)
        )
        return machine

    def get(self, key: str) -> Optional[LoadingStateMachine]:
        return self._machines.get(key)

    def get_state(self, key: str) -> Optional[LoadingSnapshot]:
        """Snapshot of one machine, or None for an unknown key."""
        machine = self._machines.get(key)
        return machine.snapshot() if machine is not None else None

    @property
    def states(self) -> Dict[str, LoadingSnapshot]:
        return {key: m.snapshot() for key, m in self._machines.items()}

    @property
    def is_any_loading(self) -> bool:
        return any(m.is_loading for m in self._machines.values())

    @property
    def is_all_success(self) -> bool:
        """True when every machine succeeded (vacuously True when empty)."""
        return all(m.is_success for m in self._machines.values())

    @property
    def has_any_error(self) -> bool:
        return any(m.is_error for m in self._machines.values())

    def subscribe(self, listener: GroupListener) -> Callable[[], None]:
        """Register a listener receiving (key, snapshot) on every change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def remove(self, key: str) -> bool:
        """Dispose and forget the machine for ``key``."""
        machine = self._machines.pop(key, None)
        if machine is None:
            return False
        self._unsubscribers.pop(key)()
        machine.dispose()
        return True

    def dispose(self) -> None:
        """Dispose every machine in the group."""
        for key in list(self._machines):
            self.remove(key)
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._machines)

    def __contains__(self, key: object) -> bool:
        return key in self._machines

    def _forward(self, key: str, snapshot: LoadingSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(key, snapshot)
            except Exception:
                logger.exception(f"Loading group listener failed for {key}")
