"""
Loading State Machine - Timer-Driven Loading Indicator Control.

States:
    idle -> (start) -> loading -> (success | error) -> success | error
    any  -> (reset) -> idle

Timing rules:
    - Visibility delay: the observable state stays idle for
      ``show_loading_after`` seconds after start, so fast operations
      never flash an indicator.
    - Minimum display time: success is deferred until
      ``min_loading_time`` seconds have passed since start.
    - Timeout: without a terminal transition within ``timeout`` seconds
      the session ends in error with TIMEOUT_MESSAGE.

Design Notes:
    - Timers are event loop ``call_later`` handles tagged with the session
      generation; a timer from an older generation is a no-op
    - Terminal transitions outside an active session are ignored, so an
      operation finishing after its timeout cannot overwrite the error
    - Never raises on transitions; listener failures are logged
    - Independent of any UI framework: consumers subscribe()
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, TypeVar, Union

from resilience_kit.config.models import LoadingConfig
from resilience_kit.domain.errors import EnrichedError
from resilience_kit.domain.loading import LoadingSnapshot, LoadingState
from resilience_kit.interfaces.environment_probe import EnvironmentProbe
from resilience_kit.resilience.error_classifier import enrich_exception

logger = logging.getLogger(__name__)

T = TypeVar("T")

TIMEOUT_MESSAGE = "Operation timed out. Please try again."

Listener = Callable[[LoadingSnapshot], None]
ErrorInput = Union[EnrichedError, BaseException, str]


class LoadingStateMachine:
    """
    Loading session with debounced visibility and minimum display time.

    One machine is owned by one call site; call ``start()`` again to
    begin a new session. Requires a running asyncio event loop (or an
    explicit ``loop``) for its timers.
    """

    def __init__(
        self,
        config: Optional[LoadingConfig] = None,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        name: str = "loading",
        environment: Optional[EnvironmentProbe] = None,
    ) -> None:
        """
        Initialize state machine.

        Args:
            config: Timing configuration
            loop: Event loop for timers (default: running loop at start())
            name: Name for logging
            environment: Probe used when enriching exceptions
        """
        self.config = config or LoadingConfig()
        self.name = name
        self.environment = environment
        self._loop = loop

        self._state = LoadingState.IDLE
        self._progress: Optional[float] = None
        self._message: Optional[str] = None
        self._error: Optional[Union[EnrichedError, str]] = None
        self._started_at: Optional[datetime] = None
        self._started_mono: Optional[float] = None

        self._active = False
        self._disposed = False
        self._generation = 0
        self._show_handle: Optional[asyncio.TimerHandle] = None
        self._timeout_handle: Optional[asyncio.TimerHandle] = None
        self._success_handle: Optional[asyncio.TimerHandle] = None

        self._listeners: List[Listener] = []
        self._settled: Optional[asyncio.Event] = None

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> LoadingState:
        return self._state

    @property
    def progress(self) -> Optional[float]:
        return self._progress

    @property
    def message(self) -> Optional[str]:
        return self._message

    @property
    def error(self) -> Optional[Union[EnrichedError, str]]:
        return self._error

    @property
    def started_at(self) -> Optional[datetime]:
        return self._started_at

    @property
    def duration(self) -> Optional[float]:
        """Seconds since start(), recomputed on every read."""
        if self._started_mono is None or self._loop is None:
            return None
        return max(0.0, self._loop.time() - self._started_mono)

    @property
    def is_idle(self) -> bool:
        return self._state == LoadingState.IDLE

    @property
    def is_loading(self) -> bool:
        return self._state == LoadingState.LOADING

    @property
    def is_success(self) -> bool:
        return self._state == LoadingState.SUCCESS

    @property
    def is_error(self) -> bool:
        return self._state == LoadingState.ERROR

    @property
    def is_active(self) -> bool:
        """True between start() and the terminal transition."""
        return self._active and not self._disposed

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def snapshot(self) -> LoadingSnapshot:
        """Immutable view of the current session."""
        return LoadingSnapshot(
            state=self._state,
            progress=self._progress,
            message=self._message,
            error=self._error,
            started_at=self._started_at,
            duration=self.duration,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with a snapshot on every change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self, message: Optional[str] = None) -> None:
        """
        Begin a new session.

        Clears any previous error and progress, records the start time
        and arms the visibility and timeout timers.
        """
        if self._disposed:
            logger.debug(f"{self.name}: start() ignored, machine disposed")
            return

        loop = self._get_loop()
        self._cancel_timers()
        self._generation += 1
        generation = self._generation

        self._active = True
        self._started_mono = loop.time()
        self._started_at = datetime.now(timezone.utc)
        self._message = message
        self._error = None
        self._progress = None
        self._settled_event().clear()

        if self.config.show_loading_after <= 0:
            self._state = LoadingState.LOADING
        else:
            self._state = LoadingState.IDLE
            self._show_handle = loop.call_later(
                self.config.show_loading_after, self._on_show_due, generation
            )

        if self.config.timeout > 0:
            self._timeout_handle = loop.call_later(
                self.config.timeout, self._on_timeout, generation
            )

        logger.debug(f"{self.name}: started (generation {generation})")
        self._notify()

    def set_progress(self, value: float, message: Optional[str] = None) -> None:
        """Update progress, clamped into 0..100. Timers are not affected."""
        if self._disposed:
            return
        self._progress = max(0.0, min(100.0, float(value)))
        if message:
            self._message = message
        self._notify()

    def set_success(self, message: Optional[str] = None) -> None:
        """
        Complete the session successfully.

        The timeout is disarmed at once; the transition itself waits
        until the minimum display time has elapsed since start().
        """
        if not self.is_active:
            logger.debug(f"{self.name}: set_success() ignored, no active session")
            return

        self._cancel(self._timeout_handle)
        self._timeout_handle = None
        self._cancel(self._success_handle)
        self._success_handle = None

        remaining = self.config.min_loading_time - (self.duration or 0.0)
        if remaining > 0:
            self._success_handle = self._get_loop().call_later(
                remaining, self._on_success_due, self._generation, message
            )
            logger.debug(f"{self.name}: success deferred by {remaining:.3f}s")
        else:
            self._finish_success(message)

    def set_error(self, error: ErrorInput) -> None:
        """Fail the session immediately. Exceptions are enriched first."""
        if not self.is_active:
            logger.debug(f"{self.name}: set_error() ignored, no active session")
            return

        if isinstance(error, BaseException):
            error = enrich_exception(
                error,
                context={"loading_state": self.name},
                environment=self.environment,
            )
        self._finish_error(error)

    def reset(self) -> None:
        """Disarm all timers and return to idle, discarding session data."""
        if self._disposed:
            return
        self._cancel_timers()
        self._generation += 1
        self._active = False
        self._state = LoadingState.IDLE
        self._progress = None
        self._message = None
        self._error = None
        self._started_at = None
        self._started_mono = None
        self._settled_event().set()
        self._notify()

    def dispose(self) -> None:
        """Cancel all pending timers and make the machine inert."""
        if self._disposed:
            return
        self._cancel_timers()
        self._generation += 1
        self._active = False
        self._disposed = True
        self._listeners.clear()
        if self._settled is not None:
            self._settled.set()
        logger.debug(f"{self.name}: disposed")

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        loading_message: Optional[str] = None,
        success_message: Optional[str] = None,
    ) -> T:
        """
        Run an async operation inside a loading session.

        Returns:
            The operation's result

        Raises:
            Exception: The operation's exception, after recording it
        """
        self.start(loading_message)
        try:
            result = await operation()
        except Exception as e:
            self.set_error(e)
            raise
        self.set_success(success_message)
        return result

    async def wait_until_settled(self) -> LoadingSnapshot:
        """Wait until the current session is terminal, reset or disposed."""
        if self.is_active:
            await self._settled_event().wait()
        return self.snapshot()

    # ------------------------------------------------------------------
    # Timer callbacks
    # ------------------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        return self.is_active and generation == self._generation

    def _on_show_due(self, generation: int) -> None:
        if not self._is_current(generation):
            return
        self._show_handle = None
        if self._state == LoadingState.IDLE:
            self._state = LoadingState.LOADING
            self._notify()

    def _on_timeout(self, generation: int) -> None:
        if not self._is_current(generation):
            return
        self._timeout_handle = None
        logger.warning(f"{self.name}: timed out after {self.config.timeout}s")
        self._finish_error(TIMEOUT_MESSAGE)

    def _on_success_due(self, generation: int, message: Optional[str]) -> None:
        if not self._is_current(generation):
            return
        self._success_handle = None
        self._finish_success(message)

    def _finish_success(self, message: Optional[str]) -> None:
        self._cancel_timers()
        self._active = False
        self._state = LoadingState.SUCCESS
        self._message = message
        self._progress = 100.0
        self._settled_event().set()
        self._notify()

    def _finish_error(self, error: Union[EnrichedError, str]) -> None:
        self._cancel_timers()
        self._active = False
        self._state = LoadingState.ERROR
        self._error = error
        self._progress = None
        self._settled_event().set()
        self._notify()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _settled_event(self) -> asyncio.Event:
        if self._settled is None:
            self._settled = asyncio.Event()
        return self._settled

    @staticmethod
    def _cancel(handle: Optional[asyncio.TimerHandle]) -> None:
        if handle is not None:
            handle.cancel()

    def _cancel_timers(self) -> None:
        for handle in (self._show_handle, self._timeout_handle, self._success_handle):
            self._cancel(handle)
        self._show_handle = None
        self._timeout_handle = None
        self._success_handle = None

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"{self.name}: loading listener failed")

    def __repr__(self) -> str:
        return f"LoadingStateMachine(name={self.name!r}, state={self._state.value})"

