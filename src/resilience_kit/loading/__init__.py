"""
Loading Package - Loading Indicator State Management.

    - LoadingStateMachine: Debounced, minimum-time, timeout-guarded session
    - LoadingStateGroup: Aggregate view over several keyed sessions
    - simulate_progress: Eased fake progress for opaque operations
"""

from resilience_kit.loading.group import LoadingStateGroup
from resilience_kit.loading.progress import ProgressCurve, simulate_progress
from resilience_kit.loading.state_machine import TIMEOUT_MESSAGE, LoadingStateMachine

__all__ = [
    "LoadingStateGroup",
    "LoadingStateMachine",
    "ProgressCurve",
    "TIMEOUT_MESSAGE",
    "simulate_progress",
]
