"""
Finite state machine for the client onboarding lifecycle.

Defines the five onboarding states and the explicit transitions between
them. The onboarding service checks every step against this table, so a
record can only move along the documented path:

    created -> payment_pending -> payment_completed -> workflow_active
                                                    -> workflow_failed

Re-confirmation of a paid client moves it back to payment_completed
(never to payment_pending) so provisioning can run again.

Usage:
    sm = OnboardingStateMachine.from_record(record)
    sm.transition(OnboardingTrigger.PAYMENT_CONFIRMED)
    assert sm.current_state == OnboardingState.PAYMENT_COMPLETED
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from src.schemas.client_schema import ClientRecord, WorkflowStatus

logger = logging.getLogger(__name__)


class OnboardingState(str, Enum):
    """All possible states of an onboarding attempt."""
    CREATED = "created"
    PAYMENT_PENDING = "payment_pending"
    PAYMENT_COMPLETED = "payment_completed"
    WORKFLOW_ACTIVE = "workflow_active"
    WORKFLOW_FAILED = "workflow_failed"


class OnboardingTrigger(str, Enum):
    """Events that cause state transitions."""
    RECORD_CREATED = "record_created"
    PAYMENT_CONFIRMED = "payment_confirmed"
    PAYMENT_RECONFIRMED = "payment_reconfirmed"
    PROVISIONING_SUCCEEDED = "provisioning_succeeded"
    PROVISIONING_FAILED = "provisioning_failed"


@dataclass(frozen=True)
class Transition:
    """A single valid state transition."""
    from_state: OnboardingState
    to_state: OnboardingState
    trigger: OnboardingTrigger


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: OnboardingState
    entered_at: datetime
    trigger: Optional[OnboardingTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current state."""


def state_of(record: ClientRecord) -> OnboardingState:
    """Derive the lifecycle state from a persisted record's fields."""
    if not record.is_paid:
        return OnboardingState.PAYMENT_PENDING
    if record.workflow_status == WorkflowStatus.FAILED:
        return OnboardingState.WORKFLOW_FAILED
    if record.workflow_id:
        return OnboardingState.WORKFLOW_ACTIVE
    return OnboardingState.PAYMENT_COMPLETED


class OnboardingStateMachine:
    """
    Deterministic state machine for one client's onboarding.

    Every transition must be explicitly defined. Attempts to skip a step
    (for example provisioning an unpaid client) are rejected with the
    list of triggers that are allowed instead.
    """

    TRANSITIONS: list[Transition] = [
        Transition(OnboardingState.CREATED, OnboardingState.PAYMENT_PENDING,
                   OnboardingTrigger.RECORD_CREATED),

        Transition(OnboardingState.PAYMENT_PENDING, OnboardingState.PAYMENT_COMPLETED,
                   OnboardingTrigger.PAYMENT_CONFIRMED),

        # --- Provisioning outcome ---
        Transition(OnboardingState.PAYMENT_COMPLETED, OnboardingState.WORKFLOW_ACTIVE,
                   OnboardingTrigger.PROVISIONING_SUCCEEDED),
        Transition(OnboardingState.PAYMENT_COMPLETED, OnboardingState.WORKFLOW_FAILED,
                   OnboardingTrigger.PROVISIONING_FAILED),

        # --- Manual re-confirmation re-runs provisioning ---
        Transition(OnboardingState.PAYMENT_COMPLETED, OnboardingState.PAYMENT_COMPLETED,
                   OnboardingTrigger.PAYMENT_RECONFIRMED),
        Transition(OnboardingState.WORKFLOW_ACTIVE, OnboardingState.PAYMENT_COMPLETED,
                   OnboardingTrigger.PAYMENT_RECONFIRMED),
        Transition(OnboardingState.WORKFLOW_FAILED, OnboardingState.PAYMENT_COMPLETED,
                   OnboardingTrigger.PAYMENT_RECONFIRMED),
    ]

    TERMINAL_STATES = frozenset({OnboardingState.WORKFLOW_ACTIVE, OnboardingState.WORKFLOW_FAILED})

    def __init__(self, initial_state: OnboardingState = OnboardingState.CREATED) -> None:
        self._current_state = initial_state
        self._history: list[StateEntry] = [
            StateEntry(state=initial_state, entered_at=datetime.now(timezone.utc))
        ]

    @classmethod
    def from_record(cls, record: ClientRecord) -> "OnboardingStateMachine":
        return cls(state_of(record))

    @property
    def current_state(self) -> OnboardingState:
        return self._current_state

    def transition(self, trigger: OnboardingTrigger) -> OnboardingState:
        """
        Execute a state transition.

        Args:
            trigger: The event triggering the transition.

        Returns:
            The new onboarding state.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                old_state = self._current_state
                self._current_state = t.to_state
                self._history.append(StateEntry(
                    state=self._current_state,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))
                logger.debug(
                    "Onboarding transition: %s -> %s (trigger: %s)",
                    old_state.value, self._current_state.value, trigger.value,
                )
                return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def can(self, trigger: OnboardingTrigger) -> bool:
        return trigger in self.get_valid_triggers()

    def get_valid_triggers(self) -> list[OnboardingTrigger]:
        """Return all triggers valid from the current state."""
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]

    def is_terminal(self) -> bool:
        return self._current_state in self.TERMINAL_STATES
