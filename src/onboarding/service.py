"""
Client onboarding orchestration.

Moves a client from "payment link sent" to "AI phone line live":

    initiate -> (client pays) -> confirm_payment -> provisioning -> activation text

Each step persists before the next one starts, so a crash or a failing
collaborator leaves a record that says exactly how far it got. Failures
of the two text messages and of provisioning never undo earlier steps;
they are written to the record and returned to the caller in the result
object, and the caller decides whether to escalate.
"""

import logging
import math
import uuid
from enum import Enum
from typing import Optional

from src.errors import AlreadyConfirmedError, CollaboratorError, ValidationError
from src.integrations.sms import SmsSender
from src.logging_context import set_correlation_id
from src.onboarding.provisioning import Provisioner
from src.onboarding.state_machine import (
    InvalidTransitionError,
    OnboardingState,
    OnboardingStateMachine,
    OnboardingTrigger,
)
from src.prompts.sms_templates import build_activation_message, build_payment_link_message
from src.schemas.client_schema import ClientProfile, ClientRecord, PaymentStatus, WorkflowStatus
from src.schemas.onboarding_schema import (
    ConfirmationResult,
    InitiationResult,
    NotificationResult,
)
from src.storage.client_store import ClientStore
from src.utils import epoch_millis, normalize_phone, utc_now_iso

logger = logging.getLogger(__name__)


class ReconfirmPolicy(str, Enum):
    """What a second payment confirmation for a paid client does."""
    REPROVISION = "reprovision"
    IGNORE = "ignore"
    REJECT = "reject"


def new_client_id() -> str:
    return f"client_{epoch_millis()}_{uuid.uuid4().hex[:12]}"


class OnboardingService:
    """Owns every write to a client record during onboarding."""

    def __init__(
        self,
        store: ClientStore,
        sms: SmsSender,
        provisioner: Provisioner,
        payment_link_template: str,
        reconfirm_policy: ReconfirmPolicy = ReconfirmPolicy.REPROVISION,
    ) -> None:
        self._store = store
        self._sms = sms
        self._provisioner = provisioner
        self._payment_link_template = payment_link_template
        self._reconfirm_policy = ReconfirmPolicy(reconfirm_policy)

    @property
    def reconfirm_policy(self) -> ReconfirmPolicy:
        return self._reconfirm_policy

    # ------------------------------------------------------------------ #
    # Payment link
    # ------------------------------------------------------------------ #

    @staticmethod
    def _validate_profile(profile: ClientProfile) -> float:
        """Check mandatory fields and return the parsed amount."""
        missing = [
            label
            for label, value in [
                ("clientName", profile.client_name),
                ("clientPhone", profile.client_phone),
                ("amount", profile.amount),
            ]
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        try:
            amount = float(str(profile.amount).replace("$", "").replace(",", "").strip())
        except ValueError:
            raise ValidationError(f"Invalid amount: {profile.amount!r}") from None
        if not math.isfinite(amount) or amount <= 0:
            raise ValidationError(f"Amount must be greater than zero, got {profile.amount!r}")
        return amount

    async def initiate(self, profile: ClientProfile) -> InitiationResult:
        """Create a pending client record and text them the payment link.

        Raises:
            ValidationError: If clientName, clientPhone or amount is missing.
        """
        amount = self._validate_profile(profile)
        client_name = profile.client_name.strip()
        client_id = new_client_id()
        set_correlation_id(client_id)

        sm = OnboardingStateMachine()
        record = ClientRecord(
            client_id=client_id,
            client_name=client_name,
            client_phone=normalize_phone(profile.client_phone),
            client_email=profile.client_email or None,
            business_name=profile.business_name or f"{client_name}'s Business",
            business_type=profile.business_type or None,
            amount=amount,
            payment_status=PaymentStatus.PENDING,
            payment_link=self._payment_link_template.format(client_id=client_id),
            created_at=utc_now_iso(),
        )
        self._store.create(record)
        sm.transition(OnboardingTrigger.RECORD_CREATED)
        logger.info("Client %s created for %s, awaiting payment", client_id, client_name)

        result = await self._send_payment_link(record)
        return InitiationResult(
            client=result.client,
            payment_link=record.payment_link,
            notification_error=result.error,
        )

    async def resend_payment_link(self, client_id: str) -> NotificationResult:
        """Operator retry of the payment-link text for an unpaid client."""
        set_correlation_id(client_id)
        record = self._store.get(client_id)
        if not OnboardingStateMachine.from_record(record).can(OnboardingTrigger.PAYMENT_CONFIRMED):
            raise InvalidTransitionError(f"Client {client_id} has already paid")
        return await self._send_payment_link(record)

    async def _send_payment_link(self, record: ClientRecord) -> NotificationResult:
        body = build_payment_link_message(
            record.client_name, record.payment_link, record.amount, record.display_business_name
        )
        try:
            await self._sms.send(record.client_phone, body)
        except CollaboratorError as exc:
            logger.error("Error sending payment link SMS for %s: %s", record.client_id, exc)
            error = f"payment link: {exc}"
            updated = self._store.update(
                record.client_id, lambda r: setattr(r, "notification_error", error)
            )
            return NotificationResult(client=updated, error=str(exc))

        sent_at = utc_now_iso()

        def mark_sent(r: ClientRecord) -> None:
            r.payment_link_sent_at = sent_at
            r.notification_error = None

        updated = self._store.update(record.client_id, mark_sent)
        logger.info("Payment link SMS sent to %s", record.client_name)
        return NotificationResult(client=updated)

    # ------------------------------------------------------------------ #
    # Payment confirmation and provisioning
    # ------------------------------------------------------------------ #

    async def confirm_payment(
        self, client_id: Optional[str], payment_intent_id: Optional[str] = None
    ) -> ConfirmationResult:
        """Mark the client paid, then provision their assistant.

        The paid status is persisted before provisioning begins and is never
        rolled back. Provisioning and activation-notice failures are stored
        on the record and returned in the result; they do not raise.

        Raises:
            ValidationError: If client_id is empty.
            NotFoundError: If the client does not exist.
            AlreadyConfirmedError: If already paid and the policy is REJECT.
        """
        if not client_id:
            raise ValidationError("Missing clientId")
        set_correlation_id(client_id)
        record = self._store.get(client_id)
        sm = OnboardingStateMachine.from_record(record)

        if record.is_paid:
            if self._reconfirm_policy == ReconfirmPolicy.REJECT:
                raise AlreadyConfirmedError(f"Payment for {client_id} was already confirmed")
            if self._reconfirm_policy == ReconfirmPolicy.IGNORE:
                logger.info("Duplicate payment confirmation for %s ignored", client_id)
                return ConfirmationResult(
                    client=record,
                    provisioned=sm.current_state == OnboardingState.WORKFLOW_ACTIVE,
                    skipped=True,
                )
            logger.warning("Payment for %s confirmed again; re-running provisioning", client_id)
            sm.transition(OnboardingTrigger.PAYMENT_RECONFIRMED)
        else:
            sm.transition(OnboardingTrigger.PAYMENT_CONFIRMED)

        paid_at = utc_now_iso()

        def mark_paid(r: ClientRecord) -> None:
            r.payment_status = PaymentStatus.COMPLETED
            r.payment_intent_id = payment_intent_id or r.payment_intent_id
            r.paid_at = r.paid_at or paid_at

        record = self._store.update(client_id, mark_paid)
        logger.info("Payment confirmed for %s (intent %s)", client_id, payment_intent_id)

        try:
            outcome = await self._provisioner.provision(record)
        except CollaboratorError as exc:
            logger.error("Error generating workflow for %s: %s", client_id, exc)
            return self._record_provisioning_failure(sm, client_id, str(exc))
        except Exception as exc:
            # Paid clients must never be left without a provisioning outcome
            logger.exception("Unexpected error generating workflow for %s", client_id)
            return self._record_provisioning_failure(
                sm, client_id, f"Workflow creation failed: {str(exc) or type(exc).__name__}"
            )

        sm.transition(OnboardingTrigger.PROVISIONING_SUCCEEDED)

        def mark_active(r: ClientRecord) -> None:
            r.workflow_id = outcome.workflow_id
            r.assigned_phone_number = outcome.phone_number
            r.workflow_status = None
            r.workflow_error = None
            r.activation_notified_at = None

        record = self._store.update(client_id, mark_active)
        logger.info("Client %s workflow activated: %s", client_id, outcome.workflow_id)

        notice = await self._send_activation(record)
        self._log_outcome(client_id, sm)
        return ConfirmationResult(
            client=notice.client,
            provisioned=True,
            notification_error=notice.error,
        )

    def _record_provisioning_failure(
        self, sm: OnboardingStateMachine, client_id: str, error: str
    ) -> ConfirmationResult:
        sm.transition(OnboardingTrigger.PROVISIONING_FAILED)

        def mark_failed(r: ClientRecord) -> None:
            r.workflow_status = WorkflowStatus.FAILED
            r.workflow_error = error

        record = self._store.update(client_id, mark_failed)
        self._log_outcome(client_id, sm)
        return ConfirmationResult(client=record, provisioning_error=error)

    @staticmethod
    def _log_outcome(client_id: str, sm: OnboardingStateMachine) -> None:
        if sm.is_terminal():
            logger.info(
                "Onboarding of %s reached %s: %s",
                client_id, sm.current_state.value, " -> ".join(sm.get_state_trace()),
            )

    # ------------------------------------------------------------------ #
    # Activation notice
    # ------------------------------------------------------------------ #

    async def resend_activation(self, client_id: str) -> NotificationResult:
        """Operator retry of the activation text for an active client."""
        set_correlation_id(client_id)
        record = self._store.get(client_id)
        state = OnboardingStateMachine.from_record(record).current_state
        if state != OnboardingState.WORKFLOW_ACTIVE:
            raise InvalidTransitionError(
                f"Client {client_id} is '{state.value}', activation notice needs 'workflow_active'"
            )
        return await self._send_activation(record)

    async def _send_activation(self, record: ClientRecord) -> NotificationResult:
        body = build_activation_message(record.display_business_name, record.assigned_phone_number)
        try:
            await self._sms.send(record.client_phone, body)
        except CollaboratorError as exc:
            logger.error("Error sending activation SMS for %s: %s", record.client_id, exc)
            error = f"activation: {exc}"
            updated = self._store.update(
                record.client_id, lambda r: setattr(r, "notification_error", error)
            )
            return NotificationResult(client=updated, error=str(exc))

        notified_at = utc_now_iso()

        def mark_notified(r: ClientRecord) -> None:
            r.activation_notified_at = notified_at
            r.notification_error = None

        updated = self._store.update(record.client_id, mark_notified)
        logger.info("Activation SMS sent to %s", record.client_name)
        return NotificationResult(client=updated)

    def get_client(self, client_id: str) -> ClientRecord:
        return self._store.get(client_id)

    def pending_activation_notices(self) -> list[ClientRecord]:
        """Active clients whose activation text has not been delivered."""
        return [
            r for r in self._store.list_clients()
            if r.workflow_id and r.workflow_status is None and r.activation_notified_at is None
        ]
