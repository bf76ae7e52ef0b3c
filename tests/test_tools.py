"""Tests for the individual tool handlers."""

import pytest

from src.config import settings
from src.errors import CollaboratorError, ToolServiceError, ValidationError
from src.schemas.client_schema import PaymentStatus
from src.tools.call_summary import summarize_client_call
from src.tools.onboarding import confirm_payment, create_payment_link, initiate_onboarding
from src.tools.scheduling import schedule_appointment
from src.tools.sms import send_sms
from tests.conftest import EVENT_LINK, OWNER_PHONE

APPOINTMENT = {
    "to": "(973) 555-0142",
    "customerName": "Sam",
    "appointmentType": "Lawn Care",
    "selectedDate": "February 10, 2025",
    "selectedTime": "10:00 AM",
    "propertyAddress": "12 Elm St",
}

CLIENT = {
    "clientName": "Dana Reyes",
    "clientPhone": "973-555-0142",
    "businessName": "Reyes Roofing",
    "amount": 500,
}


class TestScheduleAppointment:
    @pytest.mark.asyncio
    async def test_returns_event_link(self, tool_context, calendar):
        result = await schedule_appointment(tool_context, {
            "summary": "Estimate",
            "startTime": "2025-02-10T10:00:00",
            "endTime": "2025-02-10T11:00:00",
        })
        assert result == f"Appointment scheduled successfully! See details: {EVENT_LINK}"
        event = calendar.events[0]
        assert event.summary == "Estimate"
        assert event.time_zone == tool_context.business.timezone

    @pytest.mark.asyncio
    async def test_default_summary(self, tool_context, calendar):
        await schedule_appointment(tool_context, {"startTime": "a", "endTime": "b"})
        assert calendar.events[0].summary == "New Appointment"

    @pytest.mark.asyncio
    async def test_no_link(self, tool_context, calendar):
        calendar.link = None
        result = await schedule_appointment(tool_context, {"startTime": "a", "endTime": "b"})
        assert result == "Appointment scheduled, but no event link available."

    @pytest.mark.asyncio
    async def test_missing_times(self, tool_context):
        with pytest.raises(ValidationError):
            await schedule_appointment(tool_context, {"startTime": "2025-02-10T10:00:00"})

    @pytest.mark.asyncio
    async def test_calendar_error_propagates(self, tool_context, calendar):
        calendar.error = "quota exceeded"
        with pytest.raises(CollaboratorError, match="Could not schedule appointment: quota exceeded"):
            await schedule_appointment(tool_context, {"startTime": "a", "endTime": "b"})


class TestSendSms:
    @pytest.mark.asyncio
    async def test_plain_body(self, tool_context, sms):
        result = await send_sms(tool_context, {"to": "+1 973 555 0142", "body": "Hello"})
        assert result == "SMS sent successfully! SID: SM0001"
        assert sms.sent == [("+19735550142", "Hello")]

    @pytest.mark.asyncio
    async def test_missing_to(self, tool_context):
        with pytest.raises(ValidationError, match='Missing SMS "to" parameter.'):
            await send_sms(tool_context, {"body": "Hello"})

    @pytest.mark.asyncio
    async def test_missing_body_and_appointment(self, tool_context):
        with pytest.raises(ValidationError, match="Need either"):
            await send_sms(tool_context, {"to": "9735550142", "customerName": "Sam"})

    @pytest.mark.asyncio
    async def test_appointment_confirmation_and_owner_copy(self, tool_context, sms):
        result = await send_sms(tool_context, APPOINTMENT)

        assert result == "Appointment SMS sent to Sam! Customer SID: SM0001. Owner notified: SM0002"
        (customer_to, customer_body), (owner_to, owner_body) = sms.sent
        assert customer_to == "9735550142"
        assert f"{settings.business.name} Confirmation!" in customer_body
        assert "Lawn Care is confirmed for February 10, 2025 at 10:00 AM" in customer_body
        assert "dates=20250210T100000%2F20250210T110000" in customer_body
        assert owner_to == OWNER_PHONE
        assert "Customer: Sam" in owner_body
        assert "Address: 12 Elm St" in owner_body

    @pytest.mark.asyncio
    async def test_owner_failure_does_not_fail_tool(self, tool_context, sms):
        sms.fail_for.add(OWNER_PHONE)
        result = await send_sms(tool_context, APPOINTMENT)
        assert result.endswith(" (Owner notification failed)")
        assert len(sms.sent) == 1

    @pytest.mark.asyncio
    async def test_default_address(self, tool_context, sms):
        params = {k: v for k, v in APPOINTMENT.items() if k != "propertyAddress"}
        await send_sms(tool_context, params)
        assert "Address: Customer Property" in sms.sent[1][1]

    @pytest.mark.asyncio
    async def test_send_failure(self, tool_context, sms):
        sms.fail_all = True
        with pytest.raises(CollaboratorError, match="Could not send SMS: Twilio is down"):
            await send_sms(tool_context, {"to": "9735550142", "body": "Hello"})


class TestPaymentLinkTools:
    @pytest.mark.asyncio
    async def test_create_payment_link(self, tool_context, store):
        result = await create_payment_link(tool_context, CLIENT)
        record = store.list_clients()[0]
        assert result == (
            f"Payment link created and sent to Dana Reyes at 9735550142. "
            f"Client ID: {record.client_id}. Amount: $500"
        )

    @pytest.mark.asyncio
    async def test_create_payment_link_reports_sms_failure(self, tool_context, sms):
        sms.fail_all = True
        result = await create_payment_link(tool_context, CLIENT)
        assert "failed: Twilio is down" in result

    @pytest.mark.asyncio
    async def test_missing_fields(self, tool_context):
        with pytest.raises(ToolServiceError, match="Could not create payment link: Missing required fields: amount"):
            await create_payment_link(tool_context, {"clientName": "Dana", "clientPhone": "9735550142"})

    @pytest.mark.asyncio
    async def test_numeric_phone_accepted(self, tool_context, store):
        await create_payment_link(tool_context, {**CLIENT, "clientPhone": 9735550142})
        assert store.list_clients()[0].client_phone == "9735550142"

    @pytest.mark.asyncio
    async def test_initiate_onboarding(self, tool_context, store):
        result = await initiate_onboarding(tool_context, CLIENT)
        record = store.list_clients()[0]
        assert f"Client ID: {record.client_id}" in result
        assert record.payment_link in result
        assert "texted to 9735550142" in result


class TestConfirmPaymentTool:
    @pytest.mark.asyncio
    async def test_confirm(self, tool_context, store):
        await create_payment_link(tool_context, CLIENT)
        client_id = store.list_clients()[0].client_id

        result = await confirm_payment(tool_context, {"clientId": client_id, "paymentIntentId": "pi_1"})

        record = store.get(client_id)
        assert record.payment_status == PaymentStatus.COMPLETED
        assert "Status: completed." in result
        assert f"AI phone line: {record.assigned_phone_number}." in result

    @pytest.mark.asyncio
    async def test_confirm_reports_provisioning_failure(self, tool_context, store, workflow_client):
        await create_payment_link(tool_context, CLIENT)
        client_id = store.list_clients()[0].client_id
        workflow_client.error = "Workflow creation failed: 401 Unauthorized"

        result = await confirm_payment(tool_context, {"clientId": client_id})

        assert result.endswith("Provisioning failed: Workflow creation failed: 401 Unauthorized")


class TestSummarizeClientCall:
    @pytest.mark.asyncio
    async def test_summary_is_stored(self, tool_context, summaries):
        result = await summarize_client_call(tool_context, {
            "clientName": "Dana",
            "businessName": "Reyes Roofing",
            "businessType": "roofing",
            "services": "repairs, inspections",
            "budget": 800,
        })
        (summary_id, summary), = summaries.list_summaries().items()
        assert result == (
            f"Call summary created for Dana. Summary ID: {summary_id}. "
            "Business: Reyes Roofing, Type: roofing"
        )
        assert summary.services == ["repairs", "inspections"]
        assert summary.budget == "800"
        assert summary.timeline == "flexible"

    @pytest.mark.asyncio
    async def test_defaults(self, tool_context):
        result = await summarize_client_call(tool_context, {})
        assert "Call summary created for Unknown." in result
        assert "Business: Unknown's Business, Type: general" in result
