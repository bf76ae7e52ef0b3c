"""Text message bodies sent to clients, customers and the business owner."""

from src.config import settings
from src.utils import format_amount

_biz = settings.business


def build_payment_link_message(
    client_name: str, payment_link: str, amount: float, business_name: str
) -> str:
    return (
        f"Hi {client_name}! Thanks for choosing our AI assistant service.\n\n"
        f"Your payment link: {payment_link}\n\n"
        f"Amount: ${format_amount(amount)}\n"
        f"Business: {business_name}\n\n"
        "Complete payment to activate your 24/7 AI phone system!\n\n"
        "Questions? Reply to this message."
    )


def build_activation_message(business_name: str, assigned_phone_number: str) -> str:
    return (
        "Your AI assistant is now LIVE!\n\n"
        f"Business: {business_name}\n"
        f"Your AI Phone: {assigned_phone_number}\n\n"
        "Your customers can now call this number 24/7 and speak with your "
        "professional AI assistant!\n\n"
        "Test it yourself by calling from a different phone.\n\n"
        "Questions? Reply to this message.\n\n"
        "Welcome to the future of customer service!"
    )


def build_appointment_confirmation(
    customer_name: str,
    appointment_type: str,
    selected_date: str,
    selected_time: str,
    calendar_link: str,
) -> str:
    """Customer-facing confirmation with an add-to-calendar link."""
    return (
        f"{_biz.name} Confirmation!\n\n"
        f"Hi {customer_name}! Your {appointment_type} is confirmed for "
        f"{selected_date} at {selected_time}.\n\n"
        "Our team arrives 15 min early to survey your property.\n\n"
        f"Add to Calendar: {calendar_link}\n\n"
        "Questions? Call us anytime!\n"
        f"- {_biz.assistant_name} at {_biz.name}"
    )


def build_owner_notification(
    customer_name: str,
    appointment_type: str,
    selected_date: str,
    selected_time: str,
    address: str,
    calendar_link: str,
) -> str:
    return (
        "New Appointment Scheduled!\n\n"
        f"Customer: {customer_name}\n"
        f"Service: {appointment_type}\n"
        f"Date: {selected_date} at {selected_time}\n"
        f"Address: {address}\n\n"
        f"Add to Calendar: {calendar_link}\n\n"
        f"- {_biz.name} Scheduling System"
    )


def appointment_title(appointment_type: str) -> str:
    return f"{_biz.name} - {appointment_type}"


def appointment_description(appointment_type: str) -> str:
    return (
        f"{appointment_type} appointment with {_biz.name}. Our professional will "
        "arrive 15 minutes early to survey your property."
    )


def owner_appointment_description(appointment_type: str, customer_name: str, address: str) -> str:
    return (
        f"{appointment_type} appointment with {_biz.name}. "
        f"Customer: {customer_name}. Address: {address}"
    )
