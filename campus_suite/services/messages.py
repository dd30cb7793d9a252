"""Status-change message templates.

One template per (workflow, target status). Each renders an email subject,
a plain-text email body and the short line shown in the in-app
notification feed.
"""
from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel

from campus_suite.domain.loan import ApplicationStatus
from campus_suite.domain.shop import OrderStatus

TEAM_SIGNATURE = "Campus Support Suite Team"
SCHOLARSHIP_SIGNATURE = "Scholarship Program Foundation"


class StatusMessage(BaseModel):
    subject: str
    body: str
    summary: str


def _money(amount: Any) -> str:
    try:
        return f"${float(amount):,.2f}"
    except (TypeError, ValueError):
        return "-"


def _order_date(created_at: Any) -> str:
    try:
        return datetime.fromisoformat(str(created_at)).strftime("%d %b %Y")
    except ValueError:
        return "-"


# ---------------------
# LOAN APPLICATIONS
# ---------------------

def loan_application_message(application: Dict[str, Any], status: ApplicationStatus) -> StatusMessage:
    name = application.get("full_name", "Applicant")
    title = application.get("loan_title", "")
    details = (
        f"- Amount: {_money(application.get('amount'))}\n"
        f"- Purpose: {application.get('purpose', '')}\n"
        f"- Application ID: {application.get('application_id')}"
    )

    if status == ApplicationStatus.APPROVED:
        return StatusMessage(
            subject="Loan Application Approved",
            summary=f'Your loan application for "{title}" has been approved.',
            body=(
                f"Dear {name},\n\n"
                f'We are pleased to inform you that your loan application for "{title}" has been APPROVED!\n\n'
                f"Loan Details:\n{details}\n\n"
                "Our team will contact you shortly with the next steps regarding the disbursement of your loan.\n\n"
                "If you have any questions, please don't hesitate to contact our support team.\n\n"
                f"Best regards,\n{TEAM_SIGNATURE}"
            ),
        )

    if status == ApplicationStatus.REJECTED:
        return StatusMessage(
            subject="Loan Application Update",
            summary=f'Your loan application for "{title}" was not successful.',
            body=(
                f"Dear {name},\n\n"
                f'Thank you for applying for the loan "{title}".\n\n'
                "After careful review, we regret to inform you that your application was NOT successful at this time.\n\n"
                f"Application Details:\n{details}\n\n"
                "We encourage you to review your application and consider applying again in the future. "
                "If you have any questions about this decision, please contact our support team.\n\n"
                f"Best regards,\n{TEAM_SIGNATURE}"
            ),
        )

    return StatusMessage(
        subject="Loan Application Under Review",
        summary=f'Your loan application for "{title}" is pending review.',
        body=(
            f"Dear {name},\n\n"
            f'Your loan application for "{title}" is pending review. '
            "We will notify you as soon as a decision has been made.\n\n"
            f"Application Details:\n{details}\n\n"
            f"Best regards,\n{TEAM_SIGNATURE}"
        ),
    )


# ---------------------
# SCHOLARSHIP APPLICATIONS
# ---------------------

def scholarship_application_message(application: Dict[str, Any], status: ApplicationStatus) -> StatusMessage:
    name = application.get("full_name", "Applicant")
    title = application.get("scholarship_title", "")

    if status == ApplicationStatus.APPROVED:
        return StatusMessage(
            subject="Scholarship Application Approved",
            summary=f'Congratulations! Your application for "{title}" has been approved.',
            body=(
                f"Dear {name},\n\n"
                "Congratulations!\n\n"
                f'Your application for the scholarship "{title}" has been APPROVED.\n\n'
                "We will contact you with the next steps shortly.\n\n"
                f"Best regards,\n{SCHOLARSHIP_SIGNATURE}"
            ),
        )

    if status == ApplicationStatus.REJECTED:
        return StatusMessage(
            subject="Scholarship Application Update",
            summary=f'Your application for "{title}" was not successful.',
            body=(
                f"Dear {name},\n\n"
                f'Thank you for applying for the scholarship "{title}".\n\n'
                "After careful review, we regret to inform you that your application was NOT successful.\n\n"
                "We encourage you to apply again in the future.\n\n"
                f"Best wishes,\n{SCHOLARSHIP_SIGNATURE}"
            ),
        )

    return StatusMessage(
        subject="Scholarship Application Under Review",
        summary=f'Your application for "{title}" is pending review.',
        body=(
            f"Dear {name},\n\n"
            f'Your application for the scholarship "{title}" is pending review. '
            "We will let you know once a decision has been made.\n\n"
            f"Best regards,\n{SCHOLARSHIP_SIGNATURE}"
        ),
    )


# ---------------------
# SHOP ORDERS
# ---------------------

ORDER_SUBJECTS = {
    OrderStatus.PENDING: "Order Status Update: Your Order is Pending",
    OrderStatus.CONFIRMED: "Order Confirmed! Your Order Has Been Confirmed",
    OrderStatus.SHIPPED: "Order Shipped! Your Order is on its Way",
    OrderStatus.DELIVERED: "Order Delivered! Thank You for Your Purchase",
    OrderStatus.CANCELLED: "Order Cancelled: Your Order Has Been Cancelled",
}

ORDER_OPENINGS = {
    OrderStatus.PENDING: "Your order is currently pending review. We will process it shortly and notify you once it's confirmed.",
    OrderStatus.CONFIRMED: "Great news! Your order has been confirmed and is being prepared for shipment.",
    OrderStatus.SHIPPED: "Your order has been shipped and is on its way to you!",
    OrderStatus.DELIVERED: "Your order has been successfully delivered! We hope you enjoy your purchase.",
    OrderStatus.CANCELLED: "We're sorry to inform you that your order has been cancelled.",
}

ORDER_CLOSINGS = {
    OrderStatus.PENDING: "We appreciate your patience and will keep you updated on the progress of your order.",
    OrderStatus.CONFIRMED: "Your order will be shipped soon. You will receive another notification once it's on its way.\n\nThank you for shopping with Campus Support Suite!",
    OrderStatus.SHIPPED: "You can expect your delivery soon. Please keep an eye out for your package.\n\nThank you for your purchase!",
    OrderStatus.DELIVERED: "Thank you for choosing Campus Support Suite! If you have any questions or concerns about your order, please don't hesitate to contact our support team.",
    OrderStatus.CANCELLED: "If you didn't request this cancellation or have any questions, please contact our support team immediately.\n\nWe apologize for any inconvenience this may cause.",
}


def user_order_message(order: Dict[str, Any], status: OrderStatus) -> StatusMessage:
    name = order.get("name", "Customer")
    items = order.get("items") or []
    details = (
        "Order Details:\n"
        f"- Order ID: {order.get('order_id')}\n"
        f"- Order Date: {_order_date(order.get('created_at'))}\n"
        f"- Total Amount: {_money(order.get('total_amount'))}"
    )

    summary = f'Hello "{name}"\nOrder status updated to {status.value}'
    if len(items) > 1:
        summary += "\n\nTap to view all products and details"

    return StatusMessage(
        subject=ORDER_SUBJECTS[status],
        summary=summary,
        body=f"Dear {name},\n\n{ORDER_OPENINGS[status]}\n\n{details}\n\n{ORDER_CLOSINGS[status]}",
    )
