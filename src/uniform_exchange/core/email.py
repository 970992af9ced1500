"""
Email Service using Resend

Transactional emails for the school submission and school approval
request workflows. Every sender returns True when the message was handed
to Resend (or logged, when no API key is configured) and False otherwise.
Callers treat a False or an exception as a non-fatal notification failure.
"""

import asyncio
import logging
from html import escape

import resend

from uniform_exchange.core.config import settings

logger = logging.getLogger(__name__)

# Initialize Resend with API key
resend.api_key = settings.resend_api_key


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email

    Returns:
        True if email was sent successfully
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Run sync Resend call in thread pool to avoid blocking event loop
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


def _render(title: str, body: str, button_url: str | None = None, button_label: str = "") -> str:
    """Wrap a message body in the shared email layout."""
    button = ""
    if button_url:
        button = f'<a href="{button_url}" class="button">{button_label}</a>'

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
            .header {{ color: #14532d; margin-bottom: 24px; }}
            .button {{ display: inline-block; background-color: #15803d; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; margin: 24px 0; }}
            .summary-box {{ background-color: #f9fafb; border: 1px solid #e5e7eb; padding: 16px; border-radius: 8px; margin: 16px 0; }}
            .summary-box ul {{ margin: 8px 0 0 0; padding-left: 20px; }}
            .reason-box {{ background-color: #fef2f2; border-left: 4px solid #dc2626; padding: 16px; margin: 16px 0; }}
            .footer {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1 class="header">{title}</h1>

            {body}

            {button}

            <div class="footer">
                <p>Questions? Contact us at {escape(settings.support_email)}.</p>
                <p>{escape(settings.site_name)} - School Uniform Exchange</p>
            </div>
        </div>
    </body>
    </html>
    """


def _school_list(names: list[str]) -> str:
    items = "".join(f"<li>{escape(name)}</li>" for name in names)
    return f"<ul>{items}</ul>"


# ============================================
# School Submissions
# ============================================


async def send_submission_admin_alert(
    to_email: str,
    submitter_name: str,
    submitter_email: str,
    school_name: str,
    address: str,
    level: str,
    submission_reason: str,
    additional_notes: str | None = None,
) -> bool:
    """Alert the admin inbox that a new school was submitted for review."""
    notes = ""
    if additional_notes:
        notes = f"<li><strong>Notes:</strong> {escape(additional_notes)}</li>"

    body = f"""
            <p>A new school has been submitted and is waiting for review.</p>

            <div class="summary-box">
                <p><strong>Submission Summary:</strong></p>
                <ul>
                    <li><strong>School:</strong> {escape(school_name)}</li>
                    <li><strong>Address:</strong> {escape(address)}</li>
                    <li><strong>Level:</strong> {escape(level)}</li>
                    <li><strong>Submitted by:</strong> {escape(submitter_name)} ({escape(submitter_email)})</li>
                    <li><strong>Reason:</strong> {escape(submission_reason)}</li>
                    {notes}
                </ul>
            </div>
    """
    return await send_email(
        to_email=to_email,
        subject=f"New school submission: {school_name}",
        html_content=_render(
            "New School Submission",
            body,
            button_url=f"{settings.site_url}/admin/school-submissions",
            button_label="Review Submissions",
        ),
    )


async def send_submission_confirmation(
    to_email: str,
    user_name: str,
    school_name: str,
) -> bool:
    """Confirm to the submitter that their school is awaiting review."""
    body = f"""
            <p>Hello {escape(user_name)},</p>

            <p>Thank you for submitting <strong>{escape(school_name)}</strong> to {escape(settings.site_name)}.</p>

            <p>Our team will review the details and let you know once a decision has been made. This usually takes one to two working days.</p>
    """
    return await send_email(
        to_email=to_email,
        subject=f"We received your submission for {school_name}",
        html_content=_render("Submission Received", body),
    )


async def send_submission_approved(
    to_email: str,
    user_name: str,
    school_name: str,
    admin_notes: str | None = None,
) -> bool:
    """Tell the submitter their school was added."""
    notes = f"<p><strong>Note from our team:</strong> {escape(admin_notes)}</p>" if admin_notes else ""
    body = f"""
            <p>Hello {escape(user_name)},</p>

            <p>Good news! <strong>{escape(school_name)}</strong> has been approved and is now available on {escape(settings.site_name)}.</p>

            <p>You can select it in your profile and start listing uniforms straight away.</p>
            {notes}
    """
    return await send_email(
        to_email=to_email,
        subject=f"{school_name} has been added",
        html_content=_render(
            "School Approved",
            body,
            button_url=f"{settings.site_url}/marketplace",
            button_label="Go to Marketplace",
        ),
    )


async def send_submission_rejected(
    to_email: str,
    user_name: str,
    school_name: str,
    rejection_reason: str,
) -> bool:
    """Tell the submitter their school was not added, with the reason."""
    body = f"""
            <p>Hello {escape(user_name)},</p>

            <p>Thank you for submitting <strong>{escape(school_name)}</strong>. Unfortunately we were unable to add it at this time.</p>

            <div class="reason-box">
                <p><strong>Reason:</strong></p>
                <p>{escape(rejection_reason)}</p>
            </div>

            <p>If you believe this was a mistake, reply to this email or contact support.</p>
    """
    return await send_email(
        to_email=to_email,
        subject=f"Update on your submission for {school_name}",
        html_content=_render("Submission Not Approved", body),
    )


async def send_submission_duplicate(
    to_email: str,
    user_name: str,
    school_name: str,
    existing_school_name: str,
) -> bool:
    """Tell the submitter the school already exists under another record."""
    body = f"""
            <p>Hello {escape(user_name)},</p>

            <p>Thank you for submitting <strong>{escape(school_name)}</strong>. It turns out this school is already listed as <strong>{escape(existing_school_name)}</strong>.</p>

            <p>You can select the existing school in your profile.</p>
    """
    return await send_email(
        to_email=to_email,
        subject=f"{school_name} is already listed",
        html_content=_render(
            "School Already Listed",
            body,
            button_url=f"{settings.site_url}/profile",
            button_label="Update Profile",
        ),
    )


# ============================================
# School Approval Requests
# ============================================


async def send_approval_request_admin_alert(
    to_email: str,
    user_name: str,
    user_email: str,
    current_schools: list[str],
    requested_schools: list[str],
    reason: str,
) -> bool:
    """Alert the admin inbox that a user wants more schools."""
    current = _school_list(current_schools) if current_schools else "<p>None</p>"
    body = f"""
            <p><strong>{escape(user_name)}</strong> ({escape(user_email)}) has asked to be associated with more schools.</p>

            <div class="summary-box">
                <p><strong>Current schools:</strong></p>
                {current}
                <p><strong>Requested schools:</strong></p>
                {_school_list(requested_schools)}
                <p><strong>Reason:</strong> {escape(reason)}</p>
            </div>
    """
    return await send_email(
        to_email=to_email,
        subject=f"School approval request from {user_name}",
        html_content=_render(
            "New School Approval Request",
            body,
            button_url=f"{settings.site_url}/admin/school-approval-requests",
            button_label="Review Requests",
        ),
    )


async def send_approval_request_confirmation(
    to_email: str,
    user_name: str,
    requested_schools: list[str],
) -> bool:
    """Confirm to the user that their request is awaiting review."""
    body = f"""
            <p>Hello {escape(user_name)},</p>

            <p>We received your request to be associated with the following schools:</p>

            <div class="summary-box">
                {_school_list(requested_schools)}
            </div>

            <p>An administrator will review it shortly and you will receive an email with the outcome.</p>
    """
    return await send_email(
        to_email=to_email,
        subject="We received your school approval request",
        html_content=_render("Request Received", body),
    )


async def send_approval_request_approved(
    to_email: str,
    user_name: str,
    approved_schools: list[str],
    admin_notes: str | None = None,
) -> bool:
    """Tell the requester which schools were added to their profile."""
    notes = f"<p><strong>Note from our team:</strong> {escape(admin_notes)}</p>" if admin_notes else ""
    body = f"""
            <p>Hello {escape(user_name)},</p>

            <p>Your request has been approved. The following schools have been added to your profile:</p>

            <div class="summary-box">
                {_school_list(approved_schools)}
            </div>
            {notes}
    """
    return await send_email(
        to_email=to_email,
        subject="Your school approval request was approved",
        html_content=_render(
            "Request Approved",
            body,
            button_url=f"{settings.site_url}/marketplace",
            button_label="Go to Marketplace",
        ),
    )


async def send_approval_request_denied(
    to_email: str,
    user_name: str,
    denial_reason: str | None = None,
    next_steps: str | None = None,
) -> bool:
    """Tell the requester their request was denied."""
    reason = ""
    if denial_reason:
        reason = f"""
            <div class="reason-box">
                <p><strong>Reason:</strong></p>
                <p>{escape(denial_reason)}</p>
            </div>
        """
    steps = f"<p><strong>Next steps:</strong> {escape(next_steps)}</p>" if next_steps else ""
    body = f"""
            <p>Hello {escape(user_name)},</p>

            <p>Unfortunately your request to be associated with additional schools was not approved.</p>
            {reason}
            {steps}
    """
    return await send_email(
        to_email=to_email,
        subject="Update on your school approval request",
        html_content=_render("Request Not Approved", body),
    )
