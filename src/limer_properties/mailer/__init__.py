"""Outgoing email delivery."""

from limer_properties.mailer.resend import ResendEmailSender, render_inquiry_html

__all__ = ["ResendEmailSender", "render_inquiry_html"]
