"""
Roster mail module.

Outbound mail queue and HTML templates for invitation emails.
"""

from .models import MailMessage
from .queue import AsyncMailQueue, HttpMailSender, LoggingMailSender, MailQueue, MailSender
from .templates import TemplateRenderer

__all__ = [
    "MailMessage",
    "MailQueue",
    "MailSender",
    "AsyncMailQueue",
    "HttpMailSender",
    "LoggingMailSender",
    "TemplateRenderer",
]
