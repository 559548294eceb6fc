"""Downstream approval service integration."""

from timeoff.approval.notifier import ApprovalNotifier
from timeoff.approval.profiles import SlackProfileDirectory, StaticProfileDirectory

__all__ = ["ApprovalNotifier", "SlackProfileDirectory", "StaticProfileDirectory"]
