"""Outbound notification reporters."""

from notify.base import NotificationError, Reporter
from notify.jira import JiraReporter
from notify.slack import SlackReporter

__all__ = ["JiraReporter", "NotificationError", "Reporter", "SlackReporter"]
