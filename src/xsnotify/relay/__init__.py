"""
Relay core for XS Notify.

Captures notifications from a NotificationSource, filters them and assigns a
display duration, then hands them to an OverlaySink through a RelayQueue,
with both sides supervised and restarted independently.
"""

from xsnotify.relay.config import NotificationStrategy, NotifierConfig
from xsnotify.relay.events import DisplayDirective, NotificationEvent
from xsnotify.relay.queue import DropPolicy, RelayQueue
from xsnotify.relay.sink import OverlaySink
from xsnotify.relay.source import NotificationSource
from xsnotify.relay.supervisor import RelaySupervisor
from xsnotify.relay.timeout import evaluate

__all__ = [
    "DisplayDirective",
    "DropPolicy",
    "NotificationEvent",
    "NotificationSource",
    "NotificationStrategy",
    "NotifierConfig",
    "OverlaySink",
    "RelayQueue",
    "RelaySupervisor",
    "evaluate",
]
