"""
Navigation click telemetry.

Click tracking is fire-and-forget: the caller gets no return value and a
failing sink never breaks navigation. Sinks are passed in, so the
filtering code stays free of side effects.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import requests

logger = logging.getLogger(__name__)


@dataclass
class NavClickEvent:
    """One click on a sidebar item."""
    node_id: str
    path: Optional[str] = None
    locale: Optional[str] = None
    role: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class NavEventSink:
    """Destination for click events."""

    def emit(self, event: NavClickEvent):
        raise NotImplementedError


class NullSink(NavEventSink):
    def emit(self, event: NavClickEvent):
        pass


class LoggingSink(NavEventSink):
    """Writes click events to the log."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def emit(self, event: NavClickEvent):
        self.log.info('[Nav] Item clicked: id=%s path=%s locale=%s role=%s at %s',
                      event.node_id, event.path, event.locale, event.role, event.timestamp)


class CallbackSink(NavEventSink):
    """Hands each event to a callable (e.g. an analytics client)."""

    def __init__(self, callback: Callable[[NavClickEvent], Any]):
        self.callback = callback

    def emit(self, event: NavClickEvent):
        self.callback(event)


class HttpSink(NavEventSink):
    """
    Posts click events as JSON to a telemetry endpoint.

    The POST is synchronous: a click request waits up to `timeout` seconds
    for the endpoint. Keep the timeout short, or use the logging sink and ship
    logs when the endpoint may be slow.
    """

    def __init__(self, url: str, timeout: float = 5):
        self.url = url
        self.timeout = timeout

    def emit(self, event: NavClickEvent):
        response = requests.post(self.url, json=event.to_dict(), timeout=self.timeout)
        response.raise_for_status()


def get_sink(config: Optional[Dict[str, Any]] = None) -> NavEventSink:
    """
    Build the sink named in the telemetry section of the config.

    Args:
        config: Full navigation config (see config_manager.DEFAULT_CONFIG)

    Returns:
        Configured NavEventSink; LoggingSink when nothing is configured
    """
    telemetry = (config or {}).get('telemetry') or {}
    sink = telemetry.get('sink', 'logging')
    if sink == 'http' and telemetry.get('url'):
        return HttpSink(telemetry['url'], telemetry.get('timeout', 5))
    if sink == 'null':
        return NullSink()
    return LoggingSink()


def track_nav_click(sink: Optional[NavEventSink], node_id: str, path: Optional[str] = None,
                    locale: Optional[str] = None, role: Optional[str] = None) -> None:
    """
    Emit a click event for a navigation item.

    Errors raised by the sink are logged and dropped.
    """
    if sink is None:
        return
    event = NavClickEvent(node_id=node_id, path=path, locale=locale, role=role)
    try:
        sink.emit(event)
    except requests.exceptions.RequestException as e:
        logger.warning('Telemetry request for nav click %s failed: %s', node_id, e)
    except Exception as e:
        logger.warning('Nav click sink %s failed for %s: %s', type(sink).__name__, node_id, e)
