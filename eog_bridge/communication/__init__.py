"""
Communication: artifact event sinks and runtime reconfiguration
"""

from .event_sink import EventSink, LoggingEventSink, UDPEventSink
from .reconfigure_receiver import ReconfigureReceiver

__all__ = ['EventSink', 'LoggingEventSink', 'UDPEventSink', 'ReconfigureReceiver']
