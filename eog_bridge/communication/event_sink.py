"""
Artifact event output

This module defines the sink interface the pipeline emits artifact events to,
and a UDP implementation that publishes them as JSON messages.
"""

import json
import logging
import socket
from abc import ABC, abstractmethod

from ..core.data_types import ArtifactEvent
from ..core.config import UDP_HOST, UDP_PORT


class EventSink(ABC):
    """Receiver of artifact onset/offset events"""

    @abstractmethod
    def emit(self, event: ArtifactEvent) -> bool:
        """Deliver one event, returning True on success"""

    def close(self):
        pass


class LoggingEventSink(EventSink):
    """Write events to the log"""

    def emit(self, event: ArtifactEvent) -> bool:
        kind = "finished" if event.is_offset else "detected"
        logging.info(f"EOG {kind} at {event.timestamp:.3f} (event 0x{event.code:04x})")
        return True


class UDPEventSink(EventSink):
    """
    Send artifact events via UDP JSON messages

    Each event becomes one datagram: {"t": timestamp, "event": code,
    "type": "on" | "off"}.
    """

    def __init__(self, host: str = UDP_HOST, port: int = UDP_PORT):
        self.host = host
        self.port = port
        self.socket = None
        self._setup_socket()

    def _setup_socket(self):
        """Setup UDP socket for communication"""
        try:
            self.socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            logging.info(f"UDP event sink initialized: {self.host}:{self.port}")
        except Exception as e:
            logging.error(f"Failed to setup UDP socket: {e}")

    @staticmethod
    def encode(event: ArtifactEvent) -> bytes:
        message = {
            "t": event.timestamp,
            "event": event.code,
            "type": "off" if event.is_offset else "on",
        }
        return json.dumps(message).encode('utf-8')

    def emit(self, event: ArtifactEvent) -> bool:
        if self.socket is None:
            return False

        try:
            self.socket.sendto(self.encode(event), (self.host, self.port))
            return True
        except Exception as e:
            logging.error(f"Failed to send UDP message: {e}")
            return False

    def close(self):
        """Close UDP socket"""
        if self.socket:
            self.socket.close()
            self.socket = None
