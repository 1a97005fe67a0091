"""
Runtime reconfiguration listener

Receives JSON datagrams such as {"eog_threshold": 35.0, "time_eog": 1.5} and
forwards them to a reconfiguration callback. Either key may be omitted.
"""

import json
import logging
import socket
import threading
from typing import Callable, Optional

from ..core.config import UDP_HOST, RECONFIG_PORT

ReconfigureCallback = Callable[[Optional[float], Optional[float]], None]


class ReconfigureReceiver:
    """Listen for threshold/duration updates on a UDP port"""

    def __init__(self, callback: ReconfigureCallback, host: str = UDP_HOST,
                 port: int = RECONFIG_PORT):
        self.callback = callback
        self.host = host
        self.port = port
        self.socket = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def handle_message(self, payload: bytes) -> bool:
        """
        Decode one datagram and apply it

        Args:
            payload: UTF-8 JSON object

        Returns:
            bool: True if the message was well formed and passed on
        """
        try:
            message = json.loads(payload.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logging.error(f"Invalid reconfiguration message: {e}")
            return False

        if not isinstance(message, dict):
            logging.error(f"Reconfiguration message must be a JSON object: {message!r}")
            return False

        threshold = message.get("eog_threshold")
        duration = message.get("time_eog")
        if threshold is None and duration is None:
            logging.warning(f"Reconfiguration message has no known keys: {sorted(message)}")
            return False

        try:
            threshold = None if threshold is None else float(threshold)
            duration = None if duration is None else float(duration)
        except (TypeError, ValueError) as e:
            logging.error(f"Invalid reconfiguration value: {e}")
            return False

        self.callback(threshold, duration)
        return True

    def start(self) -> bool:
        try:
            self.socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            self.socket.bind((self.host, self.port))
            self.socket.settimeout(0.5)
        except Exception as e:
            logging.error(f"Failed to bind reconfiguration socket {self.host}:{self.port}: {e}")
            return False

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="ReconfigureReceiver", daemon=True)
        self._thread.start()
        logging.info(f"Listening for reconfiguration on {self.host}:{self.port}")
        return True

    def _run(self):
        while not self._stop_event.is_set():
            try:
                data, _ = self.socket.recvfrom(4096)
            except socket.timeout:
                continue
            except OSError as e:
                if not self._stop_event.is_set():
                    logging.error(f"Reconfiguration receive error: {e}")
                break
            self.handle_message(data)

    def stop(self):
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        if self.socket:
            self.socket.close()
            self.socket = None
