"""
Registry of tracker handlers for one tracking server connection.

A transport hands raw samples to deliver(); the connection routes each one
to the handler registered under its session key.
"""

import logging
from typing import Dict, List

from .base.interfaces import SampleCallback, TrackerSource
from .errors import RegistrationError
from .samples import RawSample

logger = logging.getLogger("tracker_connection")


class TrackerConnection(TrackerSource):
    """
    Connection to one tracking server.

    Handlers must unregister before the connection is shut down.
    """

    def __init__(self, host: str):
        """
        Args:
            host: Identifier of the tracking server endpoint
        """
        self.host = host
        self._handlers: Dict[str, SampleCallback] = {}

    def register_handler(self, session_key: str, callback: SampleCallback) -> None:
        """
        Register a sample callback for one tracked body.

        Raises:
            RegistrationError: if the key is empty or already registered
        """
        if not session_key:
            raise RegistrationError("Session key must not be empty")
        if session_key in self._handlers:
            raise RegistrationError(f"Handler already registered for {session_key}")
        self._handlers[session_key] = callback
        logger.info(f"Registered tracker handler: {session_key}")

    def unregister_handler(self, session_key: str) -> bool:
        if session_key in self._handlers:
            del self._handlers[session_key]
            logger.info(f"Unregistered tracker handler: {session_key}")
            return True
        return False

    def deliver(self, session_key: str, sample: RawSample) -> bool:
        """
        Invoke the handler registered for session_key with a sample.

        Returns:
            True if a handler received the sample, False otherwise
        """
        callback = self._handlers.get(session_key)
        if callback is None:
            logger.debug(f"No handler registered for {session_key}, dropping sample")
            return False
        callback(sample)
        return True

    def session_keys(self) -> List[str]:
        return list(self._handlers.keys())

    def __contains__(self, session_key: str) -> bool:
        return session_key in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def shutdown(self) -> None:
        """Drop any handlers that did not unregister."""
        if self._handlers:
            logger.warning(
                f"Shutting down connection to {self.host} with handlers still registered: "
                f"{', '.join(self._handlers)}"
            )
        self._handlers.clear()
