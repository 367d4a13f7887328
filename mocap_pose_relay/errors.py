"""Exceptions raised while setting up mocap pose relaying."""


class MocapRelayError(Exception):
    """Base class for all mocap_pose_relay errors."""


class ConfigurationError(MocapRelayError):
    """Raised when a handler or time manager is configured with unusable values."""


class RegistrationError(MocapRelayError):
    """Raised when a handler cannot be registered with a tracker connection."""
