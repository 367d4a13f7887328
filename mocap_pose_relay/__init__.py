"""
Motion-capture pose relay.

Republishes rigid-body poses reported in the tracker's NUE axes as ENU and
NED poses plus transform broadcasts. The ROS 2 node lives in
mocap_pose_relay.ros; nothing imported here depends on rclpy.
"""

from .errors import ConfigurationError, MocapRelayError, RegistrationError
from .frames import NUE_TO_ENU, NUE_TO_NED
from .naming import build_identity, sanitize_name
from .samples import HandlerIdentity, PoseSample, RawSample, TrackerHandlerOptions, TransformSample
from .time_manager import TimeManager
from .tracker_connection import TrackerConnection
from .tracker_handler import TrackerHandler

__all__ = [
    "ConfigurationError",
    "MocapRelayError",
    "RegistrationError",
    "NUE_TO_ENU",
    "NUE_TO_NED",
    "build_identity",
    "sanitize_name",
    "HandlerIdentity",
    "PoseSample",
    "RawSample",
    "TrackerHandlerOptions",
    "TransformSample",
    "TimeManager",
    "TrackerConnection",
    "TrackerHandler",
]
