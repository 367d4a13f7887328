"""
Sample types flowing through the relay.

Raw samples arrive in the tracking system's NUE axes (X=right, Y=up,
Z=forward). Pose and transform samples are the ENU/NED representations
emitted to downstream sinks. All of them are immutable.
"""

from dataclasses import dataclass
from typing import Any, Tuple

Vector3 = Tuple[float, float, float]
Quaternion = Tuple[float, float, float, float]  # (x, y, z, w)


@dataclass(frozen=True)
class RawSample:
    """One tracker update in native NUE axes."""
    position: Vector3
    orientation: Quaternion
    source_time: Any


@dataclass(frozen=True)
class PoseSample:
    """A pose expressed in the ENU or NED convention."""
    timestamp: Any
    frame_id: str
    position: Vector3
    orientation: Quaternion


@dataclass(frozen=True)
class TransformSample:
    """Parent to child rigid transform carrying the same geometry as a PoseSample."""
    timestamp: Any
    parent_frame: str
    child_frame: str
    translation: Vector3
    rotation: Quaternion

    @classmethod
    def from_pose(cls, pose: PoseSample, child_frame: str) -> "TransformSample":
        return cls(
            timestamp=pose.timestamp,
            parent_frame=pose.frame_id,
            child_frame=child_frame,
            translation=pose.position,
            rotation=pose.orientation,
        )


@dataclass(frozen=True)
class TrackerHandlerOptions:
    """
    Per-handler configuration.

    Attributes:
        host: Identifier of the tracking server the samples come from
        frame: Parent frame id for ENU output
        ned_frame: Parent frame id for NED output
        normalize_orientation: Renormalize incoming body quaternions before
            the frame change instead of passing them through unchanged
    """
    host: str
    frame: str = "world"
    ned_frame: str = "world_ned"
    normalize_orientation: bool = False


@dataclass(frozen=True)
class HandlerIdentity:
    """Names derived once from a tracked body's raw name."""
    name: str
    topic_name: str
    enu_topic: str
    ned_topic: str
    child_frame: str
    child_frame_ned: str
    session_key: str
