"""
Axis and quaternion conversions from the tracker's NUE frame to ENU and NED.

Quaternions are numpy arrays ordered (x, y, z, w), matching
geometry_msgs/Quaternion. Rotations built from roll/pitch/yaw follow the ROS
setRPY convention: fixed-axis roll about X, then pitch about Y, then yaw
about Z.
"""

import math
from typing import Sequence

import numpy as np


def quaternion_from_rpy(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Build a unit quaternion (x, y, z, w) from fixed-axis roll, pitch, yaw."""
    half_roll = roll * 0.5
    half_pitch = pitch * 0.5
    half_yaw = yaw * 0.5

    cos_roll = math.cos(half_roll)
    sin_roll = math.sin(half_roll)
    cos_pitch = math.cos(half_pitch)
    sin_pitch = math.sin(half_pitch)
    cos_yaw = math.cos(half_yaw)
    sin_yaw = math.sin(half_yaw)

    return np.array([
        sin_roll * cos_pitch * cos_yaw - cos_roll * sin_pitch * sin_yaw,
        cos_roll * sin_pitch * cos_yaw + sin_roll * cos_pitch * sin_yaw,
        cos_roll * cos_pitch * sin_yaw - sin_roll * sin_pitch * cos_yaw,
        cos_roll * cos_pitch * cos_yaw + sin_roll * sin_pitch * sin_yaw,
    ])


def quaternion_inverse(q: Sequence[float]) -> np.ndarray:
    """Conjugate of q; the inverse for unit quaternions."""
    x, y, z, w = q
    return np.array([-x, -y, -z, w], dtype=float)


def quaternion_multiply(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    """Hamilton product a * b."""
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return np.array([
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
        aw * bw - ax * bx - ay * by - az * bz,
    ])


def quaternion_normalize(q: Sequence[float]) -> np.ndarray:
    """Return q scaled to unit norm. A zero quaternion is returned unchanged."""
    q = np.asarray(q, dtype=float)
    norm = np.linalg.norm(q)
    if norm == 0.0:
        return q
    return q / norm


# Fixed frame rotations, computed once for the NUE tracker convention.
NUE_TO_ENU = quaternion_from_rpy(0.0, -math.pi / 2.0, -math.pi / 2.0)
NUE_TO_NED = quaternion_from_rpy(-math.pi / 2.0, 0.0, 0.0)
NUE_TO_ENU.setflags(write=False)
NUE_TO_NED.setflags(write=False)

_ENU_FROM_NUE = quaternion_inverse(NUE_TO_ENU)
_NED_FROM_NUE = quaternion_inverse(NUE_TO_NED)


def nue_to_enu_position(position: Sequence[float]) -> np.ndarray:
    # East <- forward (Z), North <- right (X), Up <- up (Y)
    x, y, z = position
    return np.array([z, x, y], dtype=float)


def nue_to_ned_position(position: Sequence[float]) -> np.ndarray:
    # North <- right (X), East <- forward (Z), Down <- -up (Y)
    x, y, z = position
    return np.array([x, z, -y], dtype=float)


def nue_to_enu_orientation(orientation: Sequence[float]) -> np.ndarray:
    """Re-express a NUE body orientation in the ENU reference frame."""
    return quaternion_multiply(_ENU_FROM_NUE, orientation)


def nue_to_ned_orientation(orientation: Sequence[float]) -> np.ndarray:
    """Re-express a NUE body orientation in the NED reference frame."""
    return quaternion_multiply(_NED_FROM_NUE, orientation)
