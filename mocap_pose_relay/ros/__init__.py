"""
ROS 2 adapters for the mocap pose relay.

Importing this package requires rclpy, tf2_ros and geometry_msgs.
"""

from .publishers import RosPoseSink, RosTransformSink

__all__ = ["RosPoseSink", "RosTransformSink"]
