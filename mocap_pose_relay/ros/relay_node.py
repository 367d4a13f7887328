#!/usr/bin/env python3
"""
Mocap pose relay node.

Subscribes to raw (NUE axis) PoseStamped topics from a motion-capture driver,
one per tracked body, and republishes each body as <name>_enu / <name>_ned
poses plus /tf transforms <frame> -> <name> and <ned_frame> -> <name>_ned.
"""

from typing import Dict

import rclpy
from geometry_msgs.msg import PoseStamped
from rcl_interfaces.msg import ParameterDescriptor
from rclpy.node import Node
from rclpy.qos import HistoryPolicy, QoSProfile, ReliabilityPolicy

from mocap_pose_relay.errors import ConfigurationError, MocapRelayError
from mocap_pose_relay.naming import parse_tracker_names
from mocap_pose_relay.ros.publishers import RosPoseSink, RosTransformSink
from mocap_pose_relay.samples import RawSample, TrackerHandlerOptions
from mocap_pose_relay.time_manager import TimeManager
from mocap_pose_relay.tracker_connection import TrackerConnection
from mocap_pose_relay.tracker_handler import TrackerHandler


class MocapPoseRelayNode(Node):
    """Creates one TrackerHandler per configured tracker and feeds it raw samples."""

    def __init__(self):
        super().__init__("mocap_pose_relay")

        self.declare_parameter("host", "localhost")
        self.declare_parameter("frame", "world")
        self.declare_parameter("ned_frame", "world_ned")
        self.declare_parameter("trackers", "", ParameterDescriptor(dynamic_typing=True))
        self.declare_parameter("input_topic_template", "/mocap/{name}/pose_raw")
        self.declare_parameter("time_mode", "offset")
        self.declare_parameter("normalize_orientation", False)

        host = self.get_parameter("host").get_parameter_value().string_value
        frame = self.get_parameter("frame").get_parameter_value().string_value
        ned_frame = self.get_parameter("ned_frame").get_parameter_value().string_value
        trackers = parse_tracker_names(self.get_parameter("trackers").value)
        self._input_topic_template = self.get_parameter("input_topic_template").get_parameter_value().string_value
        time_mode = self.get_parameter("time_mode").get_parameter_value().string_value
        normalize = self.get_parameter("normalize_orientation").get_parameter_value().bool_value

        self.options = TrackerHandlerOptions(
            host=host,
            frame=frame,
            ned_frame=ned_frame,
            normalize_orientation=normalize,
        )
        self.connection = TrackerConnection(host)
        self.time_manager = TimeManager(mode=time_mode)
        self.pose_sink = RosPoseSink(self)
        self.transform_sink = RosTransformSink(self)

        self.handlers: Dict[str, TrackerHandler] = {}
        self._input_subscriptions = {}

        input_qos = QoSProfile(
            reliability=ReliabilityPolicy.BEST_EFFORT,
            history=HistoryPolicy.KEEP_LAST,
            depth=1,
        )

        for name in trackers:
            try:
                self.add_tracker(name, input_qos)
            except MocapRelayError as e:
                self.get_logger().error(f"Skipping tracker {name!r}: {e}")

        if not self.handlers:
            self.get_logger().warn("No trackers configured; set the 'trackers' parameter")
        self.get_logger().info(
            f"Mocap pose relay on {host}: {len(self.handlers)} tracker(s), "
            f"frames {frame} / {ned_frame}, time mode {time_mode}"
        )

    def add_tracker(self, name: str, qos: QoSProfile) -> TrackerHandler:
        """Create the handler and input subscription for one tracked body."""
        handler = TrackerHandler(
            name,
            self.options,
            self.connection,
            self.time_manager,
            self.pose_sink,
            self.transform_sink,
        )
        key = handler.identity.session_key
        input_topic = self._input_topic_template
        try:
            input_topic = self._input_topic_template.format(name=handler.identity.topic_name)
            self._input_subscriptions[key] = self.create_subscription(
                PoseStamped,
                input_topic,
                lambda msg, key=key: self._raw_pose_callback(key, msg),
                qos,
            )
        except Exception as e:
            handler.stop()
            self.pose_sink.discard(handler.identity.enu_topic)
            self.pose_sink.discard(handler.identity.ned_topic)
            raise ConfigurationError(
                f"Cannot subscribe to {input_topic!r}: {type(e).__name__}: {e}"
            ) from e
        self.handlers[key] = handler
        self.get_logger().info(f"Tracker {name!r}: {input_topic} -> {handler.identity.enu_topic}, {handler.identity.ned_topic}")
        return handler

    def _raw_pose_callback(self, session_key: str, msg: PoseStamped) -> None:
        """Convert an incoming NUE PoseStamped to a RawSample and deliver it."""
        p = msg.pose.position
        q = msg.pose.orientation
        sample = RawSample(
            position=(p.x, p.y, p.z),
            orientation=(q.x, q.y, q.z, q.w),
            source_time=msg.header.stamp.sec + msg.header.stamp.nanosec * 1e-9,
        )
        try:
            self.connection.deliver(session_key, sample)
        except Exception as e:
            self.get_logger().error(f"Error handling sample for {session_key}: {e}")

    def shutdown(self) -> None:
        """Stop all handlers, then close the connection."""
        for key, handler in list(self.handlers.items()):
            handler.stop()
            subscription = self._input_subscriptions.pop(key, None)
            if subscription is not None:
                self.destroy_subscription(subscription)
        self.handlers.clear()
        self.connection.shutdown()
        self.pose_sink.destroy()


def main(args=None):
    rclpy.init(args=args)

    node = MocapPoseRelayNode()

    try:
        rclpy.spin(node)
    except KeyboardInterrupt:
        pass
    finally:
        node.shutdown()
        node.destroy_node()
        rclpy.shutdown()


if __name__ == "__main__":
    main()
