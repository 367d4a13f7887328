"""
ROS 2 sinks for converted tracker poses.

RosPoseSink publishes geometry_msgs/PoseStamped per topic and RosTransformSink
broadcasts geometry_msgs/TransformStamped on /tf.
"""

from typing import Dict

from geometry_msgs.msg import PoseStamped, TransformStamped
from rclpy.node import Node
from rclpy.time import Time
from tf2_ros import TransformBroadcaster

from mocap_pose_relay.base.interfaces import PoseSink, TransformSink
from mocap_pose_relay.samples import PoseSample, Quaternion, Vector3


def stamp_to_msg(timestamp: float):
    """Convert float seconds to a builtin_interfaces/Time message."""
    return Time(nanoseconds=int(round(timestamp * 1e9))).to_msg()


def pose_to_msg(pose: PoseSample) -> PoseStamped:
    msg = PoseStamped()
    msg.header.stamp = stamp_to_msg(pose.timestamp)
    msg.header.frame_id = pose.frame_id
    msg.pose.position.x, msg.pose.position.y, msg.pose.position.z = pose.position
    (
        msg.pose.orientation.x,
        msg.pose.orientation.y,
        msg.pose.orientation.z,
        msg.pose.orientation.w,
    ) = pose.orientation
    return msg


class RosPoseSink(PoseSink):
    """Publishes PoseSamples on per-topic PoseStamped publishers."""

    def __init__(self, node: Node, queue_depth: int = 1):
        """
        Args:
            node: ROS2 node used to create publishers
            queue_depth: History depth of each publisher
        """
        self.node = node
        self.queue_depth = queue_depth
        self._publishers: Dict[str, object] = {}

    def advertise(self, topic_name: str) -> None:
        """Create the publisher for a topic if it does not exist yet."""
        if topic_name not in self._publishers:
            self._publishers[topic_name] = self.node.create_publisher(
                PoseStamped, topic_name, self.queue_depth
            )
            self.node.get_logger().info(f"Advertised pose topic: {topic_name}")

    def publish(self, topic_name: str, pose: PoseSample) -> None:
        self.advertise(topic_name)
        self._publishers[topic_name].publish(pose_to_msg(pose))

    def discard(self, topic_name: str) -> None:
        """Destroy the publisher for a topic if one was created."""
        publisher = self._publishers.pop(topic_name, None)
        if publisher is not None:
            self.node.destroy_publisher(publisher)

    def destroy(self) -> None:
        for publisher in self._publishers.values():
            self.node.destroy_publisher(publisher)
        self._publishers.clear()


class RosTransformSink(TransformSink):
    """Broadcasts transforms through tf2_ros."""

    def __init__(self, node: Node):
        self.node = node
        self.broadcaster = TransformBroadcaster(node)

    def broadcast(
        self,
        parent_frame: str,
        child_frame: str,
        timestamp: float,
        translation: Vector3,
        rotation: Quaternion,
    ) -> None:
        t = TransformStamped()
        t.header.stamp = stamp_to_msg(timestamp)
        t.header.frame_id = parent_frame
        t.child_frame_id = child_frame
        t.transform.translation.x, t.transform.translation.y, t.transform.translation.z = translation
        (
            t.transform.rotation.x,
            t.transform.rotation.y,
            t.transform.rotation.z,
            t.transform.rotation.w,
        ) = rotation
        self.broadcaster.sendTransform(t)
