"""
Abstract interfaces for the collaborators of a tracker handler.

Sinks and timestamp resolvers are injected into TrackerHandler so the frame
conversion can run with ROS 2 publishers, test doubles, or any other
transport that implements these methods.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable

from ..samples import PoseSample, Quaternion, RawSample, Vector3

SampleCallback = Callable[[RawSample], None]


class PoseSink(ABC):
    """Destination for converted poses, keyed by topic name."""

    @abstractmethod
    def publish(self, topic_name: str, pose: PoseSample) -> None:
        """
        Publish a pose on a topic.

        Args:
            topic_name: Topic to publish on (already sanitized)
            pose: Pose in the ENU or NED convention
        """
        pass

    def advertise(self, topic_name: str) -> None:
        """
        Prepare a topic before the first publish.

        Sinks that validate or create per-topic resources override this and
        raise if the topic cannot be used.
        """
        pass

    def discard(self, topic_name: str) -> None:
        """Release whatever advertise() created for a topic."""
        pass


class TransformSink(ABC):
    """Destination for parent to child transform broadcasts."""

    @abstractmethod
    def broadcast(
        self,
        parent_frame: str,
        child_frame: str,
        timestamp: Any,
        translation: Vector3,
        rotation: Quaternion,
    ) -> None:
        """
        Broadcast a rigid transform.

        Args:
            parent_frame: Frame the transform is expressed in
            child_frame: Frame of the tracked body
            timestamp: Resolved sample timestamp
            translation: (x, y, z) of the child in the parent frame
            rotation: (x, y, z, w) orientation of the child in the parent frame
        """
        pass


class TimestampResolver(ABC):
    """Turns a tracker-local time value into a system timestamp."""

    @abstractmethod
    def resolve_timestamp(self, source_time: Any) -> Any:
        """
        Resolve a source-local time.

        Returned values must be non-decreasing for increasing source times
        from the same stream.
        """
        pass


class TrackerSource(ABC):
    """Upstream source that invokes registered callbacks with raw samples."""

    @abstractmethod
    def register_handler(self, session_key: str, callback: SampleCallback) -> None:
        """Register a callback for one tracked body."""
        pass

    @abstractmethod
    def unregister_handler(self, session_key: str) -> bool:
        """Remove a callback. Returns True if one was registered."""
        pass
