"""
Per-body tracker handler.

Converts each raw NUE sample from the tracking server into ENU and NED poses
and emits, in order: ENU pose, ENU transform, NED pose, NED transform.
"""

import logging
from typing import Callable

import numpy as np

from . import frames
from .base.interfaces import PoseSink, TimestampResolver, TrackerSource, TransformSink
from .errors import ConfigurationError
from .naming import build_identity
from .samples import PoseSample, RawSample, TrackerHandlerOptions, TransformSample

logger = logging.getLogger("tracker_handler")


def _as_tuple(values: np.ndarray) -> tuple:
    return tuple(float(v) for v in values)


class TrackerHandler:
    """
    Republishes one tracked rigid body in ENU and NED.

    The handler registers its position callback with the connection on
    construction and must be stopped before the connection is shut down.
    """

    def __init__(
        self,
        name: str,
        options: TrackerHandlerOptions,
        connection: TrackerSource,
        time_manager: TimestampResolver,
        pose_sink: PoseSink,
        transform_sink: TransformSink,
    ):
        """
        Args:
            name: Tracker name as configured on the tracking server
            options: Host and parent frame configuration
            connection: Source the handler registers with
            time_manager: Resolves sample timestamps
            pose_sink: Receives ENU and NED poses
            transform_sink: Receives ENU and NED transforms

        Raises:
            ConfigurationError: if the name, parent frames or output topics are unusable
            RegistrationError: if the connection refuses the handler
        """
        if not options.frame or not options.ned_frame:
            raise ConfigurationError(f"Tracker {name!r} needs both an ENU and a NED parent frame")

        self.options = options
        self.identity = build_identity(name, options.host)
        self._connection = connection
        self._time_manager = time_manager
        self._pose_sink = pose_sink
        self._transform_sink = transform_sink
        self._registered = False

        self.samples_handled = 0
        self.sink_failures = 0
        self._zero_norm_warned = False

        connection.register_handler(self.identity.session_key, self.position_callback)
        self._registered = True

        try:
            pose_sink.advertise(self.identity.enu_topic)
            pose_sink.advertise(self.identity.ned_topic)
        except Exception as e:
            self.stop()
            pose_sink.discard(self.identity.enu_topic)
            pose_sink.discard(self.identity.ned_topic)
            raise ConfigurationError(
                f"Cannot advertise topics for tracker {name!r}: {type(e).__name__}: {e}"
            ) from e

        logger.info(
            f"Tracking {self.identity.session_key}: {self.identity.enu_topic} ({options.frame}), "
            f"{self.identity.ned_topic} ({options.ned_frame})"
        )

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def is_registered(self) -> bool:
        return self._registered

    def position_callback(self, sample: RawSample) -> None:
        """Convert one raw sample and emit it to the sinks."""
        stamp = self._time_manager.resolve_timestamp(sample.source_time)

        nue_to_body = np.asarray(sample.orientation, dtype=float)
        if self.options.normalize_orientation:
            if not np.any(nue_to_body) and not self._zero_norm_warned:
                # Warn once per handler
                logger.warning(f"Zero-norm orientation from {self.identity.session_key}, passing through")
                self._zero_norm_warned = True
            nue_to_body = frames.quaternion_normalize(nue_to_body)

        enu_pose = PoseSample(
            timestamp=stamp,
            frame_id=self.options.frame,
            position=_as_tuple(frames.nue_to_enu_position(sample.position)),
            orientation=_as_tuple(frames.nue_to_enu_orientation(nue_to_body)),
        )
        self._publish(self.identity.enu_topic, enu_pose)
        self._send_transform(enu_pose, self.identity.child_frame)

        ned_pose = PoseSample(
            timestamp=stamp,
            frame_id=self.options.ned_frame,
            position=_as_tuple(frames.nue_to_ned_position(sample.position)),
            orientation=_as_tuple(frames.nue_to_ned_orientation(nue_to_body)),
        )
        self._publish(self.identity.ned_topic, ned_pose)
        self._send_transform(ned_pose, self.identity.child_frame_ned)

        self.samples_handled += 1

    def _publish(self, topic_name: str, pose: PoseSample) -> None:
        self._emit(lambda: self._pose_sink.publish(topic_name, pose), f"pose on {topic_name}")

    def _send_transform(self, pose: PoseSample, child_frame: str) -> None:
        tf = TransformSample.from_pose(pose, child_frame)
        self._emit(
            lambda: self._transform_sink.broadcast(
                tf.parent_frame, tf.child_frame, tf.timestamp, tf.translation, tf.rotation
            ),
            f"transform {tf.parent_frame} -> {tf.child_frame}",
        )

    def _emit(self, send: Callable[[], None], what: str) -> None:
        # A failing sink must not stop the remaining emissions or reach the source.
        try:
            send()
        except Exception as e:
            self.sink_failures += 1
            logger.error(f"Error sending {what} for {self.identity.session_key}: {type(e).__name__}: {e}")

    def stop(self) -> None:
        """Unregister from the connection. Safe to call more than once."""
        if not self._registered:
            return
        self._connection.unregister_handler(self.identity.session_key)
        self._registered = False
        logger.info(f"Stopped tracking {self.identity.session_key}")
