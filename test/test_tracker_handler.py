"""
Unit tests for TrackerHandler.

These tests verify ENU/NED conversion of raw samples, the fixed emission
order, sink failure isolation and registration with the connection.
"""

import logging
import math
from unittest.mock import Mock

import numpy as np
import pytest

from mocap_pose_relay.base.interfaces import PoseSink, TransformSink
from mocap_pose_relay.errors import ConfigurationError, RegistrationError
from mocap_pose_relay.samples import PoseSample, RawSample, TrackerHandlerOptions
from mocap_pose_relay.tracker_connection import TrackerConnection
from mocap_pose_relay.tracker_handler import TrackerHandler

HALF_SQRT2 = math.sqrt(0.5)
IDENTITY = (0.0, 0.0, 0.0, 1.0)


class RecordingPoseSink(PoseSink):
    def __init__(self, events):
        self.events = events

    def publish(self, topic_name, pose):
        self.events.append(("pose", topic_name, pose))


class RecordingTransformSink(TransformSink):
    def __init__(self, events):
        self.events = events

    def broadcast(self, parent_frame, child_frame, timestamp, translation, rotation):
        self.events.append(("tf", parent_frame, child_frame, timestamp, translation, rotation))


class FailingPoseSink(PoseSink):
    def publish(self, topic_name, pose):
        raise RuntimeError("publisher gone")


class AdvertiseFailingPoseSink(RecordingPoseSink):
    def __init__(self, events, bad_topic):
        super().__init__(events)
        self.bad_topic = bad_topic
        self.advertised = []

    def advertise(self, topic_name):
        if topic_name == self.bad_topic:
            raise ValueError(f"invalid topic name: {topic_name}")
        self.advertised.append(topic_name)

    def discard(self, topic_name):
        if topic_name in self.advertised:
            self.advertised.remove(topic_name)


class TestTrackerHandler:
    """Test suite for the ENU/NED frame converter and dispatcher."""

    def setup_method(self):
        self.events = []
        self.connection = TrackerConnection("opti1")
        self.time_manager = Mock()
        self.time_manager.resolve_timestamp.return_value = 100.25
        self.options = TrackerHandlerOptions(host="opti1", frame="world", ned_frame="world_ned")

    def _make_handler(self, name="Rigid Body", options=None, pose_sink=None, transform_sink=None):
        return TrackerHandler(
            name,
            options or self.options,
            self.connection,
            self.time_manager,
            pose_sink or RecordingPoseSink(self.events),
            transform_sink or RecordingTransformSink(self.events),
        )

    def _deliver(self, handler, position=(0.0, 1.0, 0.0), orientation=IDENTITY, source_time=1.5):
        sample = RawSample(position=position, orientation=orientation, source_time=source_time)
        assert self.connection.deliver(handler.identity.session_key, sample)

    def test_end_to_end_rigid_body(self):
        handler = self._make_handler()
        self._deliver(handler)

        self.time_manager.resolve_timestamp.assert_called_once_with(1.5)
        assert [e[0] for e in self.events] == ["pose", "tf", "pose", "tf"]

        _, enu_topic, enu_pose = self.events[0]
        assert enu_topic == "Rigid_Body_enu"
        assert enu_pose.frame_id == "world"
        assert enu_pose.timestamp == 100.25
        assert enu_pose.position == pytest.approx((0.0, 0.0, 1.0))

        _, ned_topic, ned_pose = self.events[2]
        assert ned_topic == "Rigid_Body_ned"
        assert ned_pose.frame_id == "world_ned"
        assert ned_pose.timestamp == 100.25
        # Up in NUE is negative Down
        assert ned_pose.position == pytest.approx((0.0, 0.0, -1.0))

    def test_transforms_mirror_poses(self):
        handler = self._make_handler()
        self._deliver(handler, position=(1.0, 2.0, 3.0))

        _, _, enu_pose = self.events[0]
        _, parent, child, stamp, translation, rotation = self.events[1]
        assert (parent, child, stamp) == ("world", "Rigid Body", 100.25)
        assert translation == enu_pose.position
        assert rotation == enu_pose.orientation

        _, _, ned_pose = self.events[2]
        _, parent, child, stamp, translation, rotation = self.events[3]
        assert (parent, child, stamp) == ("world_ned", "Rigid Body_ned", 100.25)
        assert translation == ned_pose.position
        assert rotation == ned_pose.orientation

    def test_axis_permutation(self):
        handler = self._make_handler()
        self._deliver(handler, position=(1.0, 2.0, 3.0))

        assert self.events[0][2].position == pytest.approx((3.0, 1.0, 2.0))
        assert self.events[2][2].position == pytest.approx((1.0, 3.0, -2.0))

    def test_identity_orientation(self):
        handler = self._make_handler()
        self._deliver(handler)

        assert self.events[0][2].orientation == pytest.approx((0.5, 0.5, 0.5, 0.5))
        assert self.events[2][2].orientation == pytest.approx((HALF_SQRT2, 0.0, 0.0, HALF_SQRT2))

    def test_outputs_are_plain_floats(self):
        handler = self._make_handler()
        self._deliver(handler, position=(1.0, 2.0, 3.0))

        pose = self.events[0][2]
        assert isinstance(pose, PoseSample)
        assert all(type(v) is float for v in pose.position + pose.orientation)

    def test_deterministic_output(self):
        handler = self._make_handler()
        orientation = (0.1, -0.3, 0.2, math.sqrt(1.0 - 0.14))
        self._deliver(handler, position=(0.4, -1.1, 2.2), orientation=orientation)
        first = list(self.events)
        self.events.clear()
        self._deliver(handler, position=(0.4, -1.1, 2.2), orientation=orientation)

        assert self.events == first
        assert handler.samples_handled == 2

    def test_non_unit_orientation_passes_through(self):
        handler = self._make_handler()
        self._deliver(handler, orientation=(0.0, 0.0, 0.0, 2.0))

        assert np.linalg.norm(self.events[0][2].orientation) == pytest.approx(2.0)

    def test_normalize_orientation_option(self):
        options = TrackerHandlerOptions(
            host="opti1", frame="world", ned_frame="world_ned", normalize_orientation=True
        )
        handler = self._make_handler(options=options)
        self._deliver(handler, orientation=(0.0, 0.0, 0.0, 2.0))

        assert self.events[0][2].orientation == pytest.approx((0.5, 0.5, 0.5, 0.5))
        assert np.linalg.norm(self.events[2][2].orientation) == pytest.approx(1.0, abs=1e-9)

    def test_failing_pose_sink_does_not_block_transforms(self):
        handler = self._make_handler(pose_sink=FailingPoseSink())
        self._deliver(handler)

        assert [(e[0], e[2]) for e in self.events] == [("tf", "Rigid Body"), ("tf", "Rigid Body_ned")]
        assert handler.sink_failures == 2
        assert handler.samples_handled == 1

    def test_failing_transform_sink_does_not_block_poses(self):
        transform_sink = Mock(spec=TransformSink)
        transform_sink.broadcast.side_effect = OSError("socket closed")
        handler = self._make_handler(transform_sink=transform_sink)
        self._deliver(handler)

        assert [e[1] for e in self.events] == ["Rigid_Body_enu", "Rigid_Body_ned"]
        assert transform_sink.broadcast.call_count == 2
        assert handler.sink_failures == 2

    def test_registers_under_name_and_host(self):
        handler = self._make_handler()
        assert handler.is_registered
        assert "Rigid Body@opti1" in self.connection

    def test_duplicate_handler_rejected(self):
        self._make_handler()
        with pytest.raises(RegistrationError):
            self._make_handler()

    def test_same_name_on_other_host_allowed(self):
        self._make_handler()
        other = self._make_handler(options=TrackerHandlerOptions(host="opti2"))
        assert other.identity.session_key == "Rigid Body@opti2"
        assert len(self.connection) == 2

    def test_empty_topic_name_rejected(self):
        with pytest.raises(ConfigurationError):
            self._make_handler(name="???")
        assert len(self.connection) == 0

    def test_empty_parent_frame_rejected(self):
        with pytest.raises(ConfigurationError):
            self._make_handler(options=TrackerHandlerOptions(host="opti1", frame=""))
        assert len(self.connection) == 0

    def test_stop_unregisters(self):
        handler = self._make_handler()
        handler.stop()
        handler.stop()

        assert not handler.is_registered
        assert len(self.connection) == 0
        sample = RawSample(position=(0.0, 0.0, 0.0), orientation=IDENTITY, source_time=0.0)
        assert self.connection.deliver("Rigid Body@opti1", sample) is False
        assert self.events == []

    def test_handlers_do_not_interfere(self):
        first = self._make_handler(name="alpha")
        second = self._make_handler(name="beta")

        self._deliver(second, position=(1.0, 2.0, 3.0))
        self._deliver(first, position=(1.0, 2.0, 3.0))

        topics = [e[1] for e in self.events if e[0] == "pose"]
        assert topics == ["beta_enu", "beta_ned", "alpha_enu", "alpha_ned"]
        assert self.events[0][2] == self.events[4][2]

    def test_advertises_both_topics_on_construction(self):
        pose_sink = AdvertiseFailingPoseSink(self.events, bad_topic=None)
        self._make_handler(pose_sink=pose_sink)
        assert pose_sink.advertised == ["Rigid_Body_enu", "Rigid_Body_ned"]

    def test_unusable_topic_rolls_back_registration(self):
        pose_sink = AdvertiseFailingPoseSink(self.events, bad_topic="1_ned")
        with pytest.raises(ConfigurationError):
            self._make_handler(name="1", pose_sink=pose_sink)

        assert len(self.connection) == 0
        assert pose_sink.advertised == []
        # Other trackers can still be served on the same connection
        handler = self._make_handler(name="alpha", pose_sink=pose_sink)
        assert handler.is_registered
        assert self.connection.session_keys() == ["alpha@opti1"]
        assert pose_sink.advertised == ["alpha_enu", "alpha_ned"]

    def test_zero_norm_orientation_with_normalize_passes_through(self, caplog):
        options = TrackerHandlerOptions(
            host="opti1", frame="world", ned_frame="world_ned", normalize_orientation=True
        )
        handler = self._make_handler(options=options)

        with caplog.at_level(logging.WARNING, logger="tracker_handler"):
            for _ in range(3):
                self._deliver(handler, orientation=(0.0, 0.0, 0.0, 0.0))

        assert self.events[0][2].orientation == pytest.approx((0.0, 0.0, 0.0, 0.0))
        assert self.events[2][2].orientation == pytest.approx((0.0, 0.0, 0.0, 0.0))
        assert handler.samples_handled == 3
        warnings = [r for r in caplog.records if "Zero-norm" in r.getMessage()]
        assert len(warnings) == 1
