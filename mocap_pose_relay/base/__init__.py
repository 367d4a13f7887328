from .interfaces import PoseSink, SampleCallback, TimestampResolver, TrackerSource, TransformSink

__all__ = ["PoseSink", "TransformSink", "TimestampResolver", "TrackerSource", "SampleCallback"]
