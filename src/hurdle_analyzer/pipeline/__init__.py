"""Analysis pipeline orchestration."""

from hurdle_analyzer.pipeline.analyzer import HurdleAnalyzer, ModelStatus
from hurdle_analyzer.pipeline.guard import SerializedPoseModel
from hurdle_analyzer.pipeline.sampler import FrameSampler

__all__ = ["HurdleAnalyzer", "ModelStatus", "FrameSampler", "SerializedPoseModel"]
