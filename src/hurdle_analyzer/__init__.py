"""Hurdle clearance analysis from video pose estimation."""

__version__ = "0.1.0"
