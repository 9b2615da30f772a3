"""Normalization of nested payloads against generated schemas."""

from .normalize import NormalizedData, normalize, denormalize
from .frames import to_frames, write_frames

__all__ = ["NormalizedData", "normalize", "denormalize", "to_frames", "write_frames"]
