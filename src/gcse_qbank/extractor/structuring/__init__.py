"""
Module: extractor.structuring

Purpose:
    Segment building - folds classified lines into question Records.

Key Functions:
    - build_records(): Fold a document's lines into Records
    - step(): Single reducer transition
"""

from .segment_builder import OpenSegment, SegmentPhase, build_records, step

__all__ = ["OpenSegment", "SegmentPhase", "build_records", "step"]
