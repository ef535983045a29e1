"""Pipeline stages for Chiptheory."""

from chiptheory.stages.classification import ClassificationStage
from chiptheory.stages.finalize import FinalizeStage
from chiptheory.stages.grid import GridStage
from chiptheory.stages.load_dump import LoadDumpStage
from chiptheory.stages.segmentation import SegmentationStage

__all__ = [
    "ClassificationStage",
    "FinalizeStage",
    "GridStage",
    "LoadDumpStage",
    "SegmentationStage",
]
