"""
Recognition services module.

Contains title inference and metadata merging on top of the external
filename classifier.
"""

from anisub.services.recognition.metadata_merger import MetadataMerger
from anisub.services.recognition.recognition_service import RecognitionService
from anisub.services.recognition.title_inferrer import (
    BATCH_SAMPLE_SIZE,
    PER_FILE_SAMPLE_SIZE,
    SeriesTitleInferrer,
)

__all__ = [
    'SeriesTitleInferrer',
    'MetadataMerger',
    'RecognitionService',
    'PER_FILE_SAMPLE_SIZE',
    'BATCH_SAMPLE_SIZE',
]
