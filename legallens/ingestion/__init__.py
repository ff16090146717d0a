from legallens.ingestion.batch import UploadBatch, build_upload_batch
from legallens.ingestion.events import BatchSettled, BatchStarted, ItemSettled
from legallens.ingestion.models import CandidateFile, UploadItem, UploadStatus

__all__ = [
    "BatchSettled",
    "BatchStarted",
    "CandidateFile",
    "ItemSettled",
    "UploadBatch",
    "UploadItem",
    "UploadStatus",
    "build_upload_batch",
]
