"""Chunked multipart upload: planning, chunk transfer and commit."""

from teldrive.upload.commit import CommitCoordinator, check_parts, guess_mime_type
from teldrive.upload.planner import plan_chunks, plan_upload, upload_session_id
from teldrive.upload.transfer import ChunkTransferEngine, ProgressCallback

__all__ = [
    "ChunkTransferEngine",
    "CommitCoordinator",
    "ProgressCallback",
    "check_parts",
    "guess_mime_type",
    "plan_chunks",
    "plan_upload",
    "upload_session_id",
]
