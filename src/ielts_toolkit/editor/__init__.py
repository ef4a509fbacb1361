"""
Authoring editors for flow chart fields and table completion structures.
"""

from .config import DEFAULT_CONFIG, EditorConfig
from .drag import DragError, DragSession, DragState
from .errors import (
    EditorError,
    EmptyGroupError,
    NonDurableImageError,
    TableEditError,
    UploadInProgressError,
)
from .field_editor import SpatialFieldEditor, UploadOutcome
from .table_editor import TableStructureEditor
from .upload import (
    MediaKind,
    UploadError,
    UploadFile,
    Uploader,
    UploadRejectedError,
    UploadResult,
    validate_upload,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DragError",
    "DragSession",
    "DragState",
    "EditorConfig",
    "EditorError",
    "EmptyGroupError",
    "MediaKind",
    "NonDurableImageError",
    "SpatialFieldEditor",
    "TableEditError",
    "TableStructureEditor",
    "UploadError",
    "UploadFile",
    "UploadInProgressError",
    "UploadOutcome",
    "UploadRejectedError",
    "UploadResult",
    "Uploader",
    "validate_upload",
]
