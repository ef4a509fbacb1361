"""
Editor errors.

All are recoverable: the editor state is unchanged when one is raised and
str(error) is a message suitable for showing to the author.
"""


class EditorError(Exception):
    """Base class for rejected editor operations."""


class EmptyGroupError(EditorError):
    """A group with no fields/blanks cannot be committed."""


class NonDurableImageError(EditorError):
    """The image is only a local preview and cannot be saved."""


class UploadInProgressError(EditorError):
    """Another upload is still running."""


class TableEditError(EditorError):
    """A table edit would break the table structure."""
