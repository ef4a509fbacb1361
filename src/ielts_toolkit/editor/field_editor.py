"""
Module: editor.field_editor

Purpose:
    Spatial field editor for flow chart completion. The author uploads a
    diagram, clicks on it to place answer boxes, drags and resizes them,
    and types the correct answer into each. Saving hands the ordered field
    list to the synchronizer.

    Field coordinates are recorded in the pixel space of the image as it
    is currently rendered (set_rendered_size), not the image's natural
    resolution. Anything displaying the fields at another size must
    rescale them (preview.scaling).

Key Classes:
    - SpatialFieldEditor: Editor state and operations
    - UploadOutcome: Result of upload_image

Dependencies:
    - ielts_toolkit.core.models.fields: ImageField and clamp helpers
    - .drag.DragSession: Drag gesture state machine
    - .upload: Upload collaborator and checks

Used By:
    - gui.widgets.field_canvas.FieldCanvas
    - sync.synchronizer (consumes save() output)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Tuple

from ielts_toolkit.core.models.fields import (
    ImageField,
    create_field,
    move_field_to,
    resize_field,
)
from ielts_toolkit.core.models.groups import FlowChartArtifact
from ielts_toolkit.core.schemas.validator import validate_field
from ielts_toolkit.core.utils.ids import IdGenerator
from ielts_toolkit.core.utils.serialization import LoadWarning

from .config import DEFAULT_CONFIG, EditorConfig
from .drag import Cleanup, DragSession, Point
from .errors import EditorError, EmptyGroupError, NonDurableImageError, UploadInProgressError
from .upload import (
    MediaKind,
    UploadError,
    UploadFile,
    Uploader,
    is_durable_url,
    to_data_url,
    validate_upload,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadOutcome:
    """
    Result of an image upload.

    durable is False when the collaborator failed and the editor fell back
    to a local data: preview; error then holds the collaborator's message.
    """

    url: str
    durable: bool
    error: str = ""


class SpatialFieldEditor:
    """
    Editor for answer boxes placed over a flow chart image.

    Attributes:
        image_url: Current image (durable URL or data: preview)
        public_id: Storage id returned by the uploader
        image_error: Last upload error shown to the author
        uploading: True while an upload is in flight
        rendered_size: (width, height) the image is displayed at
        fields: Fields in creation order
        editing_field_id: Field whose inline controls are open
        starting_question_number: First question number of the group
        group_id: Group being edited (None for a new group)

    Example:
        >>> editor = SpatialFieldEditor(starting_question_number=5)
        >>> editor.image_url = "https://cdn.example/chart.png"
        >>> editor.set_rendered_size(800, 600)
        >>> f = editor.click((10, 10))
        >>> editor.question_number_for(f.id)
        5
    """

    def __init__(
        self,
        uploader: Optional[Uploader] = None,
        *,
        config: EditorConfig = DEFAULT_CONFIG,
        starting_question_number: Optional[int] = None,
        ids: Optional[IdGenerator] = None,
        on_save: Optional[Callable[[List[ImageField]], None]] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.uploader = uploader
        self.config = config
        self.starting_question_number = starting_question_number
        self.ids = ids or IdGenerator()
        self.on_save = on_save
        self.on_change = on_change

        self.image_url = ""
        self.public_id = ""
        self.image_error = ""
        self.uploading = False
        self.rendered_size: Optional[Tuple[float, float]] = None
        self.fields: List[ImageField] = []
        self.editing_field_id: Optional[str] = None
        self.group_id: Optional[str] = None
        self.drag = DragSession()

    @classmethod
    def from_artifact(
        cls,
        artifact: FlowChartArtifact,
        uploader: Optional[Uploader] = None,
        **kwargs,
    ) -> SpatialFieldEditor:
        """Open a committed flow chart group for editing."""
        editor = cls(
            uploader,
            starting_question_number=artifact.start_question_number,
            **kwargs,
        )
        editor.group_id = artifact.group_id
        editor.image_url = artifact.image_url
        editor.fields = list(artifact.fields)
        return editor

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    # ─────────────────────────────────────────────────────────────────────────
    # Image
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    @property
    def is_image_durable(self) -> bool:
        return is_durable_url(self.image_url)

    def upload_image(self, file: UploadFile) -> UploadOutcome:
        """
        Upload a new flow chart image.

        On success the durable URL replaces the current image. If the
        collaborator fails, the error is kept in image_error and a local
        base64 preview is shown instead; that preview is not saveable.
        Existing fields are cleared either way since their positions
        belong to the previous image.

        Raises:
            UploadInProgressError: If an upload is already running
            UploadRejectedError: If the file fails type/size checks
        """
        if self.uploading:
            raise UploadInProgressError("An upload is already in progress")
        try:
            validate_upload(file, MediaKind.IMAGE, self.config)
        except UploadError as e:
            self.image_error = str(e)
            raise

        self.image_error = ""
        self.uploading = True
        try:
            if self.uploader is None:
                raise UploadError("No upload service is configured")
            result = self.uploader.upload(file, MediaKind.IMAGE)
            outcome = UploadOutcome(url=result.url, durable=True)
            self.public_id = result.public_id
            logger.info(f"Uploaded image {file.name} -> {result.url}")
        except UploadError as e:
            self.image_error = str(e) or "Failed to upload image"
            self.public_id = ""
            outcome = UploadOutcome(url=to_data_url(file), durable=False, error=self.image_error)
            logger.warning(f"Image upload failed, using local preview: {self.image_error}")
        finally:
            self.uploading = False

        self.image_url = outcome.url
        self._reset_fields()
        self._changed()
        return outcome

    def remove_image(self) -> None:
        """Drop the image and every field."""
        self.image_url = ""
        self.public_id = ""
        self.image_error = ""
        self._reset_fields()
        self._changed()

    def set_rendered_size(self, width: float, height: float) -> None:
        """Record the size the image is displayed at while authoring."""
        if width <= 0 or height <= 0:
            raise ValueError(f"rendered size must be positive: {width}x{height}")
        self.rendered_size = (float(width), float(height))

    # ─────────────────────────────────────────────────────────────────────────
    # Field Creation & Lookup
    # ─────────────────────────────────────────────────────────────────────────

    def click(self, point: Point) -> ImageField:
        """
        Create a field with its top-left corner at point.

        Args:
            point: (x, y) relative to the rendered image

        Returns:
            The new field (also selected for editing)

        Raises:
            EditorError: If no image is loaded
        """
        if not self.has_image:
            raise EditorError("Upload an image before adding fields")
        new_field = create_field(
            point,
            id=self.ids.next("field"),
            width=self.config.default_field_width,
            height=self.config.default_field_height,
        )
        self.fields.append(new_field)
        self.editing_field_id = new_field.id
        logger.debug(f"Created {new_field!r}")
        self._changed()
        return new_field

    def get(self, field_id: str) -> ImageField:
        """
        Raises:
            KeyError: If no field has this id
        """
        for f in self.fields:
            if f.id == field_id:
                return f
        raise KeyError(f"Unknown field: {field_id!r}")

    def index_of(self, field_id: str) -> int:
        for index, f in enumerate(self.fields):
            if f.id == field_id:
                return index
        raise KeyError(f"Unknown field: {field_id!r}")

    def field_at(self, point: Point) -> Optional[ImageField]:
        """Topmost (most recently created) field containing point."""
        for f in reversed(self.fields):
            if f.contains(*point):
                return f
        return None

    def _put(self, updated: ImageField) -> ImageField:
        self.fields[self.index_of(updated.id)] = updated
        self._changed()
        return updated

    # ─────────────────────────────────────────────────────────────────────────
    # Inline Controls
    # ─────────────────────────────────────────────────────────────────────────

    def select(self, field_id: Optional[str]) -> None:
        if field_id is not None:
            self.get(field_id)
        self.editing_field_id = field_id

    def set_value(self, field_id: str, value: str) -> ImageField:
        return self._put(replace(self.get(field_id), value=value))

    def set_question_number(self, field_id: str, number: Optional[int]) -> ImageField:
        """Set or clear (None / 0) the explicit question number override."""
        return self._put(replace(self.get(field_id), question_number=number or None))

    def resize(self, field_id: str, dw: float = 0, dh: float = 0) -> ImageField:
        """Resize by a delta; width/height are clamped to the configured ranges."""
        return self._put(
            resize_field(
                self.get(field_id),
                dw,
                dh,
                width_range=self.config.field_width_range,
                height_range=self.config.field_height_range,
            )
        )

    def delete_field(self, field_id: str) -> None:
        """Delete a field, ending any drag gesture that targets it."""
        index = self.index_of(field_id)
        self.drag.cancel_for(field_id)
        del self.fields[index]
        if self.editing_field_id == field_id:
            self.editing_field_id = None
        logger.debug(f"Deleted field {field_id!r}")
        self._changed()

    def clear(self) -> None:
        """Delete every field."""
        self._reset_fields()
        self._changed()

    def _reset_fields(self) -> None:
        self.drag.end()
        self.fields = []
        self.editing_field_id = None

    # ─────────────────────────────────────────────────────────────────────────
    # Dragging
    # ─────────────────────────────────────────────────────────────────────────

    def begin_drag(self, field_id: str, pointer: Point, release: Optional[Cleanup] = None) -> None:
        """
        Start moving a field.

        Args:
            field_id: Field to move
            pointer: Pointer position at gesture start
            release: Cleanup for the view's pointer listeners, run once
                when the gesture ends

        Raises:
            EditorError: If the rendered size is unknown
            DragError: If another gesture is active
        """
        if self.rendered_size is None:
            raise EditorError("Image has not been rendered yet")
        target = self.get(field_id)
        self.drag.begin(
            field_id,
            pointer,
            (target.x, target.y),
            lambda x, y: self._drag_move(field_id, x, y),
            release,
        )
        self.editing_field_id = field_id

    def _drag_move(self, field_id: str, x: float, y: float) -> None:
        moved = move_field_to(
            self.get(field_id),
            x,
            y,
            self.rendered_size,
            clamp_bottom_edge=self.config.clamp_bottom_edge,
        )
        self._put(moved)

    def drag_to(self, pointer: Point) -> None:
        self.drag.move(pointer)

    def end_drag(self) -> bool:
        return self.drag.end()

    # ─────────────────────────────────────────────────────────────────────────
    # Numbering & Save
    # ─────────────────────────────────────────────────────────────────────────

    def question_number_for(self, field_id: str) -> Optional[int]:
        """
        Question number shown on a field.

        Explicit override if set, else starting number + creation index;
        None when neither is known.
        """
        f = self.get(field_id)
        if f.question_number is not None:
            return f.question_number
        if self.starting_question_number is None:
            return None
        return self.starting_question_number + self.index_of(field_id)

    def question_numbers(self) -> Dict[str, Optional[int]]:
        return {f.id: self.question_number_for(f.id) for f in self.fields}

    def load_fields(self, raw_fields: List[dict]) -> List[LoadWarning]:
        """
        Replace fields with ones read from stored payloads.

        Malformed entries are skipped and reported as warnings.
        """
        loaded: List[ImageField] = []
        warnings: List[LoadWarning] = []
        for index, raw in enumerate(raw_fields):
            issues = validate_field(raw)
            if issues:
                warning = LoadWarning(f"fields[{index}]", ", ".join(issues))
                logger.warning(f"Skipped field {warning}")
                warnings.append(warning)
                continue
            loaded.append(
                ImageField.from_dict(raw, default_height=self.config.default_field_height)
            )
        self._reset_fields()
        self.fields = loaded
        self._changed()
        return warnings

    def save(self) -> List[ImageField]:
        """
        Emit the ordered field list.

        Returns:
            Fields in creation order

        Raises:
            EmptyGroupError: If there are no fields
            NonDurableImageError: If the image is only a local preview
        """
        if not self.fields:
            raise EmptyGroupError("Please create at least one input field on the flow chart image")
        if not self.is_image_durable:
            raise NonDurableImageError(
                "The image was not uploaded; upload it again before saving"
            )
        fields = list(self.fields)
        logger.info(f"Saving {len(fields)} flow chart fields")
        if self.on_save is not None:
            self.on_save(fields)
        return fields
