import base64
import io
import logging
import os
import tempfile

from PIL import Image, UnidentifiedImageError

from errors import ValidationError

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE_MB = 5
MAX_IMAGE_SIZE = MAX_IMAGE_SIZE_MB * 1024 * 1024
ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/png", "image/webp"]
PREVIEW_SIZE = (384, 384)

SUBJECT = "subject"
STYLE = "style"
SLOTS = (SUBJECT, STYLE)

_SUFFIXES = {"image/jpeg": ".jpg", "image/png": ".png", "image/webp": ".webp"}


class UploadedImage:
    """An accepted upload kept on disk until it is encoded or cleared."""

    def __init__(self, path, filename, mime_type, size):
        self.path = path
        self.filename = filename
        self.mime_type = mime_type
        self.size = size

    def discard(self):
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            pass


def validate_upload(filename, mime_type, size):
    """Check the declared MIME type and byte size of an uploaded file."""
    if mime_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError(
            f"Nieprawidłowy format pliku ({filename}). Dozwolone formaty: JPG, PNG, WEBP."
        )
    if size > MAX_IMAGE_SIZE:
        raise ValidationError(
            f"Plik {filename} jest zbyt duży. Maksymalny rozmiar to {MAX_IMAGE_SIZE_MB}MB."
        )


def make_preview(data, mime_type):
    """Return a data URL for showing the upload in the page.

    A PNG thumbnail when Pillow can decode the bytes, the raw bytes otherwise
    (the declared type is trusted, the browser gets the final word).
    """
    try:
        img = Image.open(io.BytesIO(data))
        img.thumbnail(PREVIEW_SIZE)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("utf-8")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        logger.debug("No thumbnail for %s upload: %s", mime_type, e)
        return f"data:{mime_type};base64," + base64.b64encode(data).decode("utf-8")


class UploadSlot:
    """One image slot of the form: subject or style."""

    def __init__(self, name):
        self.name = name
        self.image = None
        self.preview = None

    @property
    def present(self):
        return self.image is not None

    def accept(self, filename, mime_type, data):
        """Validate and store an upload; a rejected file empties the slot."""
        try:
            validate_upload(filename, mime_type, len(data))
        except ValidationError:
            self.clear()
            raise

        preview = make_preview(data, mime_type)
        fd, path = tempfile.mkstemp(suffix=_SUFFIXES[mime_type], prefix=f"{self.name}_")
        with os.fdopen(fd, "wb") as f:
            f.write(data)

        self.clear()
        self.image = UploadedImage(path, filename, mime_type, len(data))
        self.preview = preview
        logger.info("Accepted %s image %s (%d bytes)", self.name, filename, len(data))
        return self.image

    def clear(self):
        if self.image is not None:
            self.image.discard()
        self.image = None
        self.preview = None

    def to_dict(self):
        if not self.present:
            return None
        return {
            "filename": self.image.filename,
            "mimeType": self.image.mime_type,
            "size": self.image.size,
            "preview": self.preview,
        }
