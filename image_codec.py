import base64

from errors import ReadError
from models import ReferenceImage


def encode_reference_image(upload):
    """Read an accepted upload back from disk as a base64 ReferenceImage."""
    try:
        with open(upload.path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise ReadError(f"Nie udało się odczytać pliku {upload.filename}.") from e
    return ReferenceImage(
        base64=base64.b64encode(raw).decode("utf-8"),
        mime_type=upload.mime_type,
    )
