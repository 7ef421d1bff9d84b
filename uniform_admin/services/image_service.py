"""Item photo clean-up before it goes to the bucket."""
import io
from PIL import Image as PILImage, ImageOps, UnidentifiedImageError

ACCEPTED_FORMATS = {"JPEG", "PNG", "WEBP"}
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
LONG_EDGE = 1600
BACKGROUND = (255, 255, 255)


def prepare_item_image(raw, max_bytes=DEFAULT_MAX_BYTES):
    """Return the upload as a web-ready JPEG.

    The photo is rotated per its EXIF orientation, transparent areas are laid
    on white (uniform shots are shown on white cards), the long edge is capped
    at LONG_EDGE and metadata is dropped by re-encoding.

    Raises ValueError for empty, oversized, unreadable or unsupported files.
    """
    if not raw:
        raise ValueError("Image file is empty")
    if len(raw) > max_bytes:
        raise ValueError(f"Image too large: {len(raw)} bytes (max {max_bytes})")

    try:
        with PILImage.open(io.BytesIO(raw)) as probe:
            fmt = probe.format
            probe.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValueError("Invalid image file")
    if fmt not in ACCEPTED_FORMATS:
        raise ValueError(f"Unsupported image format: {fmt}")

    with PILImage.open(io.BytesIO(raw)) as img:
        img = ImageOps.exif_transpose(img)
        if img.mode in ("RGBA", "LA", "P"):
            rgba = img.convert("RGBA")
            flat = PILImage.new("RGB", rgba.size, BACKGROUND)
            flat.paste(rgba, mask=rgba.getchannel("A"))
            img = flat
        elif img.mode != "RGB":
            img = img.convert("RGB")
        img.thumbnail((LONG_EDGE, LONG_EDGE), PILImage.LANCZOS)

        out = io.BytesIO()
        img.save(out, format="JPEG", quality=88, optimize=True)
    return out.getvalue()
