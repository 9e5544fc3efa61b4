"""
Image re-encoding with Pillow.

Every image is re-encoded as an optimized JPEG at the requested quality.
Transparency is flattened onto white since JPEG has no alpha channel.
"""
import io

from PIL import Image, UnidentifiedImageError

from image_compressor.core.exceptions import InvalidImageError

OUTPUT_FORMAT = "JPEG"
OUTPUT_CONTENT_TYPE = "image/jpeg"


def _to_rgb(img: Image.Image) -> Image.Image:
    if img.mode == "RGB":
        return img

    if img.mode == "P":
        img = img.convert("RGBA")

    if img.mode in ("RGBA", "LA"):
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(img, mask=img.getchannel("A"))
        return background

    return img.convert("RGB")


def reencode_jpeg(data: bytes, quality: int) -> bytes:
    """
    Re-encode image bytes as JPEG.

    Raises:
        InvalidImageError: ``data`` is not an image Pillow can decode
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            rgb = _to_rgb(img)
            buffer = io.BytesIO()
            rgb.save(buffer, format=OUTPUT_FORMAT, quality=quality, optimize=True)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise InvalidImageError(f"Cannot decode image: {e}") from e

    return buffer.getvalue()
