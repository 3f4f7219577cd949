"""Image header helpers for uploaded designs."""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

SUPPORTED_FORMATS: dict[str, str] = {"PNG": "image/png", "JPEG": "image/jpeg", "WEBP": "image/webp"}


def detect_image_mime(image_bytes: bytes) -> str:
  """Return the mime type of a PNG, JPEG or WebP payload; raise ValueError otherwise."""
  try:
    # Image.open only parses the header; pixel data is never decoded here.
    with Image.open(io.BytesIO(image_bytes)) as image:
      image_format = image.format or ""
  except UnidentifiedImageError as exc:
    raise ValueError("Design image is not a recognized image file.") from exc

  mime_type = SUPPORTED_FORMATS.get(image_format)
  if mime_type is None:
    raise ValueError(f"Unsupported design image format '{image_format}'.")
  return mime_type
