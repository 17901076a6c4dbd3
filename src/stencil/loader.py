"""Extract a single silhouette polygon from a reference image."""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from curves.contour import ensure_counter_clockwise

logger = logging.getLogger(__name__)

DEFAULT_MIN_AREA = 16.0


class StencilError(RuntimeError):
    """Raised when a stencil image is missing or does not yield a usable polygon."""


def _load_grayscale_and_alpha(path: Path) -> tuple[np.ndarray, np.ndarray | None]:
    try:
        with Image.open(path) as image:
            image.load()
            alpha = None
            if image.mode in {"RGBA", "LA"} or (image.mode == "P" and "transparency" in image.info):
                rgba = image.convert("RGBA")
                alpha = np.asarray(rgba.getchannel("A"), dtype=np.uint8)
            gray = np.asarray(image.convert("L"), dtype=np.uint8)
    except FileNotFoundError as exc:
        raise StencilError(f"Stencil file {path} does not exist") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise StencilError(f"Cannot decode stencil image {path}") from exc
    return gray, alpha


def _border_mean(mask: np.ndarray) -> float:
    border = np.concatenate([mask[0, :], mask[-1, :], mask[:, 0], mask[:, -1]])
    return float(border.mean()) if border.size else 0.0


def silhouette_mask(gray: np.ndarray, alpha: np.ndarray | None = None) -> np.ndarray:
    """Binary mask (255 = silhouette) for a grayscale stencil."""

    if alpha is not None and alpha.min() < alpha.max():
        _, mask = cv2.threshold(alpha, 127, 255, cv2.THRESH_BINARY)
    else:
        _, mask = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
        # Whatever colour dominates the border is background.
        if _border_mean(mask) > 127:
            mask = cv2.bitwise_not(mask)
    kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (3, 3))
    return cv2.morphologyEx(mask, cv2.MORPH_CLOSE, kernel, iterations=1)


def polygon_from_mask(mask: np.ndarray, *, min_area: float = DEFAULT_MIN_AREA) -> np.ndarray | None:
    """Largest external contour of ``mask`` in y-up coordinates, or ``None``."""

    contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_NONE)
    best = None
    best_area = float(min_area)
    for contour in contours:
        area = float(cv2.contourArea(contour))
        if area >= best_area:
            best = contour
            best_area = area
    if best is None:
        return None

    points = best.reshape(-1, 2).astype(float)
    height = mask.shape[0]
    points[:, 1] = (height - 1) - points[:, 1]
    return ensure_counter_clockwise(points)


def load_polygon_from_image(path: str | Path, *, min_area: float = DEFAULT_MIN_AREA) -> np.ndarray:
    """Load ``path`` and return its silhouette outline as an ``(N, 2)`` array.

    Raises :class:`StencilError` when no path is given, the image cannot be
    decoded, or no contour of at least ``min_area`` pixels is found.
    """

    if path is None or not str(path).strip() or Path(path) == Path(""):
        raise StencilError("No stencil file is given")

    stencil_path = Path(path)
    gray, alpha = _load_grayscale_and_alpha(stencil_path)
    polygon = polygon_from_mask(silhouette_mask(gray, alpha), min_area=min_area)
    if polygon is None:
        raise StencilError(f"Failed to create polygon from stencil file {stencil_path}")

    logger.info(
        "Extracted stencil polygon with %d points from %s (%dx%d)",
        len(polygon),
        stencil_path,
        gray.shape[1],
        gray.shape[0],
    )
    return polygon


__all__ = [
    "DEFAULT_MIN_AREA",
    "StencilError",
    "load_polygon_from_image",
    "polygon_from_mask",
    "silhouette_mask",
]
