"""Reference silhouette loading."""

from .loader import StencilError, load_polygon_from_image, polygon_from_mask, silhouette_mask

__all__ = ["StencilError", "load_polygon_from_image", "polygon_from_mask", "silhouette_mask"]
