"""Text processing helpers: normalization, segmentation, layout and readability."""
