"""Loading rubric definitions into trees."""

from rubricmap.io.loader import load_rubric, load_rubric_file

__all__ = ["load_rubric", "load_rubric_file"]
