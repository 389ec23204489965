"""Input validation module for the publishing pipeline.

This module handles pre-transcode validation:
- Source existence check
- Container extension check
"""

from .validator import validate_input_file

__all__ = [
    "validate_input_file",
]
