"""
Utility modules for the Service CM backend.
"""

from service_cm.utils.tag_grammar import VERSION_PATTERN, check_segment, split_version_suffix

__all__ = ["VERSION_PATTERN", "check_segment", "split_version_suffix"]
