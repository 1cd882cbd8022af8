# Tandem v1.0.0
"""
Services package for the Tandem comparison engine.
Contains read-only consumers of diff results: search, navigation and summaries.
"""
from services.search import SearchMatch, search_in_diff, navigate_to_path
from services.summary import generate_diff_summary

__all__ = [
    "SearchMatch",
    "search_in_diff",
    "navigate_to_path",
    "generate_diff_summary"
]
