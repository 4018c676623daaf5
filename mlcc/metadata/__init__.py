"""
External model metadata sources.
"""

from .huggingface import HuggingFaceClient, HUGGINGFACE_URL

__all__ = [
    'HuggingFaceClient',
    'HUGGINGFACE_URL'
]
