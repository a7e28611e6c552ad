"""
Media Bridge: use a remote WordPress site as a source for a media library.
"""

__version__ = "0.1.0"
