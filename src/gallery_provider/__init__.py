"""
Gallery provider - URI-addressed storage for chosen photos and photo metadata.
"""

__version__ = "0.1.0"
