"""
gdrive-dl: download publicly shared Google Drive files and folders.
"""

__version__ = "1.0.0"
