"""Upload a single file to Google Drive and open it in the browser."""

__version__ = "0.1.0"
