"""Server-list screenshot OCR: premium server ids paired with their two uptime timers."""

__version__ = "0.3.0"
