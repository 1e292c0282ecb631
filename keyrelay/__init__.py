"""
Key Relay

Reverse proxy for the Gemini and Groq APIs with per-request random key selection.
"""

__version__ = "0.1.0"
