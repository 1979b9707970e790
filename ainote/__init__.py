"""AI note pad - notes with AI summaries and tags"""

from __future__ import annotations

__version__ = "1.0.0"
