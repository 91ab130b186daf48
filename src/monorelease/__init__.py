"""Release tooling for multi-package JavaScript repositories."""

from __future__ import annotations

__version__ = "0.1.0"
