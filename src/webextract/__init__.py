"""
webextract - single-page web content extraction.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .container import DependencyContainer
from .models import ExtractionFailure, ExtractionRequest, ExtractionResult, ExtractionSuccess
from .service import ExtractionService

__all__ = [
    "__version__",
    "Config",
    "DependencyContainer",
    "ExtractionFailure",
    "ExtractionRequest",
    "ExtractionResult",
    "ExtractionService",
    "ExtractionSuccess",
]
