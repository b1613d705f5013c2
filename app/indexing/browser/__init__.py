"""
Browser automation exports.
"""

from app.indexing.browser.engine import AutomationEngine, AutomationError
from app.indexing.browser.manager import BrowserProvider, PlaywrightBrowserManager
from app.indexing.browser.signals import (
    BING_PROFILE,
    GOOGLE_PROFILE,
    EngineProfile,
    PageSignal,
    PageSignalClassifier,
    PageSnapshot,
)

__all__ = [
    "AutomationEngine",
    "AutomationError",
    "BING_PROFILE",
    "BrowserProvider",
    "EngineProfile",
    "GOOGLE_PROFILE",
    "PageSignal",
    "PageSignalClassifier",
    "PageSnapshot",
    "PlaywrightBrowserManager",
]
