"""
Storygrid - Bilingual Grid Storyboards from Reference Images

Delegates visual reasoning to Google Gemini to turn reference images into a
multi-shot storyboard (English and Chinese), and lets single shots be
rewritten without disturbing the rest of the result.

Version: 1.0.0
"""

__version__ = "1.0.0"
__project__ = "Storygrid"

from pathlib import Path

# Load environment variables early - before any other imports that might need them
from storygrid.core.env_loader import ensure_env_loaded
ensure_env_loaded()

# Package root directory
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent

__all__ = [
    "__version__",
    "__project__",
    "PACKAGE_ROOT",
    "PROJECT_ROOT",
]
