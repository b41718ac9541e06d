"""pwahint - Progressive Web App checks for HTML pages.

pwahint walks the elements of a page, feeds them to lint rules and reports
findings such as a missing or unreachable web app manifest.
"""

__version__ = "0.1.0"
__author__ = "pwahint"
__description__ = "Progressive Web App checks for HTML pages"

from pwahint.config import PwahintConfig

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "PwahintConfig",
]
