"""searchfix — Outlook & Spotlight search index repair for macOS"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("searchfix")
except PackageNotFoundError:
    __version__ = "dev"

__author__ = "searchfix"
