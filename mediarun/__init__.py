"""mediarun — run autorun software from removable media, with consent"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("mediarun")
except PackageNotFoundError:
    __version__ = "dev"

__author__ = "mediarun"
