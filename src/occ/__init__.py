"""
OCC - launches an OCM container session with the host's credentials mounted in.
"""

__version__ = "1.0.0"

from .config import LaunchConfig
from .container_manager import ContainerManager
from .launcher import SessionLauncher

__all__ = ["ContainerManager", "LaunchConfig", "SessionLauncher"]
