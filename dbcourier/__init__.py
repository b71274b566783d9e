"""
Backups de bases de datos: volcado, compresión y entrega
"""
__version__ = "1.0.0"

from .config import Config
from .logger import LoggerService

__all__ = ['Config', 'LoggerService']
