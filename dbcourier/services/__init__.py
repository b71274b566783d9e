"""
Servicios de la aplicación
"""
from .archive_service import Archiver
from .backup_service import BackupService
from .cleanup_service import CleanupService
from .delivery_service import DeliveryDispatcher
from .dump_runner import DumpRunner, ensure_directory

__all__ = [
    'Archiver',
    'BackupService',
    'CleanupService',
    'DeliveryDispatcher',
    'DumpRunner',
    'ensure_directory'
]
