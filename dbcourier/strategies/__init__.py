"""
Estrategias de volcado para diferentes motores de BD
"""
from .base_strategy import BackupStrategy
from .mysql_strategy import MySQLBackupStrategy
from .postgresql_strategy import PostgreSQLBackupStrategy

__all__ = [
    'BackupStrategy',
    'MySQLBackupStrategy',
    'PostgreSQLBackupStrategy'
]
