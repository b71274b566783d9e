"""
Errores del proceso de backup
"""
from typing import Optional


class BackupError(Exception):
    """Error base de un pipeline de backup"""

    kind = "BackupError"

    def __init__(self, message: str, database_name: Optional[str] = None):
        super().__init__(message)
        self.database_name = database_name


class ConfigError(BackupError):
    """Archivo de configuración inválido"""
    kind = "ConfigError"


class UnsupportedEngine(BackupError):
    """El tipo de base de datos no tiene estrategia de volcado"""
    kind = "UnsupportedEngine"


class SpawnFailure(BackupError):
    """El sistema operativo no pudo iniciar el ejecutable de volcado"""
    kind = "SpawnFailure"


class DumpFailure(BackupError):
    """El volcado terminó con código distinto de cero o escribió en stderr"""
    kind = "DumpFailure"


class CompressionFailure(BackupError):
    """Falló la compresión del volcado"""
    kind = "CompressionFailure"


class DeliveryFailure(BackupError):
    """El envío por correo o la subida al almacenamiento falló"""
    kind = "DeliveryFailure"


class BackupRunError(BackupError):
    """Al menos un pipeline de la ejecución falló"""

    kind = "BackupRunError"

    def __init__(self, report):
        failed = report.failed
        summary = "; ".join(f"{r.database_name} ({r.error_kind})" for r in failed)
        super().__init__(f"Backup fallido para: {summary}")
        self.report = report
