"""
Modelos de datos del sistema
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class DatabaseEngine(Enum):
    """Motores de base de datos soportados"""
    MYSQL = "mysql"
    POSTGRES = "postgres"


class Destination(Enum):
    """Destino único del archivo comprimido"""
    GMAIL = "GMAIL"
    S3_BUCKET = "S3_BUCKET"
    UNRECOGNIZED = "UNRECOGNIZED"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Destination":
        """
        Convierte el valor de BACKUP_DEST en un destino conocido

        Args:
            value: Valor configurado (puede ser vacío)

        Returns:
            Destino correspondiente o UNRECOGNIZED si no coincide exactamente
        """
        for destination in (cls.GMAIL, cls.S3_BUCKET):
            if destination.value == value:
                return destination
        return cls.UNRECOGNIZED


class NotifyMedium(Enum):
    """Medios de notificación disponibles"""
    SLACK = "SLACK"
    DISCORD = "DISCORD"
    TELEGRAM = "TELEGRAM"
    NONE = "NONE"

    @classmethod
    def parse(cls, value: Optional[str]) -> "NotifyMedium":
        normalized = (value or "").strip().upper()
        for medium in cls:
            if medium.value == normalized:
                return medium
        return cls.NONE


@dataclass
class BackupConfig:
    """Configuración de la base de datos a respaldar"""
    type: str = ""
    host: str = ""
    user: str = ""
    password: str = ""
    db_name: str = ""

    def is_empty(self) -> bool:
        """Sin credenciales ni bases de datos la ejecución no hace nada"""
        return not self.db_name and not self.user and not self.password

    def database_names(self) -> List[str]:
        """
        Obtiene la lista de bases de datos de db_name

        Returns:
            Nombres separados por coma, sin espacios ni entradas vacías
        """
        if not self.db_name:
            return []
        return [name.strip() for name in self.db_name.split(",") if name.strip()]


@dataclass
class DumpCommand:
    """Invocación externa para volcar una o varias bases de datos"""
    database_name: str
    executable: str
    args: List[str]
    env_overrides: Dict[str, str] = field(default_factory=dict)

    def env(self) -> Dict[str, str]:
        """Entorno del proceso hijo: el actual más las credenciales"""
        env = os.environ.copy()
        env.update(self.env_overrides)
        return env

    def __str__(self):
        return " ".join([self.executable] + self.args)


@dataclass
class DumpJob:
    """Un volcado en curso y el archivo que le pertenece"""
    command: DumpCommand
    dump_file: Path

    @property
    def database_name(self) -> str:
        return self.command.database_name

    @property
    def archive_file(self) -> Path:
        return archive_path_for(self.dump_file)


@dataclass
class DumpOutcome:
    """Estado de un volcado, evaluado una sola vez al terminar el proceso"""
    return_code: Optional[int] = None
    stderr_chunks: List[str] = field(default_factory=list)

    @property
    def error_message(self) -> str:
        return "".join(self.stderr_chunks).strip()

    @property
    def has_stderr(self) -> bool:
        return any(self.stderr_chunks)


@dataclass
class BackupResult:
    """Resultado de una operación de backup"""
    database_name: str
    success: bool
    output_file: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    duration_seconds: float = 0.0

    def __str__(self):
        if self.success:
            return f"✓ {self.database_name}: {self.output_file} ({self.duration_seconds:.2f}s)"
        else:
            return f"✗ {self.database_name}: [{self.error_kind}] {self.error}"


@dataclass
class BackupReport:
    """Resultado agregado de todos los pipelines de una ejecución"""
    results: List[BackupResult] = field(default_factory=list)

    @property
    def succeeded(self) -> List[BackupResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> List[BackupResult]:
        return [r for r in self.results if not r.success]

    @property
    def ok(self) -> bool:
        return not self.failed


def dump_file_name(timestamp: str, database_name: str) -> str:
    """Nombre del volcado: {timestamp}-{base}.dump.sql"""
    return f"{timestamp}-{database_name}.dump.sql"


def archive_path_for(dump_file: Path) -> Path:
    """Ruta del comprimido hermano de un volcado"""
    return Path(f"{dump_file}.zip")
