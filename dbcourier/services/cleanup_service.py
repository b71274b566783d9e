"""
Servicio para eliminar artefactos temporales del backup (Single Responsibility)
"""
from datetime import datetime, timedelta
from pathlib import Path
from ..logger import LoggerService
from ..models import archive_path_for


class CleanupService:
    """Servicio para eliminar volcados y comprimidos locales"""

    # Patrones de los artefactos que genera el pipeline
    ARTIFACT_PATTERNS = ['*.dump.sql', '*.dump.sql.zip']

    def __init__(self, stale_minutes: int = 60):
        """
        Inicializa el servicio de limpieza

        Args:
            stale_minutes: Antigüedad a partir de la cual un artefacto se considera huérfano
        """
        self.stale_minutes = stale_minutes
        self.logger = LoggerService.get_logger("CleanupService")

    def remove_artifacts(self, dump_file: Path) -> int:
        """
        Elimina el volcado y su comprimido si existen

        Puede llamarse varias veces sobre el mismo volcado; un archivo
        ausente no es un error.

        Args:
            dump_file: Ruta del volcado

        Returns:
            Cantidad de archivos eliminados
        """
        removed = 0
        for path in (Path(dump_file), archive_path_for(Path(dump_file))):
            try:
                path.unlink()
                removed += 1
                self.logger.info(f"Eliminado artefacto: {path.name}")
            except FileNotFoundError:
                continue
            except OSError as e:
                self.logger.error(f"Error al eliminar {path.name}: {e}")
        return removed

    def purge_stale_artifacts(self, backup_dir: Path) -> int:
        """
        Elimina artefactos dejados por ejecuciones interrumpidas

        Args:
            backup_dir: Directorio de backups

        Returns:
            Cantidad de archivos eliminados
        """
        if not backup_dir.exists():
            return 0

        now = datetime.now()
        cutoff_date = now - timedelta(minutes=self.stale_minutes)
        deleted_count = 0

        for pattern in self.ARTIFACT_PATTERNS:
            for artifact in backup_dir.glob(pattern):
                try:
                    file_mtime = datetime.fromtimestamp(artifact.stat().st_mtime)
                    if file_mtime < cutoff_date:
                        artifact.unlink()
                        deleted_count += 1
                        self.logger.warning(
                            f"Eliminado artefacto huérfano: {artifact.name} "
                            f"({int((now - file_mtime).total_seconds() // 60)} min)"
                        )
                except FileNotFoundError:
                    continue
                except OSError as e:
                    self.logger.error(f"Error al eliminar {artifact.name}: {e}")

        return deleted_count
