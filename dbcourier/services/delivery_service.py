"""
Entrega del archivo comprimido a un único destino
"""
import asyncio
from pathlib import Path
from typing import Optional
from ..exceptions import DeliveryFailure
from ..logger import LoggerService
from ..models import Destination


class DeliveryDispatcher:
    """Envía el backup por correo o lo sube a S3 según BACKUP_DEST"""

    def __init__(self, destination: Destination, mailer=None, storage=None):
        """
        Args:
            destination: Destino configurado
            mailer: Colaborador con send(archive_path)
            storage: Colaborador con upload(key, data)
        """
        self.destination = destination
        self.mailer = mailer
        self.storage = storage
        self.logger = LoggerService.get_logger("DeliveryDispatcher")

    async def deliver(self, archive_file: Path, dump_file: Path, database_name: str) -> Optional[str]:
        """
        Entrega el archivo comprimido al destino configurado

        Args:
            archive_file: Archivo comprimido
            dump_file: Volcado del que proviene (define la clave en S3)
            database_name: Base de datos, para los mensajes de error

        Returns:
            Destino usado o None si la entrega se omitió

        Raises:
            DeliveryFailure: El colaborador de entrega falló
        """
        if self.destination is Destination.UNRECOGNIZED:
            self.logger.debug(f"Sin destino configurado, no se entrega {archive_file}")
            return None

        try:
            if self.destination is Destination.GMAIL:
                await asyncio.to_thread(self.mailer.send, archive_file)
            else:
                key = f"{Path(dump_file).name}.zip"
                await asyncio.to_thread(self._upload, key, Path(archive_file))
        except Exception as e:
            raise DeliveryFailure(
                f"Error entregando {database_name} a {self.destination.value}: {e}",
                database_name
            ) from e

        self.logger.info(f"{database_name} entregado a {self.destination.value}")
        return self.destination.value

    def _upload(self, key: str, archive_file: Path):
        """Lee el comprimido completo y lo sube con la clave indicada"""
        self.storage.upload(key, archive_file.read_bytes())
