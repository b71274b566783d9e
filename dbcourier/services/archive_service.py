"""
Compresión del volcado en un archivo zip de un solo fichero
"""
import asyncio
from pathlib import Path
from ..exceptions import CompressionFailure
from ..logger import LoggerService
from ..models import archive_path_for


class Archiver:
    """Comprime un DumpFile completo con zip -j"""

    def __init__(self, executable: str = 'zip'):
        self.executable = executable
        self.logger = LoggerService.get_logger("Archiver")

    async def compress(self, dump_file: Path, database_name: str) -> Path:
        """
        Genera {dump_file}.zip sin eliminar el volcado original

        Args:
            dump_file: Volcado completo
            database_name: Base de datos, para los mensajes de error

        Returns:
            Ruta del archivo comprimido

        Raises:
            CompressionFailure: El compresor no pudo ejecutarse o falló
        """
        archive_file = archive_path_for(dump_file)

        try:
            process = await asyncio.create_subprocess_exec(
                self.executable, '-j', str(archive_file), str(dump_file),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT
            )
            output, _ = await process.communicate()
        except OSError as e:
            raise CompressionFailure(
                f"Error comprimiendo {database_name}: {e}", database_name
            ) from e

        if process.returncode != 0:
            detail = (output or b'').decode('utf-8', errors='replace').strip()
            raise CompressionFailure(
                f"Error comprimiendo {database_name}: {self.executable} terminó con "
                f"código {process.returncode} {detail}".strip(),
                database_name
            )

        self.logger.info(f"Comprimido: {archive_file.name}")
        return archive_file
