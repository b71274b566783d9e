"""
Ejecución de los procesos de volcado y escritura de su salida a disco
"""
import asyncio
from pathlib import Path
from typing import Optional
from ..config import Config
from ..exceptions import DumpFailure, SpawnFailure
from ..logger import LoggerService
from ..models import DumpJob, DumpOutcome
from .cleanup_service import CleanupService

# Tamaño de lectura de stderr
_CHUNK_SIZE = 64 * 1024


def ensure_directory(path: Path) -> Path:
    """Crea el directorio de backups de forma recursiva e idempotente"""
    path.mkdir(parents=True, exist_ok=True)
    return path


class DumpRunner:
    """Lanza el volcado de un DumpJob y materializa su stdout en el DumpFile"""

    def __init__(self, cleanup_service: CleanupService, stderr_is_fatal: Optional[bool] = None):
        """
        Args:
            cleanup_service: Servicio que elimina artefactos parciales
            stderr_is_fatal: Si es True, cualquier salida en stderr es un fallo
        """
        self.cleanup_service = cleanup_service
        self.stderr_is_fatal = Config.STDERR_IS_FATAL if stderr_is_fatal is None else stderr_is_fatal
        self.logger = LoggerService.get_logger("DumpRunner")

    async def run(self, job: DumpJob) -> Path:
        """
        Ejecuta el volcado y espera a que el proceso termine

        La salida estándar del proceso se conecta directamente al archivo,
        por lo que el volcado nunca pasa por memoria.

        Args:
            job: Volcado a ejecutar

        Returns:
            Ruta del DumpFile completo

        Raises:
            SpawnFailure: No se pudo iniciar el ejecutable
            DumpFailure: Código de salida distinto de cero o salida en stderr
        """
        ensure_directory(job.dump_file.parent)
        outcome = DumpOutcome()

        self.logger.info(f"Iniciando volcado de {job.database_name}: {job.command.executable}")

        try:
            with open(job.dump_file, 'wb') as output:
                try:
                    process = await asyncio.create_subprocess_exec(
                        job.command.executable,
                        *job.command.args,
                        stdout=output,
                        stderr=asyncio.subprocess.PIPE,
                        env=job.command.env()
                    )
                except OSError as e:
                    raise SpawnFailure(
                        f"No se pudo iniciar {job.command.executable}: {e}",
                        job.database_name
                    ) from e

                await self._drain_stderr(process.stderr, job, outcome)
                outcome.return_code = await process.wait()
        except SpawnFailure:
            self.cleanup_service.remove_artifacts(job.dump_file)
            raise

        self._evaluate(job, outcome)
        self.logger.info(f"Backup de {job.database_name} completado exitosamente")
        return job.dump_file

    async def _drain_stderr(self, stream, job: DumpJob, outcome: DumpOutcome):
        """Acumula y registra cada bloque recibido por stderr"""
        while True:
            chunk = await stream.read(_CHUNK_SIZE)
            if not chunk:
                break
            text = chunk.decode('utf-8', errors='replace')
            outcome.stderr_chunks.append(text)
            if self.stderr_is_fatal:
                self.logger.error(f"[{job.database_name}] {text.strip()}")
            else:
                self.logger.warning(f"[{job.database_name}] {text.strip()}")

    def _evaluate(self, job: DumpJob, outcome: DumpOutcome):
        """Decide el resultado del volcado una vez que el proceso terminó"""
        failed = outcome.return_code != 0 or (self.stderr_is_fatal and outcome.has_stderr)
        if not failed:
            return

        self.cleanup_service.remove_artifacts(job.dump_file)
        raise DumpFailure(
            f"El volcado terminó con código {outcome.return_code}. "
            f"Error: {self._describe_stderr(outcome)}",
            job.database_name
        )

    @staticmethod
    def _describe_stderr(outcome: DumpOutcome) -> str:
        if outcome.error_message:
            return outcome.error_message
        if outcome.has_stderr:
            return f"stderr solo con espacios en blanco {''.join(outcome.stderr_chunks)!r}"
        return "sin salida en stderr"
