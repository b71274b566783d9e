"""
Servicio principal que orquesta los backups
"""
import asyncio
import time
from pathlib import Path
from typing import Optional
from ..config import Config
from ..exceptions import BackupError, BackupRunError
from ..factories.strategy_factory import build_dump_commands
from ..integrations import Mailer, Notifier, S3Storage
from ..logger import LoggerService
from ..models import (
    BackupConfig, BackupReport, BackupResult, Destination, DumpJob,
    NotifyMedium, dump_file_name
)
from .archive_service import Archiver
from .cleanup_service import CleanupService
from .delivery_service import DeliveryDispatcher
from .dump_runner import DumpRunner, ensure_directory


class BackupService:
    """Servicio principal que orquesta los backups"""

    def __init__(self, backup_dir: Optional[Path] = None,
                 destination: Optional[Destination] = None,
                 notify_medium: Optional[NotifyMedium] = None,
                 cleanup_service: Optional[CleanupService] = None,
                 dump_runner: Optional[DumpRunner] = None,
                 archiver: Optional[Archiver] = None,
                 dispatcher: Optional[DeliveryDispatcher] = None,
                 notifier=None):
        """
        Inicializa el servicio de backup

        Los colaboradores no indicados se crean a partir de Config.

        Args:
            backup_dir: Directorio de artefactos temporales
            destination: Destino de entrega
            notify_medium: Medio de notificación
            cleanup_service: Servicio de limpieza
            dump_runner: Ejecutor de volcados
            archiver: Compresor
            dispatcher: Entrega del comprimido
            notifier: Colaborador con notify(mediums, context)
        """
        self.logger = LoggerService.get_logger("BackupService")
        self.backup_dir = Path(backup_dir) if backup_dir else Config.BACKUP_DIR
        self.destination = destination or Destination.parse(Config.BACKUP_DEST)
        self.notify_medium = notify_medium or NotifyMedium.parse(Config.BACKUP_NOTIFICATION)

        self.cleanup_service = cleanup_service or CleanupService(Config.STALE_ARTIFACT_MINUTES)
        self.dump_runner = dump_runner or DumpRunner(self.cleanup_service)
        self.archiver = archiver or Archiver()
        self.dispatcher = dispatcher or self._default_dispatcher()
        self.notifier = notifier or Notifier()

    def _default_dispatcher(self) -> DeliveryDispatcher:
        """Crea solo el colaborador que exige el destino configurado"""
        mailer = storage = None
        if self.destination is Destination.GMAIL:
            mailer = Mailer()
        elif self.destination is Destination.S3_BUCKET:
            storage = S3Storage()
        return DeliveryDispatcher(self.destination, mailer=mailer, storage=storage)

    def run_sync(self, config: BackupConfig) -> BackupReport:
        """Ejecuta run() en un event loop nuevo"""
        return asyncio.run(self.run(config))

    async def run(self, config: BackupConfig) -> BackupReport:
        """
        Realiza el backup de todas las bases indicadas en la configuración

        Todos los pipelines se lanzan a la vez y se espera a que cada uno
        termine, con éxito o con error, antes de informar.

        Args:
            config: Configuración de la base de datos

        Returns:
            Resultado agregado (vacío si la configuración no indica nada)

        Raises:
            UnsupportedEngine: El tipo de base de datos no es soportado
            ConfigError: db_name no contiene bases de datos
            BackupRunError: Al menos un pipeline falló
        """
        if config.is_empty():
            self.logger.info("Sin configuración de base de datos, no se realiza backup")
            return BackupReport()

        try:
            commands = build_dump_commands(config)
        except BackupError as e:
            self.logger.error(f"[{config.type}] {e}")
            raise

        self.logger.info("=" * 70)
        self.logger.info(f"INICIANDO BACKUP {config.type.upper()}: {', '.join(config.database_names())}")
        self.logger.info("=" * 70)

        timestamp = str(int(time.time() * 1000))
        ensure_directory(self.backup_dir)
        self.cleanup_service.purge_stale_artifacts(self.backup_dir)

        jobs = [
            DumpJob(command=command, dump_file=self.backup_dir / dump_file_name(timestamp, command.database_name))
            for command in commands
        ]
        outcomes = await asyncio.gather(
            *(self._run_pipeline(job, config.type) for job in jobs),
            return_exceptions=True
        )

        report = BackupReport(results=[
            self._to_result(job, outcome) for job, outcome in zip(jobs, outcomes)
        ])
        self._print_summary(report)

        if not report.ok:
            raise BackupRunError(report)
        return report

    async def _run_pipeline(self, job: DumpJob, engine: str) -> BackupResult:
        """
        Volcado, compresión, entrega, limpieza y notificación de un DumpJob

        Args:
            job: Volcado a procesar
            engine: Tipo de base de datos, para los mensajes de error

        Returns:
            Resultado del backup de esta base
        """
        start_time = time.time()
        try:
            dump_file = await self.dump_runner.run(job)
            archive_file = await self.archiver.compress(dump_file, job.database_name)
            await self.dispatcher.deliver(archive_file, dump_file, job.database_name)
        except BackupError as e:
            self.cleanup_service.remove_artifacts(job.dump_file)
            self.logger.error(f"[{engine}] No se pudo respaldar {job.database_name}: {e.kind}: {e}")
            return BackupResult(
                database_name=job.database_name,
                success=False,
                error=str(e),
                error_kind=e.kind,
                duration_seconds=time.time() - start_time
            )
        except Exception:
            self.cleanup_service.remove_artifacts(job.dump_file)
            raise

        self.logger.info(f"Eliminando volcado {job.dump_file.name}")
        self.cleanup_service.remove_artifacts(job.dump_file)
        result = BackupResult(
            database_name=job.database_name,
            success=True,
            output_file=str(archive_file),
            duration_seconds=time.time() - start_time
        )

        try:
            await asyncio.to_thread(
                self.notifier.notify, [self.notify_medium], {"databaseName": job.database_name}
            )
        except Exception as e:
            self.logger.warning(f"No se pudo notificar el backup de {job.database_name}: {e}")
        return result

    def _to_result(self, job: DumpJob, outcome) -> BackupResult:
        """Convierte la salida de gather en un BackupResult"""
        if isinstance(outcome, BackupResult):
            return outcome
        self.logger.error(f"Error inesperado en {job.database_name}: {outcome!r}")
        return BackupResult(
            database_name=job.database_name,
            success=False,
            error=str(outcome),
            error_kind=type(outcome).__name__
        )

    def _print_summary(self, report: BackupReport):
        """
        Imprime resumen de la operación de backup

        Args:
            report: Resultado agregado
        """
        self.logger.info("=" * 70)
        self.logger.info("RESUMEN DEL PROCESO DE BACKUP")
        self.logger.info("=" * 70)

        for result in report.results:
            status = "✓ EXITOSO" if result.success else "✗ FALLIDO"
            self.logger.info(f"{status}: {result.database_name} ({result.duration_seconds:.2f}s)")
            if not result.success:
                self.logger.error(f"  Error [{result.error_kind}]: {result.error}")

        self.logger.info("-" * 70)
        self.logger.info(f"Backups exitosos: {len(report.succeeded)}")
        self.logger.info(f"Backups fallidos: {len(report.failed)}")
        self.logger.info("=" * 70)

        if report.failed:
            self.logger.warning(
                f"ATENCIÓN: {len(report.failed)} backup(s) fallaron. "
                "Revisa los errores arriba."
            )

