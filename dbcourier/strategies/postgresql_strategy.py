"""
Estrategia de volcado para PostgreSQL
"""
from typing import List
from .base_strategy import BackupStrategy
from ..models import BackupConfig, DumpCommand


class PostgreSQLBackupStrategy(BackupStrategy):
    """Estrategia de volcado para PostgreSQL"""

    def build_commands(self, config: BackupConfig) -> List[DumpCommand]:
        """
        Construye una invocación de pg_dump por cada base de datos

        pg_dump solo acepta una base por ejecución.

        Args:
            config: Configuración de la base de datos

        Returns:
            Lista de comandos, uno por base
        """
        commands = []
        for name in config.database_names():
            commands.append(
                DumpCommand(
                    database_name=name,
                    executable='pg_dump',
                    args=['-h', config.host, '-U', config.user, '-d', name],
                    # Password por variable de entorno
                    env_overrides={'PGPASSWORD': config.password}
                )
            )
        return commands
