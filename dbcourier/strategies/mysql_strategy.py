"""
Estrategia de volcado para MySQL/MariaDB
"""
from typing import List
from .base_strategy import BackupStrategy
from ..models import BackupConfig, DumpCommand


class MySQLBackupStrategy(BackupStrategy):
    """Estrategia de volcado para MySQL/MariaDB"""

    def build_commands(self, config: BackupConfig) -> List[DumpCommand]:
        """
        Construye una única invocación de mysqldump para todas las bases

        mysqldump acepta varias bases con --databases, así que se genera un
        solo proceso. La contraseña viaja en MYSQL_PWD y nunca como argumento.

        Args:
            config: Configuración de la base de datos

        Returns:
            Lista con un único comando
        """
        names = config.database_names()
        cmd = [
            '-h', config.host,
            '-u', config.user,
            '--databases',
            *names
        ]
        self.logger.debug(f"Comando mysqldump para: {', '.join(names)}")
        return [
            DumpCommand(
                database_name=",".join(names),
                executable='mysqldump',
                args=cmd,
                env_overrides={'MYSQL_PWD': config.password}
            )
        ]
