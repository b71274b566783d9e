"""
Factory para crear estrategias de volcado
"""
import shutil
from typing import List, Optional
from ..config import Config
from ..exceptions import ConfigError, UnsupportedEngine
from ..models import BackupConfig, DatabaseEngine, DumpCommand
from ..strategies.base_strategy import BackupStrategy
from ..strategies.mysql_strategy import MySQLBackupStrategy
from ..strategies.postgresql_strategy import PostgreSQLBackupStrategy


class BackupStrategyFactory:
    """Factory para crear estrategias de volcado (Factory Pattern)"""

    # Mapeo exacto de tipos a estrategias
    _strategies = {
        DatabaseEngine.MYSQL.value: MySQLBackupStrategy,
        DatabaseEngine.POSTGRES.value: PostgreSQLBackupStrategy,
    }

    @classmethod
    def create(cls, db_type: Optional[str]) -> Optional[BackupStrategy]:
        """
        Crea una estrategia según el tipo de base de datos

        Args:
            db_type: Tipo de base de datos (mysql, postgres)

        Returns:
            Instancia de BackupStrategy o None si el tipo no es soportado
        """
        strategy_class = cls._strategies.get(db_type)
        if strategy_class:
            return strategy_class()
        return None

    @classmethod
    def missing_tools(cls) -> List[str]:
        """
        Comprueba que zip, pg_dump y mysqldump estén en PATH

        Returns:
            Ejecutables de Config.REQUIRED_TOOLS ausentes del PATH
        """
        return [tool for tool in Config.REQUIRED_TOOLS if not shutil.which(tool)]


def build_dump_commands(config: BackupConfig) -> List[DumpCommand]:
    """
    Resuelve la configuración en los comandos de volcado a lanzar

    Args:
        config: Configuración de la base de datos

    Returns:
        Comandos de volcado, al menos uno

    Raises:
        UnsupportedEngine: El tipo no tiene estrategia registrada
        ConfigError: No hay nombres de base de datos
    """
    strategy = BackupStrategyFactory.create(config.type)
    if not strategy:
        raise UnsupportedEngine(f"Tipo de base de datos no soportado: {config.type}")

    if not config.database_names():
        raise ConfigError("db_name no contiene ninguna base de datos")

    return strategy.build_commands(config)
