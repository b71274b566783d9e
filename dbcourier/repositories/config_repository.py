"""
Repositorio para manejar configuración (Dependency Inversion)
"""
import json
import os
from pathlib import Path
from typing import Dict, Optional
from ..config import Config
from ..exceptions import ConfigError
from ..logger import LoggerService
from ..models import BackupConfig


class ConfigRepository:
    """Repositorio para manejar configuración"""

    # Variables de entorno usadas cuando no existe config.json
    ENV_KEYS = {
        'type': 'DB_TYPE',
        'host': 'DB_HOST',
        'user': 'DB_USER',
        'password': 'DB_PASSWORD',
        'db_name': 'DB_NAME',
    }

    def __init__(self, config_file: Optional[Path] = None):
        """
        Inicializa el repositorio de configuración

        Args:
            config_file: Ruta al archivo de configuración (opcional)
        """
        self.config_file = Path(config_file) if config_file else Config.CONFIG_FILE
        self.logger = LoggerService.get_logger("ConfigRepository")

    def load(self) -> Dict:
        """
        Carga configuración desde archivo JSON

        Returns:
            Diccionario con la configuración, vacío si no existe el archivo

        Raises:
            ConfigError: El archivo no es JSON válido
        """
        if not self.config_file.exists():
            return {}

        try:
            with open(self.config_file, "r", encoding='utf-8') as f:
                raw_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Error al parsear {self.config_file}: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigError(f"{self.config_file} debe contener un objeto JSON")
        self.logger.info(f"Configuración cargada: {self.config_file}")
        return raw_config

    def save(self, config: Dict) -> bool:
        """
        Guarda configuración en archivo JSON

        Args:
            config: Diccionario con la configuración

        Returns:
            True si se guardó exitosamente
        """
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding='utf-8') as f:
                json.dump(config, f, indent=4, ensure_ascii=False)
            self.logger.info(f"Configuración guardada exitosamente: {self.config_file}")
            return True
        except OSError as e:
            self.logger.error(f"Error al guardar la configuración: {e}")
            return False

    def get_backup_config(self) -> BackupConfig:
        """
        Obtiene la configuración de la base de datos a respaldar

        Usa la sección "database" de config.json si existe; en otro caso,
        las variables DB_* del entorno.

        Returns:
            Objeto BackupConfig
        """
        section = self.load().get('database')
        if section is None:
            return BackupConfig(**{
                field: os.getenv(env_var, "") for field, env_var in self.ENV_KEYS.items()
            })

        if not isinstance(section, dict):
            raise ConfigError("La sección 'database' debe ser un objeto")

        return BackupConfig(**{
            field: self._resolve_credential(str(section.get(field, "") or ""))
            for field in self.ENV_KEYS
        })

    def _resolve_credential(self, value: str) -> str:
        """
        Resuelve credencial desde variable de entorno si es necesario

        Args:
            value: Valor que puede contener referencia a variable de entorno

        Returns:
            Valor resuelto
        """
        if value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            resolved = os.getenv(env_var, "")
            if not resolved:
                self.logger.warning(f"Variable de entorno no encontrada: {env_var}")
            return resolved
        return value

    def create_example_config(self) -> bool:
        """
        Crea un archivo de configuración de ejemplo

        Returns:
            True si se creó exitosamente
        """
        return self.save(Config.DEFAULT_CONFIG)
