"""
Configuración centralizada del sistema de backup
"""
import logging
import os
from pathlib import Path
from dotenv import load_dotenv, find_dotenv


def _env_flag(name: str, default: bool) -> bool:
    """Interpreta una variable de entorno como booleano"""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Configuración centralizada del sistema"""

    ENV_FILE = find_dotenv(usecwd=True)

    # Cargar variables de entorno desde la raíz real del proyecto
    load_dotenv(ENV_FILE)

    # BASE_DIR debe ser la raíz donde está main.py
    BASE_DIR = Path(ENV_FILE).parent if ENV_FILE else Path(__file__).resolve().parents[1]

    BACKUP_DIR = Path(os.getenv("BACKUP_DIR")) if os.getenv("BACKUP_DIR") else (BASE_DIR / "backups")
    LOG_DIR = BASE_DIR / "Logs"
    CONFIG_FILE = BASE_DIR / "config.json"

    LOG_LEVEL = logging.INFO
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    # Escribir también a Logs/; el archivo se abre con el primer mensaje
    LOG_TO_FILE = _env_flag("LOG_TO_FILE", True)

    # Destino del archivo comprimido: GMAIL | S3_BUCKET
    BACKUP_DEST = os.getenv("BACKUP_DEST", "")
    # Medio de notificación: SLACK | DISCORD | TELEGRAM
    BACKUP_NOTIFICATION = os.getenv("BACKUP_NOTIFICATION", "")

    # Cualquier salida en stderr del volcado se considera fallo
    STDERR_IS_FATAL = _env_flag("STDERR_IS_FATAL", True)

    # Artefactos huérfanos de ejecuciones interrumpidas
    STALE_ARTIFACT_MINUTES = int(os.getenv("STALE_ARTIFACT_MINUTES", "60"))

    # Herramientas que deben existir en PATH antes de iniciar un backup
    REQUIRED_TOOLS = ['zip', 'pg_dump', 'mysqldump']

    # Correo (Gmail por defecto)
    MAIL_HOST = os.getenv("MAIL_HOST", "smtp.gmail.com")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "465"))
    MAIL_USER = os.getenv("MAIL_USER", "")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD", "")
    MAIL_TO = os.getenv("MAIL_TO", "")

    # Almacenamiento S3
    AWS_S3_BUCKET = os.getenv("AWS_S3_BUCKET", "")
    AWS_REGION = os.getenv("AWS_REGION", "")
    AWS_S3_ENDPOINT = os.getenv("AWS_S3_ENDPOINT", "")

    # Notificaciones
    SLACK_WEBHOOK_URL = os.getenv("SLACK_WEBHOOK_URL", "")
    DISCORD_WEBHOOK_URL = os.getenv("DISCORD_WEBHOOK_URL", "")
    TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
    TELEGRAM_CHAT_ID = os.getenv("TELEGRAM_CHAT_ID", "")
    NOTIFY_TIMEOUT = 10

    DEFAULT_CONFIG = {
        "database": {
            "type": "postgres",
            "host": "localhost",
            "user": "${DB_USER}",
            "password": "${DB_PASSWORD}",
            "db_name": "app_db"
        }
    }

    @classmethod
    def ensure_directories(cls):
        """Crea los directorios necesarios si no existen"""
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)
