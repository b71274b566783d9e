#!/usr/bin/env python3
"""
Backup de bases de datos: volcado, compresión y entrega
Punto de entrada principal (la programación periódica queda en cron)

Uso:
    python main.py                  # Ejecutar backup una vez
    python main.py --db nombre_db   # Backup de una(s) BD específica(s)
    python main.py --check          # Verificar herramientas requeridas
    python main.py --init           # Crear archivos de configuración
"""
import sys
import argparse
from dataclasses import replace

from dbcourier.config import Config
from dbcourier.exceptions import BackupError, BackupRunError
from dbcourier.factories.strategy_factory import BackupStrategyFactory
from dbcourier.logger import LoggerService
from dbcourier.repositories.config_repository import ConfigRepository
from dbcourier.services.backup_service import BackupService


ENV_EXAMPLE = """# Variables de entorno para el backup
# Copia este archivo como .env y completa con tus credenciales

# Base de datos: mysql | postgres
DB_TYPE=postgres
DB_HOST=localhost
DB_USER=backup_user
DB_PASSWORD=tu_password_seguro
# Varias bases separadas por coma
DB_NAME=app_db

# Destino: GMAIL | S3_BUCKET
BACKUP_DEST=S3_BUCKET
# Notificación: SLACK | DISCORD | TELEGRAM
BACKUP_NOTIFICATION=SLACK

# Gmail
MAIL_USER=
MAIL_PASSWORD=
MAIL_TO=

# S3 (credenciales por la cadena estándar de AWS)
AWS_S3_BUCKET=
AWS_REGION=

# Webhooks
SLACK_WEBHOOK_URL=
DISCORD_WEBHOOK_URL=
TELEGRAM_BOT_TOKEN=
TELEGRAM_CHAT_ID=
"""


def parse_arguments(argv=None):
    """
    Parsea argumentos de línea de comandos

    Returns:
        Namespace con los argumentos parseados
    """
    parser = argparse.ArgumentParser(
        description='Backup de bases de datos con entrega por correo o S3',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Ejemplos:
  python main.py                    # Ejecutar backup
  python main.py --db db1,db2       # Backup de bases específicas
  python main.py --check            # Verificar zip, pg_dump y mysqldump
  python main.py --init             # Crear archivos de configuración
        """
    )

    parser.add_argument(
        '--db',
        type=str,
        metavar='NOMBRE',
        help='Base(s) de datos a respaldar, separadas por coma'
    )

    parser.add_argument(
        '--check',
        action='store_true',
        help='Verificar que las herramientas requeridas estén instaladas'
    )

    parser.add_argument(
        '--init',
        action='store_true',
        help='Crear archivos de configuración de ejemplo'
    )

    return parser.parse_args(argv)


def initialize_config() -> bool:
    """
    Inicializa archivos de configuración si no existen

    Returns:
        True si se creó algún archivo
    """
    logger = LoggerService.get_logger("Init")
    created_files = []

    if not Config.CONFIG_FILE.exists():
        if ConfigRepository().create_example_config():
            created_files.append(str(Config.CONFIG_FILE))

    env_example = Config.BASE_DIR / ".env.example"
    if not env_example.exists():
        try:
            env_example.write_text(ENV_EXAMPLE, encoding='utf-8')
            created_files.append(str(env_example))
        except OSError as e:
            logger.error(f"Error creando .env.example: {e}")

    for file in created_files:
        logger.info(f"Creado: {file}")

    return bool(created_files)


def check_tools() -> bool:
    """
    Verifica que zip, pg_dump y mysqldump estén en PATH

    Returns:
        True si no falta ninguna herramienta
    """
    logger = LoggerService.get_logger("Check")
    missing = BackupStrategyFactory.missing_tools()
    for tool in missing:
        logger.error(f"Comando {tool} no encontrado")
    if not missing:
        logger.info("Herramientas requeridas disponibles")
    return not missing


def main(argv=None) -> int:
    """Función principal"""
    args = parse_arguments(argv)

    if args.init:
        initialize_config()
        return 0

    if args.check:
        return 0 if check_tools() else 1

    # Sin las herramientas requeridas no se inicia ningún volcado
    if not check_tools():
        return 1

    logger = LoggerService.get_logger("Main")
    try:
        config = ConfigRepository().get_backup_config()
        if args.db:
            config = replace(config, db_name=args.db)
        BackupService().run_sync(config)
    except BackupRunError as e:
        logger.error(f"✗ {e}")
        return 1
    except BackupError as e:
        logger.error(f"✗ Backup fallido [{e.kind}]: {e}")
        return 1

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nPrograma interrumpido por el usuario")
        sys.exit(130)
