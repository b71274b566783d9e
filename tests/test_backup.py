"""
Tests unitarios para el sistema de backup
"""
import json
import logging
import os
import shutil
import sys
import tempfile
import time
import unittest
from pathlib import Path
from unittest import mock

# Agregar la raíz del proyecto al path
sys.path.insert(0, str(Path(__file__).parent.parent))

import main
from dbcourier.config import Config
from dbcourier.exceptions import BackupRunError, ConfigError, UnsupportedEngine
from dbcourier.factories.strategy_factory import BackupStrategyFactory, build_dump_commands
from dbcourier.logger import LoggerService
from dbcourier.models import (
    BackupConfig, BackupReport, BackupResult, Destination, NotifyMedium,
    archive_path_for, dump_file_name
)
from dbcourier.repositories.config_repository import ConfigRepository
from dbcourier.services.cleanup_service import CleanupService


class TestModels(unittest.TestCase):
    """Tests para modelos de datos"""

    def test_database_names_comma_list(self):
        config = BackupConfig(type="mysql", db_name="a, b,,c")
        self.assertEqual(config.database_names(), ["a", "b", "c"])

    def test_database_names_singleton(self):
        config = BackupConfig(type="postgres", db_name="db1")
        self.assertEqual(config.database_names(), ["db1"])

    def test_empty_config(self):
        """Sin usuario, password ni bases la configuración está vacía"""
        self.assertTrue(BackupConfig(type="mysql", host="h").is_empty())
        self.assertFalse(BackupConfig(user="u").is_empty())

    def test_destination_parse(self):
        self.assertIs(Destination.parse("GMAIL"), Destination.GMAIL)
        self.assertIs(Destination.parse("S3_BUCKET"), Destination.S3_BUCKET)
        self.assertIs(Destination.parse("FTP"), Destination.UNRECOGNIZED)

    def test_destination_parse_is_exact(self):
        """Solo GMAIL y S3_BUCKET literales activan una entrega"""
        for value in ("gmail", "Gmail", " S3_BUCKET", "s3_bucket", "S3_BUCKET\n"):
            self.assertIs(Destination.parse(value), Destination.UNRECOGNIZED, value)
        self.assertIs(Destination.parse(None), Destination.UNRECOGNIZED)

    def test_notify_medium_parse(self):
        self.assertIs(NotifyMedium.parse("slack"), NotifyMedium.SLACK)
        self.assertIs(NotifyMedium.parse("PIGEON"), NotifyMedium.NONE)

    def test_artifact_names(self):
        dump = Path("/tmp/backups") / dump_file_name("1700000000000", "db1")
        self.assertEqual(dump.name, "1700000000000-db1.dump.sql")
        self.assertEqual(archive_path_for(dump).name, "1700000000000-db1.dump.sql.zip")

    def test_backup_report(self):
        report = BackupReport(results=[
            BackupResult(database_name="a", success=True, output_file="/x.zip"),
            BackupResult(database_name="b", success=False, error="boom", error_kind="DumpFailure"),
        ])
        self.assertFalse(report.ok)
        self.assertEqual([r.database_name for r in report.failed], ["b"])
        self.assertIn("DumpFailure", str(report.failed[0]))
        self.assertIn("b (DumpFailure)", str(BackupRunError(report)))


class TestBackupStrategyFactory(unittest.TestCase):
    """Tests para la construcción de comandos"""

    def test_mysql_single_command_for_all_databases(self):
        config = BackupConfig(type="mysql", host="h", user="u", password="secret", db_name="a,b")
        commands = build_dump_commands(config)

        self.assertEqual(len(commands), 1)
        command = commands[0]
        self.assertEqual(command.executable, "mysqldump")
        self.assertEqual(command.args, ["-h", "h", "-u", "u", "--databases", "a", "b"])
        self.assertEqual(command.env_overrides, {"MYSQL_PWD": "secret"})
        self.assertEqual(command.database_name, "a,b")

    def test_postgres_one_command_per_database(self):
        config = BackupConfig(type="postgres", host="h", user="u", password="secret", db_name="a,b")
        commands = build_dump_commands(config)

        self.assertEqual(len(commands), 2)
        self.assertEqual(commands[0].args, ["-h", "h", "-U", "u", "-d", "a"])
        self.assertEqual(commands[1].args, ["-h", "h", "-U", "u", "-d", "b"])
        for command in commands:
            self.assertEqual(command.executable, "pg_dump")
            self.assertEqual(command.env_overrides, {"PGPASSWORD": "secret"})

    def test_password_never_in_arguments(self):
        for engine in ("mysql", "postgres"):
            config = BackupConfig(type=engine, host="h", user="u", password="s3cr3t", db_name="a,b")
            for command in build_dump_commands(config):
                self.assertNotIn("s3cr3t", " ".join(command.args))

    def test_command_env_merges_parent_environment(self):
        config = BackupConfig(type="postgres", host="h", user="u", password="p", db_name="a")
        with mock.patch.dict(os.environ, {"PATH_MARKER": "1"}):
            env = build_dump_commands(config)[0].env()
        self.assertEqual(env["PGPASSWORD"], "p")
        self.assertEqual(env["PATH_MARKER"], "1")

    def test_engine_type_is_exact(self):
        for engine in ("PostgreSQL", "postgresql", "MYSQL", " mysql"):
            self.assertIsNone(BackupStrategyFactory.create(engine), engine)
            with self.assertRaises(UnsupportedEngine):
                build_dump_commands(BackupConfig(type=engine, user="u", password="p", db_name="a"))

    def test_unsupported_engine(self):
        self.assertIsNone(BackupStrategyFactory.create('oracle'))
        with self.assertRaises(UnsupportedEngine):
            build_dump_commands(BackupConfig(type="oracle", user="u", password="p", db_name="a"))

    def test_missing_database_names(self):
        with self.assertRaises(ConfigError):
            build_dump_commands(BackupConfig(type="mysql", user="u", password="p", db_name=" , "))

    def test_missing_tools(self):
        with mock.patch("dbcourier.factories.strategy_factory.shutil.which",
                        side_effect=lambda tool: None if tool == "pg_dump" else f"/usr/bin/{tool}"):
            self.assertEqual(BackupStrategyFactory.missing_tools(), ["pg_dump"])


class TestConfigRepository(unittest.TestCase):
    """Tests para ConfigRepository"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = Path(self.temp_dir) / "config.json"
        self.repo = ConfigRepository(self.config_file)

    def tearDown(self):
        if Path(self.temp_dir).exists():
            shutil.rmtree(self.temp_dir)

    def test_environment_fallback(self):
        env = {
            "DB_TYPE": "mysql", "DB_HOST": "db", "DB_USER": "root",
            "DB_PASSWORD": "pw", "DB_NAME": "a,b"
        }
        with mock.patch.dict(os.environ, env):
            config = self.repo.get_backup_config()
        self.assertEqual(config, BackupConfig("mysql", "db", "root", "pw", "a,b"))

    def test_json_config_resolves_env_references(self):
        self.config_file.write_text(json.dumps({
            "database": {
                "type": "postgres",
                "host": "h",
                "user": "${TEST_PG_USER}",
                "password": "${TEST_PG_PASSWORD}",
                "db_name": "db1"
            }
        }), encoding="utf-8")

        with mock.patch.dict(os.environ, {"TEST_PG_USER": "u", "TEST_PG_PASSWORD": "p"}):
            config = self.repo.get_backup_config()

        self.assertEqual(config.user, "u")
        self.assertEqual(config.password, "p")
        self.assertEqual(config.database_names(), ["db1"])

    def test_invalid_json(self):
        self.config_file.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ConfigError):
            self.repo.get_backup_config()

    def test_create_example_config(self):
        self.assertTrue(self.repo.create_example_config())
        self.assertIn("database", self.repo.load())


class TestCleanupService(unittest.TestCase):
    """Tests para CleanupService"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.service = CleanupService(stale_minutes=60)

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_remove_artifacts_is_idempotent(self):
        dump = self.temp_dir / "1-db.dump.sql"
        dump.write_text("data")
        archive_path_for(dump).write_text("zip")

        self.assertEqual(self.service.remove_artifacts(dump), 2)
        self.assertFalse(dump.exists())
        self.assertFalse(archive_path_for(dump).exists())
        self.assertEqual(self.service.remove_artifacts(dump), 0)

    def test_purge_nonexistent_directory(self):
        self.assertEqual(self.service.purge_stale_artifacts(self.temp_dir / "fake"), 0)

    def test_purge_only_old_artifacts(self):
        old = self.temp_dir / "1-old.dump.sql"
        old_zip = archive_path_for(old)
        recent = self.temp_dir / "2-new.dump.sql"
        other = self.temp_dir / "notes.txt"
        for path in (old, old_zip, recent, other):
            path.write_text("x")
        two_hours_ago = time.time() - 2 * 3600
        for path in (old, old_zip, other):
            os.utime(path, (two_hours_ago, two_hours_ago))

        self.assertEqual(self.service.purge_stale_artifacts(self.temp_dir), 2)
        self.assertFalse(old.exists())
        self.assertFalse(old_zip.exists())
        self.assertTrue(recent.exists())
        self.assertTrue(other.exists())


class TestMain(unittest.TestCase):
    """Tests para el punto de entrada"""

    def setUp(self):
        tools = mock.patch.object(BackupStrategyFactory, "missing_tools", return_value=[])
        self.missing_tools = tools.start()
        self.addCleanup(tools.stop)
        config = mock.patch.object(main.ConfigRepository, "get_backup_config",
                                   return_value=BackupConfig("postgres", "h", "u", "p", "db1"))
        config.start()
        self.addCleanup(config.stop)

    def test_check_reports_missing_tools(self):
        self.missing_tools.return_value = ["zip"]
        self.assertEqual(main.main(["--check"]), 1)
        self.missing_tools.return_value = []
        self.assertEqual(main.main(["--check"]), 0)

    def test_run_aborts_before_backup_when_tools_missing(self):
        self.missing_tools.return_value = ["zip"]
        with mock.patch.object(main, "BackupService") as service_cls:
            self.assertEqual(main.main([]), 1)
        service_cls.assert_not_called()

    def test_failed_run_exit_code(self):
        report = BackupReport(results=[
            BackupResult(database_name="db1", success=False, error="x", error_kind="DumpFailure")
        ])
        with mock.patch.object(main, "BackupService") as service_cls:
            service_cls.return_value.run_sync.side_effect = BackupRunError(report)
            self.assertEqual(main.main([]), 1)

    def test_db_argument_overrides_names(self):
        with mock.patch.object(main, "BackupService") as service_cls:
            self.assertEqual(main.main(["--db", "x,y"]), 0)
        config = service_cls.return_value.run_sync.call_args[0][0]
        self.assertEqual(config.database_names(), ["x", "y"])


class TestRequiredTools(unittest.TestCase):
    """La verificación previa usa Config.REQUIRED_TOOLS"""

    def test_missing_tools_follows_config(self):
        with mock.patch.object(Config, "REQUIRED_TOOLS", ["zip", "custom-dump"]), \
                mock.patch("dbcourier.factories.strategy_factory.shutil.which",
                           side_effect=lambda tool: "/usr/bin/zip" if tool == "zip" else None):
            self.assertEqual(BackupStrategyFactory.missing_tools(), ["custom-dump"])


class TestLoggerService(unittest.TestCase):
    """Tests para LoggerService"""

    def test_console_only_when_file_logging_disabled(self):
        with mock.patch.object(Config, "LOG_TO_FILE", False), \
                mock.patch.object(Config, "ensure_directories") as ensure:
            logger = LoggerService.get_logger("ConsoleOnlyTest")

        self.assertEqual([type(h) for h in logger.handlers], [logging.StreamHandler])
        ensure.assert_not_called()

    def test_file_handler_is_delayed(self):
        with mock.patch.object(Config, "LOG_TO_FILE", True):
            logger = LoggerService.get_logger("DelayedFileTest")
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]

        self.assertEqual(len(file_handlers), 1)
        self.assertIsNone(file_handlers[0].stream)


if __name__ == '__main__':
    unittest.main(verbosity=2)
