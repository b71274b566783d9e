"""
Tests para las integraciones de correo, S3 y notificaciones
"""
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import requests

sys.path.insert(0, str(Path(__file__).parent.parent))

from dbcourier.config import Config
from dbcourier.integrations.mailer import Mailer
from dbcourier.integrations.notifier import Notifier
from dbcourier.integrations.storage import S3Storage
from dbcourier.models import NotifyMedium


class TestMailer(unittest.TestCase):
    """Tests para Mailer"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.archive = self.temp_dir / "1-db1.dump.sql.zip"
        self.archive.write_bytes(b"PKzip")
        self.mailer = Mailer(host="smtp.test", port=465, user="me@test", password="pw", recipient="ops@test")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_message_has_archive_attachment(self):
        msg = self.mailer.build_message(self.archive)
        attachments = list(msg.iter_attachments())

        self.assertEqual(msg["To"], "ops@test")
        self.assertEqual(len(attachments), 1)
        self.assertEqual(attachments[0].get_filename(), "1-db1.dump.sql.zip")
        self.assertEqual(attachments[0].get_content(), b"PKzip")

    def test_send_logs_in_and_sends(self):
        with mock.patch("dbcourier.integrations.mailer.smtplib.SMTP_SSL") as smtp_cls:
            self.mailer.send(self.archive)

        smtp_cls.assert_called_once_with("smtp.test", 465)
        server = smtp_cls.return_value.__enter__.return_value
        server.login.assert_called_once_with("me@test", "pw")
        server.send_message.assert_called_once()

    def test_send_without_recipient(self):
        mailer = Mailer(user="", password="", recipient="")
        mailer.recipient = ""
        with self.assertRaises(ValueError):
            mailer.send(self.archive)


class TestS3Storage(unittest.TestCase):
    """Tests para S3Storage"""

    def test_upload_puts_object(self):
        client = mock.Mock()
        storage = S3Storage(bucket="backups", client=client)

        uri = storage.upload("1-db1.dump.sql.zip", b"data")

        client.put_object.assert_called_once_with(Bucket="backups", Key="1-db1.dump.sql.zip", Body=b"data")
        self.assertEqual(uri, "s3://backups/1-db1.dump.sql.zip")

    def test_upload_without_bucket(self):
        storage = S3Storage(client=mock.Mock())
        storage.bucket = ""
        with self.assertRaises(ValueError):
            storage.upload("k", b"data")


class TestNotifier(unittest.TestCase):
    """Tests para Notifier"""

    def setUp(self):
        self.session = mock.Mock()
        self.notifier = Notifier(session=self.session, timeout=5)

    def test_slack_webhook(self):
        with mock.patch.object(Config, "SLACK_WEBHOOK_URL", "https://hooks.test/slack"):
            sent = self.notifier.notify([NotifyMedium.SLACK], {"databaseName": "db1"})

        self.assertEqual(sent, 1)
        self.session.post.assert_called_once_with(
            "https://hooks.test/slack", json={"text": "Backup de db1 completado"}, timeout=5
        )

    def test_discord_webhook(self):
        with mock.patch.object(Config, "DISCORD_WEBHOOK_URL", "https://hooks.test/discord"):
            self.notifier.notify([NotifyMedium.DISCORD], {"databaseName": "db1"})

        self.assertEqual(self.session.post.call_args[1]["json"], {"content": "Backup de db1 completado"})

    def test_telegram_bot_api(self):
        with mock.patch.object(Config, "TELEGRAM_BOT_TOKEN", "123:abc"), \
                mock.patch.object(Config, "TELEGRAM_CHAT_ID", "42"):
            self.notifier.notify([NotifyMedium.TELEGRAM], {"databaseName": "db1"})

        url = self.session.post.call_args[0][0]
        self.assertEqual(url, "https://api.telegram.org/bot123:abc/sendMessage")
        self.assertEqual(self.session.post.call_args[1]["json"]["chat_id"], "42")

    def test_unconfigured_medium_is_skipped(self):
        with mock.patch.object(Config, "SLACK_WEBHOOK_URL", ""):
            sent = self.notifier.notify([NotifyMedium.SLACK, NotifyMedium.NONE], {"databaseName": "db1"})

        self.assertEqual(sent, 0)
        self.session.post.assert_not_called()

    def test_request_error_is_not_raised(self):
        self.session.post.side_effect = requests.ConnectionError("unreachable")
        with mock.patch.object(Config, "SLACK_WEBHOOK_URL", "https://hooks.test/slack"):
            sent = self.notifier.notify([NotifyMedium.SLACK], {"databaseName": "db1"})
        self.assertEqual(sent, 0)


if __name__ == '__main__':
    unittest.main(verbosity=2)
