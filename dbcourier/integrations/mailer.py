"""
Envío del archivo comprimido por correo (Gmail por defecto)
"""
import smtplib
from email.message import EmailMessage
from pathlib import Path
from typing import Optional
from ..config import Config
from ..logger import LoggerService


class Mailer:
    """Envía el backup como adjunto a través de SMTP sobre SSL"""

    def __init__(self, host: Optional[str] = None, port: Optional[int] = None, user: Optional[str] = None,
                 password: Optional[str] = None, recipient: Optional[str] = None):
        self.host = host or Config.MAIL_HOST
        self.port = port or Config.MAIL_PORT
        self.user = user if user is not None else Config.MAIL_USER
        self.password = password if password is not None else Config.MAIL_PASSWORD
        self.recipient = recipient or Config.MAIL_TO or self.user
        self.logger = LoggerService.get_logger("Mailer")

    def build_message(self, archive_path: Path) -> EmailMessage:
        """
        Construye el mensaje con el backup adjunto

        Args:
            archive_path: Archivo comprimido a adjuntar

        Returns:
            Mensaje listo para enviar
        """
        archive_path = Path(archive_path)
        msg = EmailMessage()
        msg["Subject"] = f"Backup de base de datos: {archive_path.name}"
        msg["From"] = self.user
        msg["To"] = self.recipient
        msg.set_content(f"Se adjunta el backup {archive_path.name}.")
        msg.add_attachment(
            archive_path.read_bytes(),
            maintype="application",
            subtype="zip",
            filename=archive_path.name
        )
        return msg

    def send(self, archive_path: Path):
        """
        Envía el archivo comprimido como adjunto

        Args:
            archive_path: Archivo comprimido a enviar

        Raises:
            ValueError: No hay destinatario configurado
            smtplib.SMTPException: Error del servidor de correo
        """
        if not self.recipient:
            raise ValueError("MAIL_TO o MAIL_USER deben estar configurados")

        msg = self.build_message(archive_path)
        with smtplib.SMTP_SSL(self.host, int(self.port)) as server:
            if self.user and self.password:
                server.login(self.user, self.password)
            server.send_message(msg)
        self.logger.info(f"Backup enviado por correo a {self.recipient}")
