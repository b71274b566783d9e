"""
Notificación de backups completados por webhooks de chat
"""
from typing import Dict, List, Optional
import requests
from ..config import Config
from ..logger import LoggerService
from ..models import NotifyMedium


class Notifier:
    """Envía un aviso de backup completado al medio configurado"""

    TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[int] = None):
        self.session = session or requests.Session()
        self.timeout = timeout or Config.NOTIFY_TIMEOUT
        self.logger = LoggerService.get_logger("Notifier")

    def notify(self, mediums: List[NotifyMedium], context: Dict[str, str]) -> int:
        """
        Envía el aviso por cada medio indicado

        Los errores se registran y no se propagan: la notificación nunca
        hace fallar un backup que ya fue entregado.

        Args:
            mediums: Medios de notificación
            context: Datos del backup, por ejemplo {"databaseName": "db1"}

        Returns:
            Cantidad de notificaciones enviadas
        """
        text = f"Backup de {context.get('databaseName', '?')} completado"
        sent = 0
        for medium in mediums:
            if medium is NotifyMedium.NONE:
                continue
            try:
                if self._send(medium, text):
                    sent += 1
            except requests.RequestException as e:
                self.logger.error(f"Error notificando por {medium.value}: {e}")
        return sent

    def _send(self, medium: NotifyMedium, text: str) -> bool:
        if medium is NotifyMedium.SLACK:
            url, payload = Config.SLACK_WEBHOOK_URL, {"text": text}
        elif medium is NotifyMedium.DISCORD:
            url, payload = Config.DISCORD_WEBHOOK_URL, {"content": text}
        elif medium is NotifyMedium.TELEGRAM:
            url = self.TELEGRAM_API.format(token=Config.TELEGRAM_BOT_TOKEN) if Config.TELEGRAM_BOT_TOKEN else ""
            payload = {"chat_id": Config.TELEGRAM_CHAT_ID, "text": text}
        else:
            return False

        if not url:
            self.logger.warning(f"Notificación {medium.value} sin configurar, se omite")
            return False

        response = self.session.post(url, json=payload, timeout=self.timeout)
        response.raise_for_status()
        self.logger.info(f"Notificación enviada por {medium.value}")
        return True
