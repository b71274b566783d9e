"""
Integraciones externas: correo, almacenamiento y notificaciones
"""
from .mailer import Mailer
from .notifier import Notifier
from .storage import S3Storage

__all__ = ['Mailer', 'Notifier', 'S3Storage']
