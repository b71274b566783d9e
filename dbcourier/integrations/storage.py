"""
Subida de backups a un bucket S3
"""
from typing import Optional
import boto3
from ..config import Config
from ..logger import LoggerService


class S3Storage:
    """Sube el contenido del archivo comprimido a S3"""

    def __init__(self, bucket: Optional[str] = None, region: Optional[str] = None,
                 endpoint: Optional[str] = None, client=None):
        self.bucket = bucket or Config.AWS_S3_BUCKET
        self.region = region or Config.AWS_REGION or None
        self.endpoint = endpoint or Config.AWS_S3_ENDPOINT or None
        self._client = client
        self.logger = LoggerService.get_logger("S3Storage")

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=self.region,
                endpoint_url=self.endpoint
            )
        return self._client

    def upload(self, key: str, data: bytes) -> str:
        """
        Sube el archivo al bucket configurado

        Args:
            key: Clave del objeto
            data: Contenido completo del archivo comprimido

        Returns:
            URI s3:// del objeto subido

        Raises:
            ValueError: AWS_S3_BUCKET no está configurado
            botocore.exceptions.ClientError: Error de S3
        """
        if not self.bucket:
            raise ValueError("AWS_S3_BUCKET no está configurado")

        self.client.put_object(Bucket=self.bucket, Key=key, Body=data)
        uri = f"s3://{self.bucket}/{key}"
        self.logger.info(f"Backup subido: {uri} ({len(data) / (1024 * 1024):.2f} MB)")
        return uri
