import boto3
from botocore.exceptions import ClientError
from app.config import settings
import logging

logger = logging.getLogger(__name__)


class R2Storage:
    """Cloudflare R2 through the S3 API: public previews bucket and private source bucket"""

    def __init__(self):
        if not settings.r2_configured:
            raise ValueError("R2 endpoint and credentials must be configured")

        self.s3_client = boto3.client(
            's3',
            endpoint_url=settings.r2_endpoint_url,
            aws_access_key_id=settings.r2_access_key_id,
            aws_secret_access_key=settings.r2_secret_access_key,
            region_name="auto"
        )
        self.previews_bucket = settings.r2_previews_bucket
        self.source_bucket = settings.r2_source_bucket
        self.previews_domain = settings.r2_previews_domain

    def public_url(self, key: str) -> str:
        return f"https://{self.previews_domain}/{key}"

    def upload_preview(self, file_content: bytes, key: str, content_type: str = "audio/mpeg") -> str:
        """Upload to the public previews bucket and return its public URL"""
        try:
            self.s3_client.put_object(
                Bucket=self.previews_bucket,
                Key=key,
                Body=file_content,
                ContentType=content_type
            )
            logger.info(f"Uploaded preview to {self.previews_bucket}/{key}")
            return self.public_url(key)
        except ClientError as e:
            logger.error(f"Failed to upload preview to R2: {str(e)}")
            raise

    def upload_source(self, file_content: bytes, key: str, content_type: str = "application/octet-stream") -> str:
        """Upload to the private source bucket and return the key"""
        try:
            self.s3_client.put_object(
                Bucket=self.source_bucket,
                Key=key,
                Body=file_content,
                ContentType=content_type
            )
            logger.info(f"Uploaded source file to {self.source_bucket}/{key}")
            return key
        except ClientError as e:
            logger.error(f"Failed to upload source file to R2: {str(e)}")
            raise

    def delete_preview(self, key: str) -> bool:
        try:
            self.s3_client.delete_object(Bucket=self.previews_bucket, Key=key)
            return True
        except ClientError as e:
            logger.error(f"Failed to delete preview from R2: {str(e)}")
            return False
