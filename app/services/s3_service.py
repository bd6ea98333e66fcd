import boto3
from botocore.client import BaseClient, Config
from botocore.exceptions import BotoCoreError, ClientError
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from app.config import Settings
from app.exceptions import SessionError, SigningError
from app.schemas.upload import SigningParameters, UploadUrlResponse
import structlog

logger = structlog.get_logger()

UPLOAD_TTL = timedelta(minutes=10)
UPLOAD_CONTENT_TYPE = "image/png"
UPLOAD_EXTENSION = "png"
FILE_NAME_FORMAT = "%Y-%m-%d-%H-%M-%S"
S3_HOST_SUFFIX = "s3.amazonaws.com"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_object_key(now: datetime) -> str:
    """Object key derived from the wall clock at second resolution."""
    return f"{now.strftime(FILE_NAME_FORMAT)}.{UPLOAD_EXTENSION}"


def ttl_minutes(ttl: timedelta) -> int:
    return int(ttl.total_seconds() // 60)


class S3Service:
    def __init__(self, settings: Settings, clock: Callable[[], datetime] = utc_now):
        self.settings = settings
        self.clock = clock

    @property
    def bucket_name(self) -> Optional[str]:
        return self.settings.aws_bucket

    def build_signing_parameters(self, content_length: int) -> SigningParameters:
        return SigningParameters(
            file_name=build_object_key(self.clock()),
            ttl=UPLOAD_TTL,
            content_length=content_length,
            bucket=self.bucket_name or "",
            content_type=UPLOAD_CONTENT_TYPE,
        )

    def create_client(self) -> BaseClient:
        """
        Open a session against the configured region and return an S3 client.

        Raises:
            SessionError: If bucket or region are not configured, or boto3
                cannot build the session (e.g. unknown profile).
        """
        if not self.bucket_name:
            raise SessionError("AWS_BUCKET is not set")
        if not self.settings.aws_region:
            raise SessionError("AWS_REGION is not set")

        try:
            session = boto3.session.Session(
                aws_access_key_id=self.settings.aws_access_key_id,
                aws_secret_access_key=self.settings.aws_secret_access_key,
                aws_session_token=self.settings.aws_session_token,
                region_name=self.settings.aws_region,
                profile_name=self.settings.aws_profile,
            )
            return session.client("s3", config=Config(signature_version="s3v4"))
        except (BotoCoreError, ValueError) as e:
            logger.error(
                "Failed to create AWS session",
                error=str(e),
                region=self.settings.aws_region
            )
            raise SessionError(str(e)) from e

    def generate_presigned_upload_url(self, params: SigningParameters) -> UploadUrlResponse:
        """
        Generate a presigned PUT URL for uploading one object to S3.

        Content-Type and Content-Length are part of the signature, so S3 itself
        rejects an upload that does not match them.

        Args:
            params: Bucket, key, content constraints and TTL to sign for

        Returns:
            Descriptor with the signed URL and how to use it
        """
        client = self.create_client()

        try:
            presigned_url = client.generate_presigned_url(
                'put_object',
                Params={
                    'Bucket': params.bucket,
                    'Key': params.file_name,
                    'ContentType': params.content_type,
                    'ContentLength': params.content_length,
                },
                ExpiresIn=int(params.ttl.total_seconds()),
                HttpMethod='PUT'
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "Failed to generate presigned URL",
                error=str(e),
                bucket=params.bucket,
                s3_key=params.file_name
            )
            raise SigningError(str(e)) from e

        # Approximation of the expiry embedded in the signature
        expiration_time = self.clock() + params.ttl
        host = f"{params.bucket}.{S3_HOST_SUFFIX}"

        logger.info(
            "Generated presigned URL",
            bucket=params.bucket,
            s3_key=params.file_name,
            content_length=params.content_length,
            expires_at=expiration_time.isoformat()
        )

        return UploadUrlResponse(
            method="PUT",
            pre_assigned_url=presigned_url,
            expiration_time=expiration_time,
            file_name=params.file_name,
            host=host,
            details=[
                "Use the pre-signed URL to upload the file",
                f"The URL will expire after {ttl_minutes(params.ttl)} minutes",
                f"The maximum upload size is {params.content_length} bytes",
            ],
            object_url=f"https://{host}/{params.file_name}",
        )
