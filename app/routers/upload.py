from fastapi import APIRouter, Depends
from app.config import Settings, get_settings
from app.exceptions import InvalidContentLength
from app.schemas.response import ApiResponse
from app.schemas.upload import MAX_UPLOAD_SIZE, UploadUrlRequest, UploadUrlResponse
from app.services.s3_service import S3Service
import structlog

logger = structlog.get_logger()
router = APIRouter(tags=["upload"])


def get_s3_service(settings: Settings = Depends(get_settings)) -> S3Service:
    return S3Service(settings)


@router.post(
    "/get-upload-url",
    response_model=ApiResponse[UploadUrlResponse],
    response_model_exclude_none=True,
)
def get_upload_url(request: UploadUrlRequest, s3_service: S3Service = Depends(get_s3_service)):
    """
    Generate a presigned URL for uploading a PNG image directly to S3.

    Args:
        request: Contains the exact content length of the upcoming upload

    Returns:
        Envelope with the presigned upload descriptor
    """
    if request.content_length <= 0 or request.content_length > MAX_UPLOAD_SIZE:
        logger.warning("Rejected upload URL request", content_length=request.content_length)
        raise InvalidContentLength(
            f"content_length must be between 1 and {MAX_UPLOAD_SIZE} bytes"
        )

    params = s3_service.build_signing_parameters(request.content_length)
    descriptor = s3_service.generate_presigned_upload_url(params)

    logger.info(
        "Generated upload URL",
        file_name=descriptor.file_name,
        content_length=request.content_length
    )

    return ApiResponse[UploadUrlResponse].ok("pre-signed URL generated", descriptor)
