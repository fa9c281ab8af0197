from fastapi import APIRouter, Depends

from app.core.config import Settings, get_settings
from app.schemas import HealthResponse

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    # Reports configuration only; backend reachability is checked at startup.
    return HealthResponse(
        status="healthy",
        service=settings.service_name,
        bucket=settings.s3_bucket_name,
        region=settings.aws_region,
    )
