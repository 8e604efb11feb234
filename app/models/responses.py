"""Response models for the Roomy Listing Parser API."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel


class ListingData(BaseModel):
    """Listing fields returned to the guidebook creation form."""
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    
    listing_id: str = Field(..., description="Listing id extracted from the URL")
    title: Optional[str] = Field(None, description="og:title or <title>")
    description: Optional[str] = Field(None, description="og:description or meta description")
    image_url: Optional[str] = Field(None, description="og:image")
    url: Optional[str] = Field(None, description="og:url, or the submitted URL")


class AirbnbParseSuccessResponse(BaseModel):
    """Successful response of the Airbnb listing parse endpoint."""
    
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "data": {
                    "listingId": "12345678",
                    "title": "강남역 도보 5분 아늑한 원룸",
                    "description": "지하철역과 가까운 조용한 숙소입니다.",
                    "imageUrl": "https://a0.muscache.com/im/pictures/abc.jpg",
                    "url": "https://www.airbnb.co.kr/rooms/12345678"
                }
            }
        }
    )
    
    success: Literal[True] = True
    data: ListingData


class ErrorDetail(BaseModel):
    code: str = Field(..., description="Error code")
    message: str = Field(..., description="User-facing (Korean) error message")


class ApiErrorResponse(BaseModel):
    """Error response model for consistent error handling."""
    
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "error": {
                    "code": "NO_LISTING_ID",
                    "message": "URL에서 숙소 ID를 찾을 수 없습니다. /rooms/숫자 형식의 URL을 입력해주세요."
                }
            }
        }
    )
    
    success: Literal[False] = False
    error: ErrorDetail


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="API version")
    environment: str = Field(..., description="Deployment environment")
    timestamp: str = Field(..., description="ISO 8601 timestamp (UTC)")
