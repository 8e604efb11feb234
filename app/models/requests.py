"""Request models for the Roomy Listing Parser API."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class AirbnbParseRequest(BaseModel):
    """Request model for the Airbnb listing parse endpoint."""
    
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "url": "https://www.airbnb.co.kr/rooms/12345678"
            }
        }
    )
    
    url: StrictStr = Field(..., min_length=1, description="Airbnb listing URL submitted by the host")
