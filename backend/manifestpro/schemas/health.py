from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    providers: dict[str, bool]
    timestamp: datetime
    environment: str
    version: str


class ProviderCheckResponse(BaseModel):
    providers: dict[str, bool]
    timestamp: datetime
