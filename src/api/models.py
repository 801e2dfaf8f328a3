"""Pydantic models for API request/response validation"""
from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class ClassifyRequest(BaseModel):
    """Request model for single-item classification"""
    model_config = ConfigDict(populate_by_name=True)

    image: str = Field(default="", description="Image as a data URL")
    api_key: Optional[str] = Field(
        default=None,
        alias="apiKey",
        description="Caller's AI key, used only when the server has none"
    )


class EnhancedClassifyRequest(BaseModel):
    """Request model for multi-item classification"""
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(default="", alias="imageUrl", description="http(s) or data URL of the image")
    enable_ocr: bool = Field(default=True, alias="enableOCR")
    enable_explanation: bool = Field(default=True, alias="enableExplanation")
    user_location: Optional[str] = Field(default=None, alias="userLocation")
    api_key: Optional[str] = Field(default=None, alias="apiKey")


class ChatResponse(BaseModel):
    """Response model for chat endpoint"""
    response: str = Field(..., description="Assistant's response")


class CheckAIRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_key: Optional[str] = Field(default=None, alias="apiKey")


class CheckAIResponse(BaseModel):
    ok: bool
    message: str


class DashboardResponse(BaseModel):
    """Home dashboard summary"""
    total_pickups: int
    pending_pickups: int
    completed_pickups: int
    total_classifications: int
    stats: Optional[Dict[str, Any]] = None
    rank: str
    level_progress: Dict[str, int]
    carbon_equivalents: Dict[str, int]


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Service status")
    database: str = Field(..., description="Database connection status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response model"""
    error: str = Field(..., description="Error message")
    fields: Optional[Dict[str, str]] = Field(None, description="Field-level validation messages")
