"""
colorgen API Schemas
Pydantic models for scheme generation request/response validation.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("colorgen", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


class SchemeColorRequest(BaseModel):
    """Scheme from an explicit seed color."""
    hex: str = Field(
        ...,
        pattern=r"^#?([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$",
        description="Seed color as #RRGGBB (the # and the 3-digit shorthand are accepted)"
    )
    variant: Optional[str] = Field(
        None,
        pattern="^(default|analogous|triadic|complementary)$",
        description="Tertiary palette variant"
    )
    content: Optional[bool] = Field(
        None,
        description="Keep the seed's own chroma in the primary palette"
    )
    adjust_surfaces: Optional[bool] = Field(
        None,
        description="Apply surface dimming/brightening after role assignment"
    )
    include_palettes: bool = Field(
        False,
        description="Include a PNG grid of the six tonal palettes"
    )


class CandidateEntry(BaseModel):
    """One ranked seed candidate from an image."""
    hex: str = Field(..., pattern=r"^#[0-9a-f]{6}$", description="Candidate color")
    population: int = Field(..., ge=0, description="Pixels assigned to this color by the quantizer")
    proportion: float = Field(..., ge=0.0, le=1.0, description="Population share of the candidate's hue window")
    score: float = Field(..., description="Ranking score (insignificant colors are heavily penalized)")
    hue: float = Field(..., ge=0.0, lt=360.0, description="HCT hue in degrees")
    chroma: float = Field(..., ge=0.0, description="HCT chroma")
    tone: float = Field(..., ge=0.0, le=100.0, description="HCT tone (L*)")


class SchemeResponse(BaseModel):
    """Main scheme generation response."""
    request_id: str = Field(..., description="Request identifier")
    seed: str = Field(..., pattern=r"^#[0-9a-f]{6}$", description="Seed color the scheme was built from")
    variant: str = Field(..., description="Tertiary palette variant used")
    content: bool = Field(..., description="Whether content palettes were used")
    adjust_surfaces: bool = Field(..., description="Whether surface post-processing was applied")
    light: Dict[str, str] = Field(..., description="Role -> #rrggbb for light mode")
    dark: Dict[str, str] = Field(..., description="Role -> #rrggbb for dark mode")
    amoled: Dict[str, str] = Field(..., description="Role -> #rrggbb for amoled mode")
    candidates: Optional[List[CandidateEntry]] = Field(
        None,
        description="Hue-separated seed candidates in rank order (image sources only)"
    )
    swatch_png_b64: Optional[str] = Field(
        None,
        description="Base64-encoded PNG strip of the candidates with the seed outlined"
    )
    palettes_png_b64: Optional[str] = Field(
        None,
        description="Base64-encoded PNG grid, one row of standard tones per tonal palette"
    )
