"""
colorgen v1 API Routes
Scheme generation from a seed color or an uploaded image.
"""
from typing import Any, Dict

from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from colorgen.config import config
from colorgen.schemas import CandidateEntry, ErrorResponse, SchemeColorRequest, SchemeResponse
from colorgen.services import orchestrator
from colorgen.services.colors.errors import ColorGenError, EmptyInputError, ImageDecodeError
from colorgen.services.colors.swatches import render_palette_grid, render_swatch_strip
from colorgen.utils.logging import logger
from colorgen.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Scheme generation"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    415: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


def _to_response(result: orchestrator.SchemeResult, adjust_surfaces: bool,
                 include_swatch: bool = False, include_palettes: bool = False) -> SchemeResponse:
    modes = result.scheme.to_dict()
    candidates = None
    swatch = None
    palettes = render_palette_grid(result.scheme.core) if include_palettes else None
    if result.candidates:
        candidates = [
            CandidateEntry(
                hex=c.color.hex,
                population=c.population,
                proportion=min(1.0, c.proportion),
                score=c.score,
                hue=c.hct.hue,
                chroma=c.hct.chroma,
                tone=c.hct.tone,
            )
            for c in result.candidates
        ]
        if include_swatch:
            swatch = render_swatch_strip([c.color.hex for c in result.candidates], highlight_index=0)

    return SchemeResponse(
        request_id=result.request_id,
        seed=result.seed.hex,
        variant=result.scheme.variant,
        content=result.scheme.content,
        adjust_surfaces=adjust_surfaces,
        light=modes["light"],
        dark=modes["dark"],
        amoled=modes["amoled"],
        candidates=candidates,
        swatch_png_b64=swatch,
        palettes_png_b64=palettes,
    )


@router.post("/scheme/color",
             response_model=SchemeResponse,
             responses=ERROR_RESPONSES,
             summary="Scheme From Color",
             description="Build light, dark and amoled role maps from a seed color")
async def scheme_from_color(request: SchemeColorRequest) -> SchemeResponse:
    """
    Build a scheme from an explicit seed color.

    Omitted options fall back to the service configuration.
    """
    adjust_surfaces = config.SURFACE_ADJUST if request.adjust_surfaces is None else request.adjust_surfaces
    hex_value = request.hex if request.hex.startswith("#") else f"#{request.hex}"
    try:
        result = orchestrator.scheme_from_color(
            hex_value,
            variant=request.variant,
            content=request.content,
            adjust_surfaces=adjust_surfaces,
        )
    except ColorGenError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return _to_response(result, adjust_surfaces, include_palettes=request.include_palettes)


@router.post("/scheme/image",
             response_model=SchemeResponse,
             responses=ERROR_RESPONSES,
             summary="Scheme From Image",
             description="Quantize an image, pick the best seed and build its scheme")
async def scheme_from_image(
    file: UploadFile = File(..., description="Image file (JPEG, PNG, WEBP, GIF or BMP)"),
    variant: str = Query(config.DEFAULT_VARIANT, pattern="^(default|analogous|triadic|complementary)$",
                         description="Tertiary palette variant"),
    content: bool = Query(config.CONTENT_PALETTES, description="Keep the seed's own chroma"),
    max_colors: int = Query(config.MAX_COLORS, ge=1, le=256, description="Quantizer color budget"),
    quantizer: str = Query(config.QUANTIZER, pattern="^(celebi|wu)$", description="Quantization method"),
    adjust_surfaces: bool = Query(config.SURFACE_ADJUST, description="Apply surface post-processing"),
    include_swatch: bool = Query(False, description="Include a PNG strip of the seed candidates"),
    include_palettes: bool = Query(False, description="Include a PNG grid of the six tonal palettes")
) -> SchemeResponse:
    """
    Build a scheme from an uploaded image.

    **Pipeline:** decode -> downscale -> quantize -> score -> palettes -> roles.

    **Returns:** role maps for every mode plus the ranked, hue-separated seed
    candidates; the first candidate is the seed.
    """
    if file.content_type and file.content_type not in config.SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    file_bytes = await file.read()
    try:
        result = orchestrator.scheme_from_image_bytes(
            file_bytes,
            variant=variant,
            content=content,
            max_colors=max_colors,
            quantizer=quantizer,
            adjust_surfaces=adjust_surfaces,
        )
    except ImageDecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EmptyInputError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    logger.bind(request_id=result.request_id, filename=file.filename).info(
        f"Image scheme ready, seed {result.seed.hex}")
    return _to_response(result, adjust_surfaces, include_swatch, include_palettes)


@router.get("/metrics",
            summary="Service Metrics",
            description="In-process counters and timing statistics")
async def get_service_metrics() -> Dict[str, Any]:
    """Get the metrics summary."""
    return get_metrics().get_summary()
