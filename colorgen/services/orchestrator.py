"""
colorgen Scheme Orchestrator
Chains decode -> quantize -> score -> palettes -> scheme -> surface adjustments
for the three seed sources (color, pixel buffer, encoded image).
"""
import time
from dataclasses import dataclass, field
from typing import Any, List, Optional

from colorgen.config import config
from colorgen.services import imaging
from colorgen.services.colors.color_utils import RGBColor, parse_color
from colorgen.services.colors.errors import EmptyInputError
from colorgen.services.colors.postprocess import adjust
from colorgen.services.colors.quantize import quantize
from colorgen.services.colors.scheme import ColorScheme, scheme_from_seed
from colorgen.services.colors.score import ScoredColor, select
from colorgen.utils.ids import generate_request_id
from colorgen.utils.logging import logger
from colorgen.utils.metrics import get_metrics, performance_monitor


@dataclass(frozen=True)
class SchemeResult:
    """Seed, ranked seed candidates (image sources only) and the finished scheme."""
    seed: RGBColor
    scheme: ColorScheme
    candidates: List[ScoredColor] = field(default_factory=list)
    quantized_count: int = 0
    request_id: str = ""


def _resolve(variant: Optional[str], content: Optional[bool], adjust_surfaces: Optional[bool]):
    variant = variant if variant is not None else config.DEFAULT_VARIANT
    if not config.validate_variant(variant):
        raise ValueError(f"Unknown variant: {variant}. Supported: {', '.join(config.SUPPORTED_VARIANTS)}")
    content = config.CONTENT_PALETTES if content is None else content
    adjust_surfaces = config.SURFACE_ADJUST if adjust_surfaces is None else adjust_surfaces
    return variant, content, adjust_surfaces


def _build(seed: RGBColor, variant: str, content: bool, adjust_surfaces: bool, request_id: str) -> ColorScheme:
    with performance_monitor("scheme", request_id=request_id):
        scheme = scheme_from_seed(seed, variant=variant, content=content)
        if adjust_surfaces:
            scheme = adjust(scheme)
    return scheme


def _record_failure(request_id: str, source: str, start_time: float, error: Exception):
    logger.bind(
        request_id=request_id,
        source=source,
        ms_total=(time.time() - start_time) * 1000,
        result="error",
        error_type=type(error).__name__,
    ).error(f"Scheme generation failed: {str(error)}")
    get_metrics().increment_failure_count(type(error).__name__.lower())


def scheme_from_color(color: Any,
                      variant: Optional[str] = None,
                      content: Optional[bool] = None,
                      adjust_surfaces: Optional[bool] = None) -> SchemeResult:
    """
    Build a scheme from an explicit seed color.

    Args:
        color: RGBColor, hex string or (r, g, b) sequence
        variant: Palette variant, defaults to config.DEFAULT_VARIANT
        content: Content palettes (seed chroma kept), defaults to config
        adjust_surfaces: Apply surface post-processing, defaults to config

    Raises:
        InvalidColorError: For a malformed color
        ValueError: For an unknown variant
    """
    request_id = generate_request_id("color")
    start_time = time.time()

    try:
        seed = parse_color(color)
        variant, content, adjust_surfaces = _resolve(variant, content, adjust_surfaces)
        scheme = _build(seed, variant, content, adjust_surfaces, request_id)
    except Exception as e:
        _record_failure(request_id, "color", start_time, e)
        raise

    get_metrics().increment_request_count("color")
    logger.bind(request_id=request_id, seed=seed.hex, variant=variant,
                ms_total=(time.time() - start_time) * 1000).info("Scheme generated from color")
    return SchemeResult(seed=seed, scheme=scheme, request_id=request_id)


def scheme_from_pixels(pixels: Any,
                       variant: Optional[str] = None,
                       content: Optional[bool] = None,
                       adjust_surfaces: Optional[bool] = None,
                       max_colors: Optional[int] = None,
                       quantizer: Optional[str] = None,
                       alpha_threshold: Optional[int] = None,
                       candidates: Optional[int] = None,
                       request_id: Optional[str] = None,
                       source: str = "pixels") -> SchemeResult:
    """
    Build a scheme from a pixel buffer: quantize, rank and use the best
    candidate as the seed.

    Args:
        pixels: (N, 3) / (N, 4) array, (H, W, C) array or RGBColor sequence
        variant: Palette variant, defaults to config.DEFAULT_VARIANT
        content: Content palettes, defaults to config.CONTENT_PALETTES
        adjust_surfaces: Surface post-processing, defaults to config.SURFACE_ADJUST
        max_colors: Quantizer budget, defaults to config.MAX_COLORS
        quantizer: "celebi" or "wu", defaults to config.QUANTIZER
        alpha_threshold: Minimum alpha of a visible pixel
        candidates: Number of hue-separated seed candidates to report

    Raises:
        EmptyInputError: If no visible pixels remain
        ValueError: For invalid parameters
    """
    request_id = request_id or generate_request_id("pixels")
    start_time = time.time()

    try:
        variant, content, adjust_surfaces = _resolve(variant, content, adjust_surfaces)
        max_colors = config.MAX_COLORS if max_colors is None else max_colors
        quantizer = quantizer or config.QUANTIZER
        alpha_threshold = config.ALPHA_THRESHOLD if alpha_threshold is None else alpha_threshold
        candidates = config.SEED_CANDIDATES if candidates is None else candidates
        if not config.validate_max_colors(max_colors):
            raise ValueError(f"max_colors must be between 1 and 256, got {max_colors}")
        if not config.validate_quantizer(quantizer):
            raise ValueError(f"Unknown quantizer: {quantizer}. Supported: {', '.join(config.SUPPORTED_QUANTIZERS)}")

        with performance_monitor("quantize", request_id=request_id, quantizer=quantizer):
            quantized = quantize(pixels, max_colors=max_colors, method=quantizer,
                                 alpha_threshold=alpha_threshold)
        get_metrics().record_cluster_count(len(quantized))

        with performance_monitor("score", request_id=request_id):
            ranked = select(quantized, desired=max(1, candidates))
        if not ranked:
            raise EmptyInputError("Quantizer produced no colors")
        seed = ranked[0].color

        scheme = _build(seed, variant, content, adjust_surfaces, request_id)
    except Exception as e:
        _record_failure(request_id, source, start_time, e)
        raise

    get_metrics().increment_request_count(source)
    logger.bind(
        request_id=request_id,
        seed=seed.hex,
        seed_score=round(ranked[0].score, 3),
        clusters=len(quantized),
        variant=variant,
        ms_total=(time.time() - start_time) * 1000,
        result="ok",
    ).info("Scheme generated from pixels")
    return SchemeResult(seed=seed, scheme=scheme, candidates=ranked,
                        quantized_count=len(quantized), request_id=request_id)


def scheme_from_image_bytes(file_bytes: bytes,
                            resize_width: Optional[int] = None,
                            **params) -> SchemeResult:
    """
    Decode an encoded image, downscale it and build a scheme from its pixels.

    Keyword arguments are passed to scheme_from_pixels.

    Raises:
        ImageDecodeError: If the bytes are not a supported image
    """
    request_id = generate_request_id("image")

    with performance_monitor("decode", request_id=request_id):
        try:
            image = imaging.decode_image(file_bytes)
        except Exception as e:
            get_metrics().increment_failure_count(type(e).__name__.lower())
            raise
        image = imaging.resize_for_quantization(image, resize_width)
        pixels = imaging.image_to_pixels(image)

    logger.bind(request_id=request_id, width=image.width, height=image.height).debug(
        "Image prepared for quantization")
    return scheme_from_pixels(pixels, request_id=request_id, source="image", **params)
