from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from colorgen import __version__
from colorgen.api.v1 import router as v1_router
from colorgen.schemas import HealthResponse
from colorgen.services.colors.errors import ColorGenError
from colorgen.utils.logging import get_logger, logger

get_logger()

app = FastAPI(
    title="colorgen",
    description="Material Design 3 color schemes from images and seed colors",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(v1_router)


@app.exception_handler(ColorGenError)
async def color_error_handler(request: Request, exc: ColorGenError):
    """Input errors that escape a route become 400 responses."""
    logger.bind(path=request.url.path, error_type=type(exc).__name__).warning(str(exc))
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/healthz", response_model=HealthResponse)
def healthz():
    """Health check endpoint."""
    return HealthResponse(ok=True, version=__version__)
