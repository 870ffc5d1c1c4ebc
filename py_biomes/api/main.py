"""FastAPI main application."""

import logging
from typing import Dict, List, Optional

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..core.biomes import BIOME_MATRIX, BIOMES, biome_counts, compute_biomes
from ..core.climate import ClimateKnobs
from ..core.mask_io import parse_mask
from ..core.palette import BIOME_COLORS, LEGEND_GROUPS


def configure_logging():
    """Route structlog through stdlib logging at the configured level."""
    logging.basicConfig(format="%(message)s", level=settings.log_level.upper())
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Climate Biome API",
    description="Classify hand-painted land/mountain masks into climate biomes",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
_DEFAULT_KNOBS = ClimateKnobs()


class KnobsModel(BaseModel):
    """Climate heuristics of a classification run."""

    itcz_floor: bool = Field(_DEFAULT_KNOBS.itcz_floor, description="Force minimum humidity near the equator")
    sub_dry: bool = Field(_DEFAULT_KNOBS.sub_dry, description="Keep the subtropical dry band")
    interior_dist: int = Field(_DEFAULT_KNOBS.interior_dist, description="Distance to coast where interior dryness starts")
    interior_dry: int = Field(_DEFAULT_KNOBS.interior_dry, description="Humidity change beyond interior_dist")
    coast_hum: int = Field(_DEFAULT_KNOBS.coast_hum, description="Humidity bonus near the coast")
    coast_range: int = Field(_DEFAULT_KNOBS.coast_range, description="Reach of the coastal bonus (0 disables)")
    shadow_strength: int = Field(_DEFAULT_KNOBS.shadow_strength, description="Windward bonus / leeward penalty (0 disables)")
    shadow_range: int = Field(_DEFAULT_KNOBS.shadow_range, description="Reach of the orographic shadow")
    cooling: int = Field(_DEFAULT_KNOBS.cooling, description="Temperature penalty on mountains")
    ocean_wind_steps: int = Field(_DEFAULT_KNOBS.ocean_wind_steps, description="Upwind march length for maritime air")

    def to_knobs(self) -> ClimateKnobs:
        return ClimateKnobs(**self.model_dump())


class ClassifyRequest(BaseModel):
    """Mask to classify, one string per row ('.' ocean, '#' land, '^' mountain)."""

    rows: List[str] = Field(..., min_length=1, description="Mask rows, north first")
    knobs: KnobsModel = Field(default_factory=KnobsModel)


class ClassifyResponse(BaseModel):
    """Per-cell classification; -1 marks ocean."""

    width: int
    height: int
    temperature: List[List[int]]
    humidity: List[List[int]]
    biome: List[List[int]]
    biome_counts: Dict[str, int]


class LegendGroup(BaseModel):
    title: str
    items: List[str]


class BiomeTable(BaseModel):
    """Static biome tables for legends and renderers."""

    names: List[str]
    matrix: List[List[int]]
    colors: Dict[str, str]
    legend: List[LegendGroup]


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/biomes", response_model=BiomeTable)
async def get_biomes():
    """Biome names, the temperature/humidity matrix and legend colours."""
    return BiomeTable(
        names=list(BIOMES),
        matrix=[list(row) for row in BIOME_MATRIX],
        colors=BIOME_COLORS,
        legend=[LegendGroup(title=title, items=list(items)) for title, items in LEGEND_GROUPS],
    )


@app.post("/classify", response_model=ClassifyResponse)
def classify(request: ClassifyRequest):
    """Classify a mask into biomes."""
    cells = len(request.rows) * max(len(row) for row in request.rows)
    if cells > settings.max_grid_cells:
        raise HTTPException(
            status_code=413,
            detail=f"Grid of {cells} cells exceeds limit of {settings.max_grid_cells}",
        )

    try:
        state = parse_mask(request.rows)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    logger.info("Classification requested", width=state.width, height=state.height)
    compute_biomes(state, request.knobs.to_knobs())

    return ClassifyResponse(
        width=state.width,
        height=state.height,
        temperature=state.temperature.tolist(),
        humidity=state.humidity.tolist(),
        biome=state.biome.tolist(),
        biome_counts=biome_counts(state),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
