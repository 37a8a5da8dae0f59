from fastapi import APIRouter, HTTPException

from ..color.catalog import available_brands, load_catalog
from ..color.matcher import clamp_rgb, color_distance, nearest
from ..core.errors import InvalidInputError
from ..models.api_schemas import CatalogResponse, MatchRequest, MatchResponse

router = APIRouter()


@router.get("/catalogs")
async def list_catalogs():
    return {"brands": available_brands()}


@router.get("/catalogs/{brand}", response_model=CatalogResponse)
async def get_catalog(brand: str):
    try:
        catalog = load_catalog(brand)
    except InvalidInputError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return CatalogResponse(brand=brand, colors=list(catalog))


@router.post("/match", response_model=MatchResponse)
async def match_color(payload: MatchRequest):
    """Closest catalog colour, optionally restricted to a subset of codes (e.g. a pattern's palette)."""
    try:
        catalog = load_catalog(payload.brand)
        candidates = list(catalog)
        if payload.candidates is not None:
            by_code = {color.code: color for color in catalog}
            missing = [code for code in payload.candidates if code not in by_code]
            if missing:
                raise InvalidInputError(f"Unknown catalog codes: {', '.join(missing)}")
            candidates = [by_code[code] for code in payload.candidates]
        color = nearest(payload.rgb, candidates)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return MatchResponse(color=color, distance=color_distance(clamp_rgb(payload.rgb), color.rgb))
