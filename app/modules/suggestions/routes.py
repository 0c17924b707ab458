from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from app.config import settings
from app.modules.suggestions.schemas import SuggestionRequest, SuggestionResponse
from app.modules.suggestions.service import SuggestionService
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["suggestions"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ", ".join(settings.get_cors_methods_list()),
    "Access-Control-Allow-Headers": ", ".join(settings.get_cors_headers_list()),
}


def get_suggestion_service() -> SuggestionService:
    return SuggestionService(limit=settings.suggestion_limit)


@router.options("/suggest-activities", include_in_schema=False)
async def suggest_activities_options():
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("/suggest-activities", response_model=SuggestionResponse)
async def suggest_activities(
    request: Request,
    service: SuggestionService = Depends(get_suggestion_service)
):
    """Canned activity suggestions for a destination (no authentication required)"""
    try:
        payload = SuggestionRequest.model_validate(await request.json())
        if not payload.destination:
            return JSONResponse(
                status_code=400,
                content={"error": "Destination is required"},
                headers=CORS_HEADERS,
            )
        return JSONResponse(content=service.suggest(payload.destination), headers=CORS_HEADERS)
    except Exception as e:
        logger.exception("Suggestion lookup failed: %s", e)
        return JSONResponse(status_code=500, content={"error": str(e)}, headers=CORS_HEADERS)
