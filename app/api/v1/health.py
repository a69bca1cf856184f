from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check(request: Request):
    session = getattr(request.app.state, "session", None)
    return {
        "status": "healthy",
        "matching_in_progress": bool(session and session.matching_in_progress),
    }
