from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.api_route("/health", methods=["GET", "POST", "HEAD"])
def health():
    """Liveness check; needs no credentials and ignores any request body."""
    return {"status": "Healthy"}
