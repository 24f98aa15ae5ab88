from fastapi import APIRouter

router = APIRouter(tags=["health"])

@router.get("/")
def root():
    return {"success": True, "message": "API working fine"}

@router.get("/health/z")
def healthz():
    # Check si l'API est up
    return {"status": "ok"}
