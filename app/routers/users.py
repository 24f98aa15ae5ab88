from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.auth import get_current_user_id
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.models.user import User
from app.schemas.user import UserDataResponse

router = APIRouter(prefix="/api/user", tags=["user"])

@router.get("/data", response_model=UserDataResponse, response_model_exclude_unset=True)
def get_user_data(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    # Infos affichées par le front (nom + statut de vérification)
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")

    return {
        "success": True,
        "user_data": {
            "name": user.name,
            "is_account_verified": user.is_account_verified,
        },
    }
