from fastapi import APIRouter, HTTPException

from app.errors import RepositoryError
from app.services.exhibitions import get_exhibitions

router = APIRouter()


@router.get("/")
def list_exhibitions():
    """Expositions en cours, à venir et passées (début le plus récent d'abord)"""
    try:
        return get_exhibitions()
    except RepositoryError as e:
        raise HTTPException(status_code=503, detail=str(e))
