# seva_kendra/routers/auth.py

from fastapi import APIRouter, Depends, status

from ..dependencies import get_identity
from ..identity import Identity
from ..schemas import AuthResponse, LoginIn, RegisterIn

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(req: RegisterIn, identity: Identity = Depends(get_identity)):
    return identity.register(req)


@router.post("/login", response_model=AuthResponse)
def login(req: LoginIn, identity: Identity = Depends(get_identity)):
    return identity.login(req)
