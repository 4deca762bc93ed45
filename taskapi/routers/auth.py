from fastapi import APIRouter, Depends

from taskapi.dependencies import get_auth_service
from taskapi.schemas.user import AuthResponse, LoginRequest, RegisterRequest
from taskapi.services.auth import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(body: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    return auth.register(body.email, body.password)


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    return auth.login(body.email, body.password)
