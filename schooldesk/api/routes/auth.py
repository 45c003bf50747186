"""
Authentication Routes
Handles login and resolves the bearer token of each request to a user
"""
from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.security import OAuth2PasswordBearer

from schooldesk.errors import ApiError
from schooldesk.models.user import AuthSession, LoginRequest, LoginResponse, User
from schooldesk.services.auth import AuthService
from schooldesk.services.school_api import SchoolApiClient, get_school_api


router = APIRouter()

# OAuth2 scheme
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_auth_session(
    token: str = Depends(oauth2_scheme),
    api: SchoolApiClient = Depends(get_school_api),
) -> AuthSession:
    """Get the current user; the school API validates the token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        user = AuthService(api).profile(token)
    except ApiError as e:
        if e.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
            raise credentials_exception
        raise

    return AuthSession(token=token, user=user)


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, api: SchoolApiClient = Depends(get_school_api)):
    """
    Login with phone number and password
    """
    try:
        return AuthService(api).login(credentials)
    except ApiError as e:
        if e.status_code in (status.HTTP_400_BAD_REQUEST, status.HTTP_401_UNAUTHORIZED):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=e.message or "Incorrect phone number or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        raise


@router.get("/me", response_model=User)
def get_current_user(session: AuthSession = Depends(get_auth_session)):
    """
    Get current authenticated user details
    """
    return session.user
