"""Authentication endpoints and utilities."""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from quickbite.core.config import settings
from quickbite.db.database import get_db
from quickbite.services.chat.models import Role
from quickbite.services.persistence.users import UserPersistenceService

router = APIRouter()
logger = logging.getLogger(__name__)

SESSION_COOKIE = "session_token"

# In-memory session storage (use Redis in production)
_sessions: dict[str, dict] = {}


class RegisterRequest(BaseModel):
    """Member registration request model."""
    email: str
    name: str
    password: str
    phone_number: Optional[str] = None
    address: Optional[str] = None


class LoginRequest(BaseModel):
    """Login request model."""
    email: str
    password: str


class SessionUser(BaseModel):
    """The signed-in user attached to a session."""
    user_id: int
    email: str
    name: str
    role: Role


class SessionInfo(BaseModel):
    """Session information response."""
    authenticated: bool
    role: Role = Role.GUEST
    email: Optional[str] = None
    name: Optional[str] = None
    expires_at: Optional[str] = None


class PasswordUpdateRequest(BaseModel):
    """Password change request model."""
    current_password: str
    new_password: str = Field(min_length=1)


class ProfileUpdateRequest(BaseModel):
    """Member profile update request model."""
    name: str = Field(min_length=1)
    phone_number: Optional[str] = None
    address: Optional[str] = None


class ProfileResponse(BaseModel):
    email: str
    name: str
    phone_number: Optional[str] = None
    address: Optional[str] = None


def create_session_token() -> str:
    """Generate a secure session token."""
    return secrets.token_urlsafe(32)


def create_session(response: Response, user: SessionUser) -> str:
    """Create a new session and set cookie."""
    session_token = create_session_token()
    ttl = timedelta(hours=settings.session_ttl_hours)
    expires_at = datetime.utcnow() + ttl

    _sessions[session_token] = {
        "user": user,
        "expires_at": expires_at,
        "created_at": datetime.utcnow(),
    }

    # Set HTTP-only cookie
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session_token,
        httponly=True,
        max_age=int(ttl.total_seconds()),
        samesite="lax",
    )

    return session_token


def get_session_token(request: Request) -> Optional[str]:
    """Extract session token from cookie."""
    return request.cookies.get(SESSION_COOKIE)


def verify_session(session_token: Optional[str]) -> Optional[SessionUser]:
    """Return the session's user if the token is valid and not expired."""
    if not session_token:
        return None

    session = _sessions.get(session_token)
    if not session:
        return None

    # Check expiration
    if datetime.utcnow() > session["expires_at"]:
        del _sessions[session_token]
        return None

    return session["user"]


async def get_current_user(request: Request) -> Optional[SessionUser]:
    """Dependency returning the signed-in user, or None for guests."""
    return verify_session(get_session_token(request))


async def require_user(user: Optional[SessionUser] = Depends(get_current_user)) -> SessionUser:
    """Dependency to require any signed-in user."""
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user


async def require_member(user: SessionUser = Depends(require_user)) -> SessionUser:
    """Dependency to require a member account."""
    if user.role != Role.MEMBER:
        raise HTTPException(status_code=403, detail="Member account required")
    return user


async def require_admin(user: SessionUser = Depends(require_user)) -> SessionUser:
    """Dependency to require an admin account."""
    if user.role != Role.ADMIN:
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return user


def _session_user(user) -> SessionUser:
    return SessionUser(user_id=user.id, email=user.email, name=user.name, role=Role.parse(user.role))


@router.post("/api/auth/register")
async def register(
    register_req: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Create a member account and sign it in."""
    service = UserPersistenceService(db)
    try:
        user = await service.create_user(
            register_req.email,
            register_req.name,
            register_req.password,
            phone_number=register_req.phone_number,
            address=register_req.address,
        )
    except ValueError as e:
        logger.info(f"[AUTH] Registration rejected for {register_req.email}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    session_token = create_session(response, _session_user(user))
    return {
        "success": True,
        "message": "Account created",
        "expires_at": _sessions[session_token]["expires_at"].isoformat(),
    }


@router.post("/api/auth/login")
async def login(
    login_req: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Login endpoint."""
    user = await UserPersistenceService(db).authenticate(login_req.email, login_req.password)
    if user is None:
        logger.info(f"[AUTH] Failed login for {login_req.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    session_token = create_session(response, _session_user(user))
    logger.info(f"[AUTH] {user.role} {user.email} logged in")

    return {
        "success": True,
        "message": "Login successful",
        "role": user.role,
        "expires_at": _sessions[session_token]["expires_at"].isoformat(),
    }


@router.post("/api/auth/logout")
async def logout(request: Request, response: Response):
    """Logout endpoint."""
    session_token = get_session_token(request)
    if session_token and session_token in _sessions:
        del _sessions[session_token]

    # Clear cookie
    response.delete_cookie(SESSION_COOKIE)

    return {"success": True, "message": "Logged out"}


@router.get("/api/auth/session")
async def get_session_info(request: Request) -> SessionInfo:
    """Get current session information."""
    session_token = get_session_token(request)
    user = verify_session(session_token)

    if user:
        session = _sessions[session_token]
        return SessionInfo(
            authenticated=True,
            role=user.role,
            email=user.email,
            name=user.name,
            expires_at=session["expires_at"].isoformat(),
        )

    return SessionInfo(authenticated=False)


@router.patch("/api/auth/password")
async def update_password(
    password_req: PasswordUpdateRequest,
    user: SessionUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Change the signed-in user's password."""
    try:
        await UserPersistenceService(db).update_password(
            user.user_id, password_req.current_password, password_req.new_password
        )
    except ValueError as e:
        logger.info(f"[AUTH] Password update rejected for {user.email}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "message": "Password updated"}


def _profile_response(user) -> ProfileResponse:
    return ProfileResponse(
        email=user.email,
        name=user.name,
        phone_number=user.phone_number,
        address=user.address,
    )


@router.get("/api/auth/profile", response_model=ProfileResponse)
async def get_profile(
    member: SessionUser = Depends(require_member),
    db: AsyncSession = Depends(get_db),
):
    user = await UserPersistenceService(db).get_user_by_email(member.email)
    if user is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return _profile_response(user)


@router.patch("/api/auth/profile", response_model=ProfileResponse)
async def update_profile(
    profile_req: ProfileUpdateRequest,
    request: Request,
    member: SessionUser = Depends(require_member),
    db: AsyncSession = Depends(get_db),
):
    """Update the signed-in member's name and contact details."""
    try:
        user = await UserPersistenceService(db).update_profile(
            member.user_id, profile_req.name, profile_req.phone_number, profile_req.address
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    # Keep the session's display name in step with the account
    session = _sessions.get(get_session_token(request))
    if session:
        session["user"] = _session_user(user)

    return _profile_response(user)
