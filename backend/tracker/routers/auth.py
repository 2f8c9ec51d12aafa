"""Authentication endpoints.

- GET /auth                 list users (token required)
- POST /auth/register       create a user and return a token
- POST /auth/login          exchange email/username + password for a token
- DELETE /auth/delete/{id}  remove a user (token required)
"""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from .. import services
from ..auth import get_current_user_id, require_api_key
from ..database import get_session
from ..schemas import AuthOut, LoginIn, RegisterIn, UserOut

router = APIRouter(prefix="/auth", tags=["auth"], dependencies=[Depends(require_api_key)])


def _auth_out(result: dict) -> AuthOut:
    return AuthOut(token=result["token"], user=UserOut.model_validate(result["user"]))


@router.get("")
def list_users(db: Session = Depends(get_session), _user_id: str = Depends(get_current_user_id)):
    users = services.AuthService(db).list_users()
    return {"message": "Users found.", "data": [UserOut.model_validate(u) for u in users]}


@router.post("/register", status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_session)):
    """Validate the registration payload, create the user and return a token.

    Duplicate usernames or emails are rejected with 409.
    """
    auth = services.AuthService(db)
    data = auth.validate_registration(payload.model_dump())
    result = auth.register(data["name"], data["email"], data["username"], data["password"])
    return {"message": "New user created.", "data": _auth_out(result)}


@router.post("/login")
def login(payload: LoginIn, db: Session = Depends(get_session)):
    """Authenticate by email or username.

    Unknown users and wrong passwords produce the same 400 response.
    """
    result = services.AuthService(db).login(payload.email, payload.username, payload.password)
    return {"message": "Login successful.", "data": _auth_out(result)}


@router.delete("/delete/{user_id}")
def delete_user(user_id: str, db: Session = Depends(get_session), _caller: str = Depends(get_current_user_id)):
    deleted = services.AuthService(db).delete_user(user_id)
    return {"message": f"User '{deleted.username}' deleted.", "data": UserOut.model_validate(deleted)}
