from fastapi import APIRouter, Depends, HTTPException, status

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from auth.services.auth_service import get_current_active_user
from core.database import get_db
from user.models import User
from user.schemas import UserSchema, UserCreate
from user.service import create_user, get_user, get_user_by_email, get_users

user_router = APIRouter(
    prefix='/users',
    tags=['Users']
)

# Get all users
@user_router.get("", response_model=list[UserSchema])
def user_list(
    db: Session = Depends(get_db),
    _user = Depends(get_current_active_user),
):
    return get_users(db)

# Get current user
@user_router.get('/me', response_model=UserSchema)
def user_me(current_user: User = Depends(get_current_active_user)):
    return current_user

# Get user details
@user_router.get('/{user_id}', response_model=UserSchema)
def user_detail(
    user_id: int,
    db: Session = Depends(get_db),
    _user = Depends(get_current_active_user),
):
    db_user = get_user(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")

    return db_user

# Create a user
@user_router.post("", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def user_post(user: UserCreate, db: Session = Depends(get_db)):
    if get_user_by_email(db, str(user.email)):
        raise HTTPException(status_code=409, detail="user with this email already exists")
    try:
        return create_user(db, user)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="user with this email or username already exists")
