import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..config import Settings, get_settings
from ..database import get_db
from ..models import TokenResponse, User, UserCreate, UserLogin
from ..security import create_access_token, get_current_user, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    settings: Settings = Depends(get_settings),
    db=Depends(get_db),
):
    email = user_data.email.lower()
    if await db.users.find_one({"email": email}):
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(name=user_data.name.strip(), email=email)
    await db.users.insert_one({**user.model_dump(), "password_hash": hash_password(user_data.password)})
    logger.info("Registered user %s", user.id)

    return TokenResponse(token=create_access_token(settings, user.id, user.name), user=user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    settings: Settings = Depends(get_settings),
    db=Depends(get_db),
):
    existing_user = await db.users.find_one({"email": credentials.email.lower()})
    if not existing_user or not verify_password(credentials.password, existing_user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user = User(**existing_user)
    return TokenResponse(token=create_access_token(settings, user.id, user.name), user=user)


@router.get("/me", response_model=User)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    return current_user
