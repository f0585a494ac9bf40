import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field

MAX_POST_LENGTH = 300
MAX_COMMENT_LENGTH = 1000
MAX_MESSAGE_LENGTH = 2000


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Mongo hands datetimes back naive (UTC) unless the client is tz-aware
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UTCDateTime = Annotated[datetime, AfterValidator(_as_utc)]


# Users
class User(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    email: str
    headline: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    picture: Optional[str] = None
    friends_count: int = 0
    posts_count: int = 0
    created_at: UTCDateTime = Field(default_factory=utcnow)

class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    headline: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    picture: Optional[str] = None

class TokenResponse(BaseModel):
    token: str
    user: User

class AdminLogin(BaseModel):
    email: str
    password: str

class AdminToken(BaseModel):
    token: str


# Posts
class Post(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    content: str = ""
    media_url: Optional[str] = None
    media_type: Optional[str] = None
    likes_count: int = 0
    comments_count: int = 0
    created_at: UTCDateTime = Field(default_factory=utcnow)

class PostWithAuthor(BaseModel):
    id: str
    user_id: str
    name: str
    content: str
    media_url: Optional[str] = None
    media_type: Optional[str] = None
    likes_count: int
    comments_count: int
    is_liked: bool = False
    created_at: UTCDateTime

class Like(BaseModel):
    id: str = Field(default_factory=new_id)
    post_id: str
    user_id: str
    created_at: UTCDateTime = Field(default_factory=utcnow)


# Comments
class Comment(BaseModel):
    id: str = Field(default_factory=new_id)
    post_id: str
    user_id: str
    content: str
    created_at: UTCDateTime = Field(default_factory=utcnow)

class CommentCreate(BaseModel):
    post_id: str
    content: str = Field(min_length=1, max_length=MAX_COMMENT_LENGTH)

class CommentWithAuthor(Comment):
    name: str


# Friend requests
class FriendRequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

class FriendRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(default_factory=new_id)
    sender_id: str
    receiver_id: str
    status: FriendRequestStatus = FriendRequestStatus.PENDING
    created_at: UTCDateTime = Field(default_factory=utcnow)
    responded_at: Optional[UTCDateTime] = None

class FriendRequestCreate(BaseModel):
    receiver_id: str

class FriendRequestWithUsers(FriendRequest):
    sender_name: Optional[str] = None
    receiver_name: Optional[str] = None


# Messages
class Message(BaseModel):
    id: str = Field(default_factory=new_id)
    sender_id: str
    receiver_id: str
    content: str
    read: bool = False
    created_at: UTCDateTime = Field(default_factory=utcnow)

class MessageCreate(BaseModel):
    receiver_id: str
    content: str = Field(min_length=1, max_length=MAX_MESSAGE_LENGTH)

class Conversation(BaseModel):
    user: User
    last_message: Message
    unread_count: int = 0


# Notifications
class NotificationType(str, Enum):
    FRIEND_REQUEST = "friend_request"
    FRIEND_ACCEPT = "friend_accept"
    COMMENT = "comment"
    LIKE = "like"
    MESSAGE = "message"

class Notification(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(default_factory=new_id)
    user_id: str
    type: NotificationType
    message: str
    actor_id: Optional[str] = None
    reference_id: Optional[str] = None
    read: bool = False
    created_at: UTCDateTime = Field(default_factory=utcnow)
