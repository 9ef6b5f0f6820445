from radiotrack.schemas.user import User, UserCreate, UserUpdate, UserMutationResponse
from radiotrack.schemas.radio import Radio, RadioCreate, RadioUpsert, CheckoutRequest, CommentKind, CommentRequest
from radiotrack.schemas.checkout_log import CheckoutOperation, CheckoutLogEntry, CheckoutLogCreate, ArchiveInfo
from radiotrack.schemas.common import MessageResponse

__all__ = [
    "User", "UserCreate", "UserUpdate", "UserMutationResponse",
    "Radio", "RadioCreate", "RadioUpsert", "CheckoutRequest", "CommentKind", "CommentRequest",
    "CheckoutOperation", "CheckoutLogEntry", "CheckoutLogCreate", "ArchiveInfo",
    "MessageResponse",
]
