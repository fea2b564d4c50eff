from geophoto.models.comment import Comment
from geophoto.models.photo import Photo
from geophoto.models.user import User

__all__ = ["Comment", "Photo", "User"]
