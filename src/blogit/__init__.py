__version__ = "0.1.0"

from .blog import Blog
from .config import Config
from .exceptions import (
    BlogitException,
    ConfigurationError,
    InvalidOperationError,
    NotFoundError,
    NotSupportedError,
    ValidationError,
)
from .models import Comment, Post
from .utils import CommentBackend, get_version

__all__ = [
    "Blog",
    "BlogitException",
    "Comment",
    "CommentBackend",
    "Config",
    "get_version",
    "ConfigurationError",
    "InvalidOperationError",
    "NotFoundError",
    "NotSupportedError",
    "Post",
    "ValidationError",
]
