from .comment import Comment, CommentRepository
from .post import Post, PostRepository

__all__ = ["Comment", "CommentRepository", "Post", "PostRepository"]
