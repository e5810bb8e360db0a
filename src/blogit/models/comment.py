import logging
from typing import Iterable

from blogit.core.entity import BaseEntity
from blogit.core.queryset import QuerySet
from blogit.core.repository import BaseRepository
from blogit.exceptions import ValidationError
from blogit.fields import DateTime, Identifier, String
from blogit.fields.validators import EmailValidator
from blogit.utils import utcnow_func

logger = logging.getLogger(__name__)


class Comment(BaseEntity):
    """A reader's comment on a post, stored when comments are persisted.

    `post_id` can be left empty while the comment is attached to a post that has not
    been saved yet. It is filled in when the comment is written.
    """

    post_id = Identifier()
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=255, validators=[EmailValidator()])
    website = String(max_length=255)
    body = String(required=True, min_length=4, max_length=2000)
    created_at = DateTime(default=utcnow_func)


class CommentRepository(BaseRepository):
    class Meta:
        part_of = Comment

    def add(self, comment: Comment) -> Comment:
        comment.blog_ = self._blog
        comment.validate()

        if comment.post_id is None:
            raise ValidationError({"post_id": ["is required"]})

        return super().add(comment)

    def for_post(self, post) -> QuerySet:
        """Comments on a post, oldest first"""
        return self.all().filter(post_id=post.id).order_by("created_at")

    def replace_for_post(self, post, comments: Iterable[Comment]) -> list[Comment]:
        """Replace the comments of a saved post.

        All comments are validated before any of them is attached to the post, so an
        invalid comment leaves both the post's stored comments and the given comment
        objects as they were.
        """
        comments = list(comments)
        for comment in comments:
            comment.validate()

        for comment in comments:
            comment.post_id = post.id

        kept = {comment.id for comment in comments if comment.id is not None}
        deleted = self.all().filter(post_id=post.id).exclude(id__in=list(kept)).delete_all()
        logger.debug(f"Removed {deleted} comments from post {post.id}")

        for comment in comments:
            super().add(comment)

        return comments
