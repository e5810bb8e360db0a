import re
from typing import Any, Iterable, Optional, Union

from blogit.core.entity import BaseEntity, invariant
from blogit.core.queryset import QuerySet
from blogit.core.repository import BaseRepository
from blogit.exceptions import ConfigurationError, NotFoundError, ValidationError
from blogit.fields import DateTime, Identifier, String, Text
from blogit.port.tagger import parse_tag_list
from blogit.utils import utcnow_func
from blogit.utils.text import parameterize, truncate


class Post(BaseEntity):
    """A blog post written by an author.

    Posts are built and validated like any entity. Rules that depend on the blog's
    configuration (the description requirement and the allowed states) apply once the
    post is bound to a blog, either by passing `blog=` or by adding the post to
    `blog.posts`.
    """

    SHORT_BODY_LENGTH = 400

    title = String(required=True, min_length=10, max_length=66, sanitize=False)
    body = Text(required=True, min_length=10)
    description = Text()
    state = String(required=True, max_length=50, sanitize=False)
    author_id = Identifier(required=True)
    author_type = String(max_length=100, sanitize=False)
    created_at = DateTime(default=utcnow_func)
    updated_at = DateTime()

    def __init__(self, *template, **kwargs):
        self._author = None
        self._author_key = None
        self._pending_tags = None
        self._pending_comments = None

        super().__init__(*template, **kwargs)

    ##############
    # Invariants #
    ##############

    @invariant
    def description_is_present_when_shown(self):
        if self.blog_ is None or not self.blog_.config["show_post_description"]:
            return

        if not (self.description or "").strip():
            raise ValidationError({"description": ["is required"]})

    @invariant
    def state_is_available(self):
        if self.blog_ is None or self.state is None:
            return

        if self.state not in self.blog_.available_states:
            raise ValidationError(
                {
                    "state": [
                        f"Value `{self.state}` is not a valid choice. "
                        f"Must be among {self.blog_.available_states}"
                    ]
                }
            )

    def _bound_blog(self):
        if self.blog_ is None:
            raise ConfigurationError(
                f"{self.__class__.__name__} object is not bound to a blog"
            )
        return self.blog_

    #####################
    # Derived accessors #
    #####################

    @property
    def published_at(self):
        # Posts cannot be scheduled, so they are published when created
        return self.created_at

    def to_slug(self) -> str:
        """URL fragment for the post, like `42-hello-world`"""
        identifier = "" if self.id is None else self.id
        return f"{identifier}-{parameterize(self.title or '')}"

    @property
    def short_body(self) -> Optional[str]:
        """Excerpt of the body, cut at a line break where possible"""
        return truncate(self.body, length=self.SHORT_BODY_LENGTH, separator="\n")

    ############
    # Comments #
    ############

    def _check_comments_config(self):
        if not self._bound_blog().comments_persisted:
            raise ConfigurationError(
                "Posts only allow persisted comments "
                "(check the `include_comments` configuration)"
            )

    @property
    def comments(self) -> QuerySet:
        self._check_comments_config()
        return self.blog_.comments.for_post(self)

    @comments.setter
    def comments(self, value: Iterable):
        self._check_comments_config()

        comments = list(value or [])
        if self.state_.is_persisted:
            self.blog_.comments.replace_for_post(self, comments)
        else:
            self._pending_comments = comments

    ##########
    # Author #
    ##########

    @property
    def author(self) -> Any:
        """The author object, loaded through the blog's author type registry"""
        key = (self.author_type, self.author_id)
        if key != self._author_key:
            self._author = self._bound_blog().resolve_author(*key)
            self._author_key = key

        return self._author

    @author.setter
    def author(self, value: Any):
        if value is None:
            self._author, self._author_key = None, None
            self.author_type = None
            self.author_id = None
            return

        author_type = self._bound_blog().author_type_for(value)

        identifier = getattr(value, "id", None)
        if identifier is None:
            raise ValidationError({"author": ["must have an identifier"]})

        self.author_type = author_type
        self.author_id = identifier

        self._author = value
        self._author_key = (self.author_type, self.author_id)

    @property
    def author_display_name(self) -> str:
        author = self.author
        if author is None:
            return ""

        method_name = self.blog_.config["blogger_display_name_method"]
        if not hasattr(author, method_name):
            raise ConfigurationError(
                f"{author.__class__.__name__}#{method_name} is not defined"
            )

        value = getattr(author, method_name)
        return value() if callable(value) else value

    @property
    def author_twitter_username(self) -> Optional[str]:
        return getattr(self.author, "twitter_username", None)

    ########
    # Tags #
    ########

    @property
    def tag_list(self) -> list[str]:
        if self._pending_tags is not None:
            return list(self._pending_tags)

        if self.id is None or self.blog_ is None:
            return []

        return self.blog_.tagger.tags_for(self.__class__.__name__, self.id)

    @tag_list.setter
    def tag_list(self, value: Union[str, Iterable[str], None]):
        self._pending_tags = parse_tag_list(value)


class PostRepository(BaseRepository):
    """Stores posts and answers the listing queries of a blog"""

    class Meta:
        part_of = Post

    def add(self, post: Post) -> Post:
        """Validate and save a post, along with pending tag and comment changes"""
        post.blog_ = self._blog
        post.validate()

        # Queued comments are only written while comments are persisted
        if post._pending_comments is not None:
            post._check_comments_config()
            for comment in post._pending_comments:
                comment.validate()

        post.updated_at = utcnow_func()
        super().add(post)

        if post._pending_tags is not None:
            self._blog.tagger.clear(Post.__name__, post.id)
            self._blog.tagger.tag(Post.__name__, post.id, post._pending_tags)
            post._pending_tags = None

        if post._pending_comments is not None:
            self._blog.comments.replace_for_post(post, post._pending_comments)
            post._pending_comments = None

        return post

    def remove(self, post: Post) -> Post:
        """Delete a post along with its tags and persisted comments"""
        super().remove(post)

        self._blog.tagger.clear(Post.__name__, post.id)
        if self._blog.comments_persisted:
            self._blog.comments.for_post(post).delete_all()

        return post

    def active(self) -> QuerySet:
        """Posts whose state is listable"""
        return self.all().filter(state__in=self._blog.config["active_states"])

    def for_index(self, page: int = 1) -> QuerySet:
        """One page of active posts, newest first"""
        return self.for_feed().page(page, self._blog.config["posts_per_page"])

    def for_feed(self) -> QuerySet:
        """All active posts, newest first"""
        return self.active().order_by("-created_at")

    def active_with_id(self, identifier: Any) -> Post:
        """Find an active post by its identifier or slug.

        Slugs like `42-hello-world` resolve to the identifier they start with.
        Raises `NotFoundError` if there is no such post, or if it is not active.
        """
        if isinstance(identifier, str):
            match = re.match(r"\s*(\d+)", identifier)
            if match is None:
                raise NotFoundError(f"`Post` object with identifier {identifier} does not exist.")
            identifier = int(match.group(1))

        post = self.active().filter(id=identifier).first
        if post is None:
            raise NotFoundError(
                f"`Post` object with identifier {identifier} does not exist."
            )

        return post
