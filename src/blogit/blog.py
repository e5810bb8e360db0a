"""This module implements the central blog object, along with utilities for
wiring configuration, storage providers, the tagger and author types.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

from blogit.adapters import PROVIDERS, TAGGERS
from blogit.config import Config, ConfigAttribute
from blogit.exceptions import ConfigurationError
from blogit.port.provider import BaseProvider
from blogit.port.tagger import BaseTagger
from blogit.utils import CommentBackend, import_from_full_path

logger = logging.getLogger(__name__)


class Blog:
    """The blog object is the entry point of a Blogit application.

    It holds the configuration, the storage providers and the tagger, and
    exposes the repositories through which posts and comments are stored and
    queried::

        from blogit import Blog

        blog = Blog(config={"posts_per_page": 10})

    Configuration is explicit: pass a dictionary or a loaded `Config`
    object. Nothing is read from global state, so any number of blogs with
    different configurations can live side by side.

    Authors are records owned by the host application. Register each author
    type with a loader that fetches an author by its identifier::

        blog.register_author_type(User, users.get)

    :param name: the name of the blog, used in logs.
    :param config: a configuration dictionary or `Config` object. Defaults are
                   used when omitted.
    """

    #: Number of posts on each index page
    posts_per_page = ConfigAttribute("posts_per_page")

    #: States that keep posts out of public listings
    hidden_states = ConfigAttribute("hidden_states")

    #: States that make posts listable
    active_states = ConfigAttribute("active_states")

    #: Comment backend, one of `persisted`, `disqus` or `disabled`
    include_comments = ConfigAttribute("include_comments")

    #: Whether posts carry a description, which then becomes mandatory
    show_post_description = ConfigAttribute("show_post_description")

    #: Author attribute or method used as the author's display name
    blogger_display_name_method = ConfigAttribute("blogger_display_name_method")

    def __init__(
        self,
        name: str = "blogit",
        config: Optional[Union[dict, Config]] = None,
    ) -> None:
        self.name = name

        if isinstance(config, Config):
            self.config = config
        else:
            self.config = Config.load_from_dict(config)
        self.config.validate()

        self._author_types: dict[str, tuple[type, Callable]] = {}

        self.providers = self._initialize_providers()
        self.tagger = self._initialize_tagger()

        # Repositories are imported here to avoid cyclic imports with models
        from blogit.models.comment import CommentRepository
        from blogit.models.post import PostRepository

        self.posts = PostRepository(self)
        self.comments = CommentRepository(self)

        logger.debug(f"Blog `{self.name}` initialized")

    def __repr__(self) -> str:
        return f"<Blog: {self.name}>"

    ###################
    # Infrastructure  #
    ###################

    def _initialize_providers(self) -> dict[str, BaseProvider]:
        """Build a provider for each configured database"""
        providers = {}
        for name, conn_info in self.config["databases"].items():
            provider_cls = self._resolve_adapter(PROVIDERS, conn_info, "database")
            providers[name] = provider_cls(name, self, conn_info)

        if "default" not in providers:
            raise ConfigurationError("You must define a 'default' database")

        return providers

    def _initialize_tagger(self) -> BaseTagger:
        conn_info = self.config["tagger"]
        tagger_cls = self._resolve_adapter(TAGGERS, conn_info, "tagger")
        return tagger_cls("tagger", self, conn_info)

    def _resolve_adapter(self, registry: dict, conn_info: dict, kind: str) -> type:
        if not isinstance(conn_info, dict) or "provider" not in conn_info:
            raise ConfigurationError(f"A {kind} must name its `provider`")

        provider = conn_info["provider"]
        if provider not in registry:
            raise ConfigurationError(
                f"Unknown {kind} provider `{provider}`. "
                f"Available providers: {sorted(registry)}"
            )

        return import_from_full_path(registry[provider])

    def get_provider(self, name: str = "default") -> BaseProvider:
        try:
            return self.providers[name]
        except KeyError:
            raise ConfigurationError(f"Provider `{name}` has not been configured")

    def reset(self) -> None:
        """Empty all storage and tags. Meant for tests."""
        for provider in self.providers.values():
            provider._data_reset()
        self.tagger._data_reset()

    ################
    # Derived data #
    ################

    @property
    def available_states(self) -> list[str]:
        """All states a post can be in, hidden states first"""
        return [*self.config["hidden_states"], *self.config["active_states"]]

    AVAILABLE_STATES = available_states

    @property
    def comments_persisted(self) -> bool:
        return self.config["include_comments"] == CommentBackend.PERSISTED.value

    ################
    # Author types #
    ################

    def register_author_type(
        self,
        author_cls: type,
        loader: Optional[Callable[[Any], Any]] = None,
        type_name: Optional[str] = None,
    ):
        """Register a class whose objects can author posts.

        `loader` fetches an author object by identifier, returning `None` when
        there is no such author. Posts store `type_name`, which defaults to the
        class name, next to the author's identifier.

        Can also be used as a decorator on the loader::

            @blog.register_author_type(User)
            def load_user(identifier):
                return users.get(identifier)
        """
        type_name = type_name or author_cls.__name__

        def register(loader_func: Callable[[Any], Any]) -> Callable[[Any], Any]:
            self._author_types[type_name] = (author_cls, loader_func)
            logger.debug(f"Registered author type `{type_name}`")
            return loader_func

        if loader is None:
            return register

        register(loader)
        return loader

    def author_type_for(self, author: Any) -> str:
        """Return the registered type name for an author object.

        Raises `ConfigurationError` if the object's class is not registered.
        """
        for type_name, (author_cls, _) in self._author_types.items():
            if isinstance(author, author_cls):
                return type_name

        raise ConfigurationError(
            f"`{author.__class__.__name__}` is not a registered author type"
        )

    def resolve_author(self, type_name: Optional[str], identifier: Any) -> Any:
        """Load an author from its type name and identifier.

        Returns `None` when either is missing or the loader finds nothing.
        Raises `ConfigurationError` for an unregistered type.
        """
        if type_name is None or identifier is None:
            return None

        try:
            _, loader = self._author_types[type_name]
        except KeyError:
            raise ConfigurationError(f"`{type_name}` is not a registered author type")

        return loader(identifier)
