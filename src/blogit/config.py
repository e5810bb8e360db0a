import logging
import os
import re

import tomllib

from blogit.exceptions import ConfigurationError
from blogit.utils import CommentBackend, convert_str_values_to_list

logger = logging.getLogger(__name__)


def _default_config():
    """Return the default configuration for a Blogit blog.

    This is placed in a separate function because we want to be absolutely
    sure that we are using a copy of the defaults when we manipulate config
    directly in tests.
    """
    return {
        "env": None,
        "testing": None,
        "debug": None,
        "posts_per_page": 5,
        "hidden_states": ["draft", "archive"],
        "active_states": ["published"],
        "show_post_description": True,
        "blogger_display_name_method": "username",
        "include_comments": CommentBackend.PERSISTED.value,
        "disqus_shortname": None,
        "databases": {
            "default": {"provider": "memory"},
        },
        "tagger": {"provider": "memory"},
        "custom": {},
    }


TRUE_STRINGS = ("true", "yes", "on", "1")
FALSE_STRINGS = ("false", "no", "off", "0")


def _parse_bool(value, key):
    """Read a flag that may have come from a `${VAR}` placeholder, which is always a string"""
    if not isinstance(value, str):
        return bool(value)

    normalized = value.strip().lower()
    if normalized in TRUE_STRINGS:
        return True
    if normalized in FALSE_STRINGS:
        return False

    raise ConfigurationError(f"`{key}` must be true or false, got {value!r}")


def _parse_int(value, key):
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigurationError(f"`{key}` must be a positive integer, got {value!r}")


class ConfigAttribute:
    """Makes an attribute forward to the config"""

    def __init__(self, name):
        self.__name__ = name

    def __get__(self, obj, type=None):
        if obj is None:
            return self
        return obj.config[self.__name__]

    def __set__(self, obj, value):
        obj.config[self.__name__] = value


class Config(dict):
    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    @classmethod
    def load_from_dict(cls, config: dict = None):
        """Load configuration from a dictionary."""
        config = cls._normalize_config(config or {})
        return cls(**cls._load_env_vars(config))

    @classmethod
    def load_from_path(cls, path: str):
        """Load configuration from the first config file found near `path`.

        Looks for `.blogit.toml`, `blogit.toml` and `pyproject.toml` (section
        `[tool.blogit]`), in that order, in the directory of `path` and up to
        two parent directories.
        """

        def find_config_file(directory: str):
            config_files = [".blogit.toml", "blogit.toml", "pyproject.toml"]
            for config_file in config_files:
                config_file_path = os.path.join(directory, config_file)
                if os.path.exists(config_file_path):
                    return config_file_path
            return None

        # Start checking from the provided path up to 2 parent directories
        if os.path.isdir(path):
            current_dir = os.path.abspath(path)
        else:
            current_dir = os.path.abspath(os.path.dirname(path))
        config_file_name = None

        for _ in range(3):  # Check the current directory and up to 2 parent directories
            config_file_name = find_config_file(current_dir)
            if config_file_name:
                break

            current_dir = os.path.dirname(current_dir)

        if not config_file_name:
            raise ConfigurationError(f"No configuration file found in {path}")

        logger.debug(f"Loading configuration from {config_file_name}")
        with open(config_file_name, "rb") as f:
            config = tomllib.load(f)

        # If pyproject.toml, extract blogit configuration
        #   from the 'tool.blogit' section
        if config_file_name.endswith("pyproject.toml"):
            config = config.get("tool", {}).get("blogit", {})

        config = cls._normalize_config(config)

        return cls(**cls._load_env_vars(config))

    @classmethod
    def _normalize_config(cls, config):
        """Normalize configuration values.

        This method accepts a dictionary and combines the values from the
        configured environment to create a finalized configuration dictionary.
        """
        # Extract the value of BLOGIT_ENV environment variable
        environment = os.environ.get("BLOGIT_ENV") or None

        # Gather values of known variables
        keys = _default_config().keys()
        finalized_config = {key: value for key, value in config.items() if key in keys}

        # Merge with defaults
        finalized_config = cls._deep_merge(_default_config(), finalized_config)

        # Look for section linked to the specified environment
        if environment and environment in config:
            environment_config = config[environment]
            finalized_config = cls._deep_merge(finalized_config, environment_config)
            finalized_config["env"] = environment

        return finalized_config

    @classmethod
    def _deep_merge(cls, dict1: dict, dict2: dict):
        result = dict1.copy()
        for key, value in dict2.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = cls._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    @classmethod
    def _load_env_vars(cls, config):
        if isinstance(config, dict):
            for key, value in config.items():
                if isinstance(value, str):
                    config[key] = cls._replace_env_var(value)
                elif isinstance(value, dict):
                    config[key] = cls._load_env_vars(value)
                elif isinstance(value, list):
                    config[key] = [
                        cls._replace_env_var(item) if isinstance(item, str) else item
                        for item in value
                    ]
        return config

    @classmethod
    def _replace_env_var(cls, value):
        """Replace environment variables in a string.

        Cases:
        1. String does not have an environment variable. E.g. "attr-value" - Use as is
        2. String has an environment variable. E.g. "${ENV_VAR}" - Replace with value
        3. String has an environment variable with a default value. E.g. "${ENV_VAR|default-value}"
            - Replace with value or default value
        4. String has a mix of environment variables and static values. E.g. "attr-${ENV_VAR1|default-value1}"
            - Replace all environment variables
        """
        match = cls.ENV_VAR_PATTERN.search(value)
        while match:
            matched_string = match.group(1)

            if "|" in matched_string:
                env_var, default_value = matched_string.split("|", 1)
                env_value = os.getenv(env_var, default_value)
            else:
                env_value = os.getenv(matched_string)

            if env_value is None:
                raise ConfigurationError(
                    f"Environment variable {matched_string} is not set"
                )

            value = value.replace(f"${{{matched_string}}}", env_value)
            match = cls.ENV_VAR_PATTERN.search(value)

        return value

    def validate(self):
        """Check option values that the blog depends on, and normalize them in place.

        Raises `ConfigurationError` on the first invalid option.
        """
        include_comments = self["include_comments"]
        if isinstance(include_comments, CommentBackend):
            include_comments = include_comments.value
        backends = [backend.value for backend in CommentBackend]
        if include_comments not in backends:
            raise ConfigurationError(
                f"`include_comments` must be one of {backends}, "
                f"got {include_comments!r}"
            )
        self["include_comments"] = include_comments

        posts_per_page = self["posts_per_page"]
        if isinstance(posts_per_page, str):
            posts_per_page = _parse_int(posts_per_page, "posts_per_page")
        if (
            isinstance(posts_per_page, bool)
            or not isinstance(posts_per_page, int)
            or posts_per_page < 1
        ):
            raise ConfigurationError(
                f"`posts_per_page` must be a positive integer, got {posts_per_page!r}"
            )
        self["posts_per_page"] = posts_per_page

        for key in ["hidden_states", "active_states"]:
            states = convert_str_values_to_list(self[key])
            if not all(isinstance(state, str) and state for state in states):
                raise ConfigurationError(f"`{key}` must be a list of state names")
            self[key] = states

        if not self["active_states"]:
            raise ConfigurationError("`active_states` must name at least one state")

        overlap = set(self["hidden_states"]) & set(self["active_states"])
        if overlap:
            raise ConfigurationError(
                f"States {sorted(overlap)} cannot be both hidden and active"
            )

        method_name = self["blogger_display_name_method"]
        if not isinstance(method_name, str) or not method_name.isidentifier():
            raise ConfigurationError(
                "`blogger_display_name_method` must name an attribute, "
                f"got {method_name!r}"
            )

        self["show_post_description"] = _parse_bool(
            self["show_post_description"], "show_post_description"
        )

        return self
