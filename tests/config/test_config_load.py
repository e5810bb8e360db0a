"""Tests to load blog configuration from dictionaries and .toml files"""

import os

import pytest

from blogit import Blog, Config, ConfigurationError
from blogit.config import _default_config


class TestDefaults:
    def test_defaults(self):
        config = Config.load_from_dict()

        assert config["posts_per_page"] == 5
        assert config["hidden_states"] == ["draft", "archive"]
        assert config["active_states"] == ["published"]
        assert config["show_post_description"] is True
        assert config["blogger_display_name_method"] == "username"
        assert config["include_comments"] == "persisted"
        assert config["disqus_shortname"] is None
        assert config["databases"] == {"default": {"provider": "memory"}}
        assert config["tagger"] == {"provider": "memory"}
        assert config["custom"] == {}
        assert config["env"] is None

    def test_defaults_are_fresh_copies(self):
        config = Config.load_from_dict()
        config["hidden_states"].append("secret")

        assert _default_config()["hidden_states"] == ["draft", "archive"]

    def test_blog_uses_defaults_without_config(self):
        blog = Blog()

        assert blog.posts_per_page == 5
        assert blog.AVAILABLE_STATES == ["draft", "archive", "published"]


class TestLoadFromDict:
    def test_values_override_defaults(self):
        config = Config.load_from_dict({"posts_per_page": 10, "include_comments": "disqus"})

        assert config["posts_per_page"] == 10
        assert config["include_comments"] == "disqus"
        assert config["active_states"] == ["published"]

    def test_unknown_keys_are_dropped(self):
        config = Config.load_from_dict({"not_an_option": True})
        assert "not_an_option" not in config

    def test_nested_values_are_merged(self):
        config = Config.load_from_dict({"databases": {"other": {"provider": "memory"}}})

        assert set(config["databases"]) == {"default", "other"}


class TestLoadFromPath:
    def test_loading_blogit_toml(self, support_dir):
        config = Config.load_from_path(os.path.join(support_dir, "config_plain"))

        assert config["posts_per_page"] == 10
        assert config["hidden_states"] == ["draft"]
        assert config["active_states"] == ["published", "featured"]
        assert config["blogger_display_name_method"] == "full_name"
        assert config["include_comments"] == "disqus"
        assert config["disqus_shortname"] == "my-blog"
        assert config["custom"] == {"FOO": "plain"}
        assert "unknown_option" not in config

    def test_loading_from_a_file_path(self, support_dir):
        config = Config.load_from_path(
            os.path.join(support_dir, "config_plain", "blogit.toml")
        )
        assert config["posts_per_page"] == 10

    def test_dot_blogit_toml_is_preferred(self, support_dir):
        config = Config.load_from_path(os.path.join(support_dir, "config_dot"))

        assert config["posts_per_page"] == 3
        assert config["show_post_description"] is False
        assert config["custom"]["FOO"] == "dot"

    def test_pyproject_toml_is_searched_in_parent_directories(self, support_dir):
        config = Config.load_from_path(
            os.path.join(support_dir, "config_pyproject", "nested", "deeper")
        )

        assert config["posts_per_page"] == 12
        assert config["custom"]["FOO"] == "pyproject"

    def test_missing_config_file_raises(self, support_dir):
        with pytest.raises(ConfigurationError) as exc:
            Config.load_from_path(os.path.join(support_dir, "config_missing"))

        assert "No configuration file found" in str(exc.value)

    def test_blog_accepts_loaded_config(self, support_dir):
        config = Config.load_from_path(os.path.join(support_dir, "config_plain"))
        blog = Blog(config=config)

        assert blog.config is config
        assert blog.posts_per_page == 10
        assert blog.AVAILABLE_STATES == ["draft", "published", "featured"]


class TestEnvironment:
    @pytest.fixture(autouse=True)
    def author(self, monkeypatch):
        monkeypatch.setenv("BLOG_AUTHOR", "John")

    def test_placeholders_resolve_from_environment(self, support_dir, monkeypatch):
        monkeypatch.setenv("DISQUS_SHORTNAME", "johns-blog")
        config = Config.load_from_path(os.path.join(support_dir, "config_env"))

        assert config["disqus_shortname"] == "johns-blog"
        assert config["custom"]["GREETING"] == "Hello John"
        assert config["custom"]["SIGNATURE"] == "John-blogit"

    def test_placeholders_fall_back_to_defaults(self, support_dir):
        config = Config.load_from_path(os.path.join(support_dir, "config_env"))

        assert config["disqus_shortname"] == "default-blog"

    def test_unset_placeholder_without_default_raises(self, support_dir, monkeypatch):
        monkeypatch.delenv("BLOG_AUTHOR")

        with pytest.raises(ConfigurationError) as exc:
            Config.load_from_path(os.path.join(support_dir, "config_env"))

        assert "BLOG_AUTHOR" in str(exc.value)

    def test_environment_section_overrides_values(self, support_dir, monkeypatch):
        monkeypatch.setenv("BLOGIT_ENV", "production")
        config = Config.load_from_path(os.path.join(support_dir, "config_env"))

        assert config["env"] == "production"
        assert config["posts_per_page"] == 20
        assert config["include_comments"] == "disabled"
        assert config["custom"]["STAGE"] == "production"
        assert config["custom"]["GREETING"] == "Hello John"

    def test_unknown_environment_is_ignored(self, support_dir, monkeypatch):
        monkeypatch.setenv("BLOGIT_ENV", "staging")
        config = Config.load_from_path(os.path.join(support_dir, "config_env"))

        assert config["env"] is None
        assert config["posts_per_page"] == 5
