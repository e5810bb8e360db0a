from datetime import datetime, timezone

import pytest

from blogit import ConfigurationError, Post


class TestPublishedAt:
    def test_published_at_is_the_creation_time(self, build_post, timestamps):
        post = build_post(created_at=timestamps[3])
        assert post.published_at == timestamps[3]

    def test_creation_time_defaults_to_now(self, build_post):
        before = datetime.now(timezone.utc)
        post = build_post()

        assert post.created_at >= before
        assert post.created_at.tzinfo is not None
        assert post.published_at is post.created_at


class TestSlug:
    def test_slug_combines_id_and_title(self, create_post):
        post = create_post(title="Hello, World! Test")
        assert post.to_slug() == f"{post.id}-hello-world-test"

    def test_slug_with_an_explicit_identifier(self, create_post):
        post = create_post(id=42, title="Hello, World! Test")
        assert post.to_slug() == "42-hello-world-test"

    def test_slug_of_first_post(self, create_post):
        post = create_post(title="Hello, World! Test")
        assert post.id == 1
        assert post.to_slug() == "1-hello-world-test"

    def test_slug_transliterates_and_collapses_separators(self, create_post):
        post = create_post(title="Crème   Brûlée -- recipes_2024")
        assert post.to_slug() == "1-creme-brulee-recipes-2024"

    def test_slug_is_stable_for_a_title(self, create_post):
        post = create_post()
        assert post.to_slug() == post.to_slug()


class TestShortBody:
    def test_short_body_returns_short_bodies_unchanged(self, build_post):
        post = build_post(body="a" * 400)
        assert post.short_body == "a" * 400

    def test_short_body_cuts_long_bodies_at_the_limit(self, build_post):
        post = build_post(body="a" * 500)

        assert post.short_body == "a" * 397 + "..."
        assert len(post.short_body) == 400

    def test_short_body_cuts_at_the_last_line_break(self, build_post):
        body = "First paragraph of the post\n" + "b" * 300 + "\n" + "c" * 300
        post = build_post(body=body)

        assert post.short_body == "First paragraph of the post\n" + "b" * 300 + "..."

    def test_line_breaks_beyond_the_limit_are_ignored(self, build_post):
        body = "a" * 398 + "\n" + "b" * 100
        post = build_post(body=body)

        assert post.short_body == "a" * 397 + "..."


class TestAuthorDisplayName:
    def test_display_name_uses_configured_attribute(self, build_post):
        assert build_post().author_display_name == "john"

    @pytest.mark.parametrize(
        "blog_config", [{"blogger_display_name_method": "full_name"}]
    )
    def test_display_name_calls_configured_method(self, build_post):
        assert build_post().author_display_name == "John Writer"

    def test_display_name_without_author_is_empty(self, build_post):
        post = build_post(author_id=99, author_type="User")

        assert post.author is None
        assert post.author_display_name == ""

    def test_missing_display_name_accessor_raises(self, build_post, admins):
        post = build_post(author=admins[10])

        with pytest.raises(ConfigurationError) as exc:
            post.author_display_name

        assert "Admin#username is not defined" in str(exc.value)


class TestAuthorTwitterUsername:
    def test_twitter_username_of_author(self, build_post):
        assert build_post().author_twitter_username == "johnwrites"

    def test_author_without_twitter_username(self, build_post, users):
        assert build_post(author=users[2]).author_twitter_username is None

    def test_missing_author_has_no_twitter_username(self, build_post):
        post = build_post(author_id=99, author_type="User")
        assert post.author_twitter_username is None


class TestAuthor:
    def test_assigning_an_author_sets_the_reference(self, build_post, users):
        post = build_post(author=users[2])

        assert post.author_id == 2
        assert post.author_type == "User"
        assert post.author is users[2]

    def test_author_is_loaded_from_the_reference(self, blog, create_post, users):
        post = create_post()

        reloaded = blog.posts.get(post.id)
        assert reloaded.author is users[1]

    def test_changing_the_reference_reloads_the_author(self, build_post, users):
        post = build_post()
        post.author_id = 2

        assert post.author is users[2]

    def test_unregistered_author_type_is_rejected(self, build_post):
        class Guest:
            id = 5

        with pytest.raises(ConfigurationError):
            build_post(author=Guest())

    def test_unregistered_author_type_reference_raises_on_access(self, build_post):
        post = build_post(author_id=5, author_type="Guest")

        with pytest.raises(ConfigurationError):
            post.author

    def test_author_needs_a_bound_blog(self):
        post = Post(
            title="A post about testing",
            body="This is the body of the post",
            state="published",
            author_id=1,
            author_type="User",
        )

        with pytest.raises(ConfigurationError):
            post.author_display_name


class TestToDict:
    def test_to_dict_returns_field_values(self, create_post, timestamps):
        post = create_post(created_at=timestamps[0])

        data = post.to_dict()
        assert data["id"] == post.id
        assert data["title"] == "A post about testing"
        assert data["state"] == "published"
        assert data["author_id"] == 1
        assert data["author_type"] == "User"
        assert data["created_at"] == str(timestamps[0])
        assert data["updated_at"] is not None
