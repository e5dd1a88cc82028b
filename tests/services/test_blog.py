import pytest

from portal.services.blog import POSTS_KEY, BlogService, embed_url
from portal.services.storage import LocalStore


@pytest.fixture
def blog():
    return BlogService(LocalStore(None))


def test_create_post_newest_first(blog):
    """New posts go to the top with unique ids and clean tags."""
    first = blog.create_post("First", "Hello")
    second = blog.create_post("Second", "World", tags=["news", " ", " tech "])

    posts = blog.get_posts()
    assert [p.id for p in posts] == [second.id, first.id]
    assert second.id != first.id
    assert second.tags == ["news", "tech"]


@pytest.mark.parametrize("kwargs", [
    {"title": "", "content": "text"},
    {"title": "Title", "content": "   "},
    {"title": "Title", "content": "text", "type": "audio"},
    {"title": "Title", "content": "text", "type": "video"},
])
def test_create_post_rejects_invalid(blog, kwargs):
    """Invalid posts raise and nothing is stored."""
    with pytest.raises(ValueError):
        blog.create_post(**kwargs)
    assert blog.get_posts() == []


def test_video_post(blog):
    post = blog.create_post("Clip", "Watch", type="video", video_url="https://example.com/v.mp4")
    assert blog.filter_posts("video") == [post]
    assert blog.filter_posts("text") == []
    assert blog.filter_posts("all") == [post]


def test_update_and_views(blog):
    """Updates and view counts are stored; unknown ids return None."""
    post = blog.create_post("Title", "Body")

    updated = blog.update_post(post.id, title="New title")
    blog.increment_views(post.id)

    stored = blog.get_post(post.id)
    assert updated.title == "New title"
    assert stored.views == 1
    assert blog.update_post(12345, title="x") is None
    assert blog.increment_views(12345) is None


def test_delete_post(blog):
    post = blog.create_post("Title", "Body")

    assert blog.delete_post(post.id) is True
    assert blog.delete_post(post.id) is False
    assert blog.get_posts() == []


def test_corrupt_posts_yield_empty_list():
    """Unreadable stored posts load as an empty list."""
    store = LocalStore(None)
    store.set(POSTS_KEY, [{"id": "not-an-int"}])

    assert BlogService(store).get_posts() == []


def test_preview_truncates(blog):
    post = blog.create_post("Long", "x" * 200)
    assert post.preview().endswith("...")
    assert len(post.preview()) == 153


@pytest.mark.parametrize("updates", [
    {"title": "  "},
    {"type": "video"},
    {"type": "audio"},
])
def test_update_post_rejects_invalid_edit(blog, updates):
    """Edits go through the same checks as new posts and leave storage untouched."""
    post = blog.create_post("Title", "Body")

    with pytest.raises(ValueError):
        blog.update_post(post.id, **updates)

    assert blog.get_post(post.id) == post


def test_update_post_cleans_fields(blog):
    """Edited text and tags are trimmed like new posts."""
    post = blog.create_post("Title", "Body")

    updated = blog.update_post(post.id, title=" New ", tags=["x", " ", " y "])

    assert updated.title == "New"
    assert updated.tags == ["x", "y"]
    assert updated.updated_at >= post.updated_at


@pytest.mark.parametrize("url, expected", [
    ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "https://www.youtube.com/embed/dQw4w9WgXcQ"),
    ("https://www.youtube.com/watch?feature=share&v=abc-1", "https://www.youtube.com/embed/abc-1"),
    ("https://youtu.be/xyz_9", "https://www.youtube.com/embed/xyz_9"),
    ("https://vimeo.com/76979871", "https://player.vimeo.com/video/76979871"),
    ("https://example.com/clip.mp4", "https://example.com/clip.mp4"),
])
def test_embed_url(url, expected):
    assert embed_url(url) == expected
