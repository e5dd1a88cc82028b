from datetime import datetime
from html import escape

from loguru import logger

from portal.core.keys import ServiceKey
from portal.services.blog import embed_url
from portal.ui.component import BaseComponent


def _format_date(stamp: str) -> str:
    return datetime.fromisoformat(stamp).strftime("%B %d, %Y")


class BlogComponent(BaseComponent):
    """Post list with a create/edit form, type filter, detail view and delete buttons."""

    def __init__(self, dependencies):
        super().__init__("blog-section", dependencies)
        self.blog_service = self.get_service(ServiceKey.BLOG)

    def on_init(self):
        self.set_state({
            "posts": self.blog_service.get_posts(),
            "filter": "all",
            "form_open": False,
            "editing": None,
            "viewing": None,
            "error": "",
        })

    # --- Markup ---
    def build_markup(self) -> str:
        return f"""
            <div class="blog-container">
                <div class="blog-header">
                    <h2>Blog Posts</h2>
                    <button class="btn-primary" id="btn-new-post">+ New Post</button>
                </div>
                <div class="post-filters">{self._render_filters()}</div>
                <div id="post-list" class="post-list">{self._render_post_list()}</div>
                {self._render_form()}
                {self._render_detail()}
            </div>
        """

    def _find(self, post_id):
        return next((p for p in self.state["posts"] if p.id == post_id), None)

    def _visible_posts(self):
        selected = self.state["filter"]
        return [p for p in self.state["posts"] if selected == "all" or p.type == selected]

    def _render_filters(self) -> str:
        buttons = []
        for value in ("all", "text", "video"):
            active = " active" if value == self.state["filter"] else ""
            buttons.append(f'<button class="filter-btn{active}" data-type="{value}">{value.title()}</button>')
        return "".join(buttons)

    def _render_post_list(self) -> str:
        posts = self._visible_posts()
        if not posts:
            return '<p id="empty-state" class="empty-state">No posts yet.</p>'
        cards = []
        for post in posts:
            tags = "".join(f'<span class="tag">#{escape(tag)}</span>' for tag in post.tags)
            cards.append(f"""
                <article class="post-card" data-type="{escape(post.type)}">
                    <div class="post-meta">
                        <span class="post-type-badge {escape(post.type)}">{escape(post.type)}</span>
                        <span class="post-date">{_format_date(post.created_at)}</span>
                        <span class="post-views">{post.views} views</span>
                    </div>
                    <h3 class="post-title" data-id="{post.id}">{escape(post.title)}</h3>
                    <p class="post-content">{escape(post.preview())}</p>
                    <div class="post-tags">{tags}</div>
                    <div class="post-actions">
                        <button class="btn-edit" data-id="{post.id}">Edit</button>
                        <button class="btn-delete" data-id="{post.id}">Delete</button>
                    </div>
                </article>
            """)
        return "".join(cards)

    def _render_form(self) -> str:
        post = self._find(self.state["editing"])
        form_class = "post-form" if self.state["form_open"] else "post-form hidden"
        heading = "Edit Post" if post is not None else "New Post"
        title = escape(post.title) if post else ""
        content = escape(post.content) if post else ""
        tags = escape(", ".join(post.tags)) if post else ""
        video_url = escape(post.video_url) if post else ""
        selected = post.type if post else "text"
        options = "".join(
            f'<option value="{value}"{" selected" if value == selected else ""}>{value.title()}</option>'
            for value in ("text", "video")
        )
        return f"""
            <div id="post-form" class="{form_class}">
                <h3 class="form-heading">{heading}</h3>
                <form id="edit-form">
                    <input type="text" id="post-title" placeholder="Post Title" value="{title}">
                    <textarea id="post-content" placeholder="Post content...">{content}</textarea>
                    <select id="post-type">{options}</select>
                    <input type="text" id="post-tags" placeholder="tag1, tag2" value="{tags}">
                    <input type="text" id="video-url" placeholder="Video URL" value="{video_url}">
                    <p class="form-error">{escape(self.state["error"])}</p>
                    <div class="form-actions">
                        <button type="submit" class="btn-save">Save Post</button>
                        <button type="button" class="btn-cancel">Cancel</button>
                    </div>
                </form>
            </div>
        """

    def _render_detail(self) -> str:
        post = self._find(self.state["viewing"])
        if post is None:
            return ""
        video = ""
        if post.type == "video" and post.video_url:
            video = (
                f'<div class="video-container"><iframe src="{escape(embed_url(post.video_url))}" '
                f'frameborder="0" allowfullscreen></iframe></div>'
            )
        tags = "".join(f'<span class="tag">#{escape(tag)}</span>' for tag in post.tags)
        return f"""
            <div id="post-modal" class="modal">
                <div class="modal-content">
                    <button id="btn-close-modal" class="modal-close">&times;</button>
                    <h2 class="modal-title">{escape(post.title)}</h2>
                    <div class="post-meta">
                        <span class="post-type-badge {escape(post.type)}">{escape(post.type)}</span>
                        <span class="post-date">{_format_date(post.created_at)}</span>
                        <span class="modal-views">{post.views} views</span>
                    </div>
                    {video}
                    <div class="modal-body">{escape(post.content)}</div>
                    <div class="post-tags">{tags}</div>
                </div>
            </div>
        """

    # --- Events ---
    def bind_events(self):
        self.listen("#btn-new-post", "click", self.show_create_form)
        self.listen(".btn-cancel", "click", self.hide_form)
        self.listen("#edit-form", "submit", self.handle_save_post)
        self.listen(".post-title", "click", self.view_post)
        self.listen(".btn-edit", "click", self.edit_post)
        self.listen(".btn-delete", "click", self.delete_post)
        self.listen(".filter-btn", "click", self.filter_posts)
        self.listen("#btn-close-modal", "click", self.close_post)

    def show_create_form(self, event=None):
        self.set_state({"form_open": True, "editing": None, "error": ""})

    def hide_form(self, event=None):
        self.set_state({"form_open": False, "editing": None, "error": ""})

    def edit_post(self, event):
        post_id = event.attr("data-id")
        if post_id is None:
            return
        self.set_state({"form_open": True, "editing": int(post_id), "viewing": None, "error": ""})

    def view_post(self, event):
        """Open the detail view and count the view."""
        post_id = event.attr("data-id")
        if post_id is None:
            return
        post = self.blog_service.increment_views(int(post_id))
        if post is None:
            logger.warning(f"Post {post_id} no longer exists")
            self.set_state({"posts": self.blog_service.get_posts()})
            return
        self.set_state({"posts": self.blog_service.get_posts(), "viewing": post.id})

    def close_post(self, event=None):
        self.set_state({"viewing": None})

    def handle_save_post(self, event=None):
        def value(selector):
            return self.surface.get_value(self.query(selector))

        fields = dict(
            title=value("#post-title"),
            content=value("#post-content"),
            type=value("#post-type") or "text",
            tags=value("#post-tags").split(","),
            video_url=value("#video-url"),
        )
        editing = self.state["editing"]
        try:
            if editing is None:
                self.blog_service.create_post(**fields)
            elif self.blog_service.update_post(editing, **fields) is None:
                raise ValueError("Post no longer exists")
        except ValueError as e:
            logger.warning(f"Post rejected: {e}")
            self.set_state({"error": str(e)})
            return
        self.set_state({
            "posts": self.blog_service.get_posts(),
            "form_open": False,
            "editing": None,
            "error": "",
        })

    def delete_post(self, event):
        post_id = event.attr("data-id")
        if post_id is None:
            return
        self.blog_service.delete_post(int(post_id))
        changes = {"posts": self.blog_service.get_posts()}
        if self.state["viewing"] == int(post_id):
            changes["viewing"] = None
        self.set_state(changes)

    def filter_posts(self, event):
        self.set_state({"filter": event.attr("data-type", "all")})
