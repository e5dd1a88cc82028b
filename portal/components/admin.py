from html import escape

from portal.core.keys import ServiceKey
from portal.ui.component import BaseComponent


class AdminComponent(BaseComponent):
    """Summary counts across the other services plus the post list."""

    def __init__(self, dependencies):
        super().__init__("admin-section", dependencies)
        self.blog_service = self.get_service(ServiceKey.BLOG)
        self.crypto_service = self.get_service(ServiceKey.CRYPTO)
        self.court_service = self.get_service(ServiceKey.COURT)

    def on_init(self):
        self.refresh()

    def refresh(self):
        """Re-read the services; re-renders only when a number changed."""
        posts = self.blog_service.get_posts()
        return self.set_state({
            "posts": len(posts),
            "coins": len(self.crypto_service.get_crypto_data()),
            "cases": len(self.court_service.get_cases()),
            "titles": [(post.id, post.title) for post in posts],
        })

    def build_markup(self) -> str:
        stats = "".join(
            f'<div class="stat-card"><h3>{label}</h3><p class="stat-value" id="stat-{key}">{self.state[key]}</p></div>'
            for key, label in (("posts", "Blog Posts"), ("coins", "Cryptocurrencies"), ("cases", "Court Cases"))
        )
        rows = "".join(
            f'<li class="admin-post" data-id="{post_id}">{escape(title)}'
            f' <button class="btn-admin-delete" data-id="{post_id}">Delete</button></li>'
            for post_id, title in self.state["titles"]
        )
        return f"""
            <div class="admin-dashboard">
                <h2>Admin Dashboard</h2>
                <div class="stats-grid">{stats}</div>
                <ul id="admin-posts-list" class="admin-posts">{rows}</ul>
            </div>
        """

    def bind_events(self):
        self.listen(".btn-admin-delete", "click", self.delete_post)

    def delete_post(self, event):
        post_id = event.attr("data-id")
        if post_id is not None:
            self.blog_service.delete_post(int(post_id))
            self.refresh()
