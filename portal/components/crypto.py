from html import escape

from portal.core.keys import ServiceKey
from portal.ui.component import BaseComponent


class CryptoComponent(BaseComponent):
    """Price dashboard. Data is loaded asynchronously in on_init."""

    def __init__(self, dependencies):
        super().__init__("crypto-section", dependencies)
        self.crypto_service = self.get_service(ServiceKey.CRYPTO)

    async def on_init(self):
        coins = await self.crypto_service.load_crypto_data()
        self.set_state({"coins": coins, "query": ""})

    def build_markup(self) -> str:
        return f"""
            <div class="crypto-container">
                <h2>Crypto Portfolio</h2>
                <input type="text" id="crypto-search" placeholder="Search coins..." value="{escape(self.state['query'])}">
                <div class="crypto-grid">{self._render_cards()}</div>
            </div>
        """

    def _render_cards(self) -> str:
        query = self.state["query"].lower()
        cards = []
        for coin in self.state["coins"]:
            if query and query not in coin.name.lower() and query not in coin.symbol.lower():
                continue
            direction = "positive" if coin.price_change > 0 else "negative"
            sign = "+" if coin.price_change > 0 else ""
            cards.append(f"""
                <div class="crypto-card" data-id="{escape(coin.id)}">
                    <div class="crypto-header">
                        <h3>{escape(coin.name)}</h3>
                        <span class="symbol">{escape(coin.symbol)}</span>
                    </div>
                    <div class="crypto-price">
                        <span class="current-price">${coin.current_price:,.2f}</span>
                        <span class="change {direction}">{sign}{coin.price_change}%</span>
                    </div>
                    <div class="crypto-signal">
                        <span class="signal-{coin.signal.lower()}">{escape(coin.signal)}</span>
                    </div>
                </div>
            """)
        return "".join(cards)

    def bind_events(self):
        self.listen("#crypto-search", "input", self.search)

    def search(self, event=None):
        self.set_state({"query": self.surface.get_value(self.query("#crypto-search"))})
