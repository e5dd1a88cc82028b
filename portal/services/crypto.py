from typing import List

from pydantic import BaseModel


class Coin(BaseModel):
    id: str
    name: str
    symbol: str
    current_price: float
    price_change: float
    potential_gain: float
    signal: str


# Simulated market snapshot
_SNAPSHOT = [
    {"id": "bitcoin", "name": "Bitcoin", "symbol": "BTC", "current_price": 43250, "price_change": 2.5, "potential_gain": 125000, "signal": "HOLD"},
    {"id": "ethereum", "name": "Ethereum", "symbol": "ETH", "current_price": 2280, "price_change": 1.8, "potential_gain": 5000, "signal": "BUY"},
    {"id": "cardano", "name": "Cardano", "symbol": "ADA", "current_price": 0.95, "price_change": 3.2, "potential_gain": 2.50, "signal": "BUY"},
    {"id": "solana", "name": "Solana", "symbol": "SOL", "current_price": 185, "price_change": 4.1, "potential_gain": 550, "signal": "HOLD"},
    {"id": "polkadot", "name": "Polkadot", "symbol": "DOT", "current_price": 12.50, "price_change": 2.9, "potential_gain": 45, "signal": "SELL"},
    {"id": "ripple", "name": "Ripple", "symbol": "XRP", "current_price": 2.10, "price_change": 1.5, "potential_gain": 8.50, "signal": "HOLD"},
]


class CryptoService:
    def __init__(self):
        self.crypto_data: List[Coin] = []

    async def load_crypto_data(self) -> List[Coin]:
        self.crypto_data = [Coin.model_validate(item) for item in _SNAPSHOT]
        return self.crypto_data

    def get_crypto_data(self) -> List[Coin]:
        return self.crypto_data

    def search_crypto(self, query: str) -> List[Coin]:
        q = query.lower()
        return [c for c in self.crypto_data if q in c.name.lower() or q in c.symbol.lower()]
