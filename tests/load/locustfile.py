# Scénario de charge: parcours boutique (panier, adresse vendeur, tarifs, commandes)
from locust import HttpUser, task, between
import os
import random

PRODUCTS = [
    {"id": "toy-1", "name": "Chew Toy", "price": 9.99},
    {"id": "bowl-1", "name": "Dog Bowl", "price": 14.5},
    {"id": "leash-1", "name": "Leash", "price": 22.0},
]

TO_ADDRESS = {
    "name": "Load Test",
    "street1": "1 Bark St",
    "city": "Austin",
    "state": "TX",
    "zip": "73301",
    "country": "US",
}

# Les tarifs appellent Shippo: désactivés sauf LOCUST_SHIPPING=1
SHIPPING_ENABLED = os.getenv("LOCUST_SHIPPING", "").strip() == "1"
ORDER_EMAIL = os.getenv("LOCUST_ORDER_EMAIL", "").strip()
# Historique par e-mail: jeton Bearer du même client (ou d'un admin)
ORDER_TOKEN = os.getenv("LOCUST_ORDER_TOKEN", "").strip()

class ShopperUser(HttpUser):
    wait_time = between(0.5, 2.0)

    def on_start(self):
        self.headers = {"Accept": "application/json"}
        self.client.delete("/api/v1/cart", name="DELETE /api/v1/cart", headers=self.headers)

    @task(5)
    def browse_cart(self):
        product = random.choice(PRODUCTS)
        self.client.post(
            "/api/v1/cart/items",
            json={"product": product, "quantity": random.randint(1, 3)},
            name="POST /api/v1/cart/items",
            headers=self.headers,
        )
        self.client.get("/api/v1/cart", name="GET /api/v1/cart", headers=self.headers)

    @task(2)
    def seller_address(self):
        self.client.get("/api/v1/seller-address", name="GET /api/v1/seller-address", headers=self.headers)

    @task(1)
    def cart_rates(self):
        if not SHIPPING_ENABLED:
            return
        items = [{**p, "quantity": 1} for p in random.sample(PRODUCTS, 2)]
        with self.client.post(
            "/api/v1/shipping/cart-rates",
            json={"toAddress": TO_ADDRESS, "items": items},
            name="POST /api/v1/shipping/cart-rates",
            headers=self.headers,
            catch_response=True,
        ) as resp:
            # 429 attendu quand le rate limiting est actif
            if resp.status_code in (200, 404, 429):
                resp.success()
            else:
                resp.failure(f"cart-rates {resp.status_code}: {resp.text[:200]}")

    @task(1)
    def order_history(self):
        if not (ORDER_EMAIL and ORDER_TOKEN):
            return
        self.client.get(
            "/api/v1/orders",
            params={"customerEmail": ORDER_EMAIL},
            name="GET /api/v1/orders?customerEmail",
            headers={**self.headers, "Authorization": f"Bearer {ORDER_TOKEN}"},
        )

    @task(1)
    def health(self):
        self.client.get("/health", name="GET /health")
