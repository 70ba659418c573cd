"""
Нагрузочное тестирование с Locust

    locust -f tests/load/locustfile.py --host http://localhost:8000

Ожидает заполненный каталог (``manga-portal-seed``).
"""

import logging
import random
import uuid
from typing import Dict, List

from locust import HttpUser, between, tag, task

logger = logging.getLogger(__name__)

API = "/api/v1"
PASSWORD = "LoadTest1234!"

WAIT_TIME_MIN = 1
WAIT_TIME_MAX = 5


class MangaReader(HttpUser):
    """Регистрируется, затем открывает страницы манги, ставит оценки и добавляет в избранное"""

    wait_time = between(WAIT_TIME_MIN, WAIT_TIME_MAX)

    def on_start(self):
        self.headers: Dict[str, str] = {}
        self.manga_ids: List[int] = []

        suffix = uuid.uuid4().hex[:8]
        email = f"load_{suffix}@example.com"
        response = self.client.post(
            f"{API}/auth/register",
            json={"email": email, "username": f"load_{suffix}", "password": PASSWORD},
            name="/auth/register",
        )
        if response.status_code != 201:
            logger.error(f"Registration failed: {response.status_code} {response.text}")
            return

        response = self.client.post(
            f"{API}/auth/jwt/login",
            data={"username": email, "password": PASSWORD},
            name="/auth/jwt/login",
        )
        if response.status_code == 200:
            self.headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

        response = self.client.get(f"{API}/mangas", params={"limit": 50}, name="/mangas")
        if response.status_code == 200:
            self.manga_ids = [manga["id"] for manga in response.json()]

    def _pick_manga(self):
        return random.choice(self.manga_ids) if self.manga_ids else None

    @tag("read")
    @task(5)
    def view_detail_page(self):
        manga_id = self._pick_manga()
        if manga_id:
            self.client.get(f"/manga/{manga_id}", headers=self.headers, name="/manga/[id]")

    @tag("read")
    @task(3)
    def get_manga(self):
        manga_id = self._pick_manga()
        if manga_id:
            self.client.get(f"{API}/mangas/{manga_id}", name="/mangas/[id]")

    @tag("write")
    @task(2)
    def rate_manga(self):
        manga_id = self._pick_manga()
        if manga_id and self.headers:
            self.client.post(
                f"{API}/mangas/{manga_id}/ratings",
                json={"rating": {"rating": random.randint(1, 5)}},
                headers=self.headers,
                name="/mangas/[id]/ratings",
            )

    @tag("write")
    @task(1)
    def toggle_favorite(self):
        manga_id = self._pick_manga()
        if manga_id and self.headers:
            self.client.post(
                f"{API}/users/favorites/{manga_id}/toggle",
                headers=self.headers,
                name="/users/favorites/[id]/toggle",
            )
