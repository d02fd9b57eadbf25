from locust import HttpUser, task, between
import os
import json


class PortalClient(HttpUser):
    """Locust user that logs in as a portal client and browses its dashboards."""

    wait_time = between(0.5, 2.5)

    def on_start(self):
        self.headers = {"Content-Type": "application/json"}
        self.dashboard_ids = []

        payload = json.dumps({
            "email": os.getenv("LOCUST_EMAIL", "client@lunaris.test"),
            "password": os.getenv("LOCUST_PASSWORD", "testpass123"),
        })
        with self.client.post(
            "/api/v1/auth/login/",
            data=payload,
            headers=self.headers,
            catch_response=True,
        ) as resp:
            token = resp.json().get("access") if resp.status_code == 200 else None
            if not token:
                resp.failure(f"Login failed: {resp.status_code}")
                return
            self.headers["Authorization"] = f"Bearer {token}"
            resp.success()

        resp = self.client.get("/api/v1/dashboards/", headers=self.headers)
        if resp.status_code == 200:
            self.dashboard_ids = [dashboard["id"] for dashboard in resp.json()]

    @task(3)
    def dashboard_summary(self):
        for dashboard_id in self.dashboard_ids:
            self.client.get(
                f"/api/v1/dashboards/{dashboard_id}/summary/?report_type=weekly",
                headers=self.headers,
                name="/api/v1/dashboards/[id]/summary/",
            )

    @task(3)
    def campaign_records(self):
        self.client.get("/api/v1/campaign-records/?report_type=daily", headers=self.headers)

    @task(2)
    def notifications(self):
        self.client.get("/api/v1/notifications/?unread=true", headers=self.headers)

    @task(1)
    def payment_requests(self):
        self.client.get("/api/v1/payment-requests/", headers=self.headers)

    @task(1)
    def strategies(self):
        self.client.get("/api/v1/strategies/", headers=self.headers)

    @task(1)
    def me(self):
        self.client.get("/api/v1/auth/me/", headers=self.headers)


# Headless run: `locust --headless -u 50 -r 5 -t 2m -f locustfile.py --csv out --host http://localhost:8000`
