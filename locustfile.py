from locust import HttpUser, task, between
import random

# Areas and host ids to sample; override with your own seed data
AREAS = ["Florentin", "Jaffa", "Old North", "Neve Tzedek"]
HOSTS = ["host-1", "host-2", "host-3"]


class ShortStayUser(HttpUser):
    wait_time = between(1, 2)

    @task(3)
    def browse_listings(self):
        params = {"area": random.choice(AREAS)}
        if random.random() < 0.5:
            params["priceMax"] = random.choice([150, 300, 600])
        self.client.get("/listings", params=params, name="/listings")

    @task(2)
    def browse_requests(self):
        self.client.get("/requests", params={"area": random.choice(AREAS)}, name="/requests")

    @task
    def host_profile(self):
        host_id = random.choice(HOSTS)
        self.client.get(f"/hosts/{host_id}", name="/hosts/[id]")
        self.client.get(f"/hosts/{host_id}/recommendations", name="/hosts/[id]/recommendations")
