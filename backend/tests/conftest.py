import os
from uuid import uuid4

import pytest

# Use in-memory sqlite for tests; must be set before `app` is imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret")
os.environ.setdefault("TIMEZONE", "UTC")


class Member:
    """A signed-in user: id plus ready-made auth headers."""

    def __init__(self, client, display_name: str | None = None):
        from app.core.security import create_access_token  # noqa: WPS433

        self.id = f"user-{uuid4().hex[:12]}"
        self.headers = {
            "Authorization": f"Bearer {create_access_token(self.id, display_name)}"
        }
        # first authenticated call creates the profile
        r = client.get("/profile", headers=self.headers)
        assert r.status_code == 200, r.text


def make_admin(user_id: str) -> None:
    from app.db import SessionLocal  # noqa: WPS433
    from app.models.profile import Profile  # noqa: WPS433

    db = SessionLocal()
    try:
        db.query(Profile).filter(Profile.id == user_id).update({"is_admin": True})
        db.commit()
    finally:
        db.close()


@pytest.fixture(scope="session")
def client():
    # Import after env is set so engine is created with sqlite
    from app.main import app  # noqa: WPS433
    from fastapi.testclient import TestClient  # noqa: WPS433
    return TestClient(app)


@pytest.fixture
def new_member(client):
    def _make(display_name: str | None = None, admin: bool = False) -> Member:
        member = Member(client, display_name)
        if admin:
            make_admin(member.id)
        return member
    return _make


@pytest.fixture
def new_group(client, new_member):
    """Create a group owned by a fresh admin; returns (group_json, owner)."""
    def _make(goal_miles: float = 250, name: str = "Trail Crew"):
        owner = new_member("Owner", admin=True)
        r = client.post(
            "/groups",
            json={"name": name, "goal_miles": goal_miles},
            headers=owner.headers,
        )
        assert r.status_code == 201, r.text
        return r.json(), owner
    return _make
