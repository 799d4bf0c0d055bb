"""Helpers shared by API tests."""

from typing import Any

from fastapi.testclient import TestClient

DEFAULT_PASSWORD = "secret123"


def sign_up(
    client: TestClient,
    email: str,
    user_type: str = "user",
    full_name: str = "",
    password: str = DEFAULT_PASSWORD,
) -> dict[str, Any]:
    response = client.post(
        "/auth/sign-up",
        json={
            "email": email,
            "password": password,
            "full_name": full_name,
            "user_type": user_type,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def sign_in(client: TestClient, email: str, password: str = DEFAULT_PASSWORD) -> dict[str, Any]:
    response = client.post("/auth/sign-in", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def register(
    client: TestClient,
    email: str,
    user_type: str = "user",
    full_name: str = "",
) -> dict[str, Any]:
    """Sign up and sign in; the client keeps the session cookie."""
    sign_up(client, email, user_type=user_type, full_name=full_name)
    return sign_in(client, email)


def gemini_reply(text: str) -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}
