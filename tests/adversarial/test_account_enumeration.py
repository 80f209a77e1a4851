"""
Adversarial tests for account enumeration resistance.

An attacker probing login must not be able to tell an unknown email
from a wrong password, either by response or by skipping the
password hash comparison.

Security rationale:
- Distinct responses reveal which emails are registered
- Skipping bcrypt for unknown emails makes them measurably faster
"""

from unittest.mock import patch

import bcrypt
import pytest
from fastapi.testclient import TestClient

from tests.fakes import RecordingEmailSender

pytestmark = pytest.mark.adversarial


@pytest.fixture
def verified_account(client: TestClient, email_sender: RecordingEmailSender) -> str:
    """Register and verify victim@example.com."""
    client.post("/users/register", json={"email": "victim@example.com", "password": "correct-horse"})
    client.get(f"/users/verify/{email_sender.last_token()}")
    return "victim@example.com"


class TestLoginEnumeration:
    """Unknown email and wrong password must be indistinguishable."""

    def test_identical_status_body_and_headers(self, client: TestClient, verified_account: str) -> None:
        wrong_password = client.post(
            "/users/login", json={"email": verified_account, "password": "battery-staple"}
        )
        unknown_email = client.post(
            "/users/login", json={"email": "nobody@example.com", "password": "battery-staple"}
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"message": "Email or password is wrong"}
        assert wrong_password.headers.get("WWW-Authenticate") == unknown_email.headers.get(
            "WWW-Authenticate"
        )

    def test_unknown_email_still_runs_bcrypt(self, client: TestClient) -> None:
        """A password comparison happens even when the account does not exist."""
        with patch("src.domain.accounts.bcrypt.checkpw", wraps=bcrypt.checkpw) as checkpw:
            client.post("/users/login", json={"email": "nobody@example.com", "password": "whatever"})

        checkpw.assert_called_once()

    def test_wrong_password_runs_bcrypt_once(self, client: TestClient, verified_account: str) -> None:
        with patch("src.domain.accounts.bcrypt.checkpw", wraps=bcrypt.checkpw) as checkpw:
            client.post("/users/login", json={"email": verified_account, "password": "battery-staple"})

        checkpw.assert_called_once()

    @pytest.mark.parametrize("attempt", range(5))
    def test_repeated_guesses_never_succeed(
        self, client: TestClient, verified_account: str, attempt: int
    ) -> None:
        response = client.post(
            "/users/login", json={"email": verified_account, "password": f"guess-{attempt}"}
        )

        assert response.status_code == 401
        assert "token" not in response.json()
