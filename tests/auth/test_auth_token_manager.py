import json
import threading
import unittest
from unittest.mock import Mock, patch

import requests

from gdrivesa.auth import ServiceAccountInfo, TokenManager
from gdrivesa.auth.token_manager import JWT_BEARER_GRANT_TYPE
from gdrivesa.config import ClientConfig
from gdrivesa.errors import AuthError


def _response(status: int, payload=None, text: str = "") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.reason = "OK" if status < 400 else "Bad Request"
    resp._content = text.encode("utf-8") if payload is None else json.dumps(payload).encode("utf-8")
    resp._content_consumed = True
    return resp


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestTokenManager(unittest.TestCase):
    def setUp(self) -> None:
        self.credentials = ServiceAccountInfo(
            client_email="robot@example.com",
            private_key="PEM",
            private_key_id="kid-1",
        )
        self.session = Mock(spec=requests.Session)
        self.session.post.side_effect = lambda *a, **kw: _response(
            200, {"access_token": f"tok-{self.session.post.call_count}", "expires_in": 3600}
        )
        self.clock = FakeClock()

        signer_patch = patch("gdrivesa.auth.token_manager.crypt.RSASigner.from_string")
        encode_patch = patch("gdrivesa.auth.token_manager.jwt.encode", return_value=b"signed.jwt")
        self.from_string = signer_patch.start()
        self.encode = encode_patch.start()
        self.addCleanup(signer_patch.stop)
        self.addCleanup(encode_patch.stop)

    def _manager(self, credentials=None) -> TokenManager:
        return TokenManager(
            credentials or self.credentials,
            config=ClientConfig(),
            session=self.session,
            clock=self.clock,
        )

    def test_first_call_exchanges_assertion(self) -> None:
        manager = self._manager()

        token = manager.get_token()

        self.assertEqual(token, "tok-1")
        self.session.post.assert_called_once()
        args, kwargs = self.session.post.call_args
        self.assertEqual(args[0], "https://www.googleapis.com/oauth2/v4/token")
        self.assertEqual(
            kwargs["data"],
            {"grant_type": JWT_BEARER_GRANT_TYPE, "assertion": "signed.jwt"},
        )
        self.from_string.assert_called_once_with("PEM", "kid-1")

    def test_claims(self) -> None:
        self._manager().get_token()

        payload = self.encode.call_args.args[1]
        self.assertEqual(payload["iss"], "robot@example.com")
        self.assertEqual(payload["scope"], "https://www.googleapis.com/auth/drive")
        self.assertEqual(payload["aud"], "https://www.googleapis.com/oauth2/v4/token")
        self.assertEqual(payload["iat"], 1_000_000)
        self.assertEqual(payload["exp"], 1_000_000 + 3600)
        self.assertNotIn("sub", payload)

    def test_impersonation_adds_subject(self) -> None:
        credentials = ServiceAccountInfo(
            client_email="robot@example.com",
            private_key="PEM",
            impersonate_as="user@example.com",
        )
        manager = self._manager(credentials)
        manager.get_token()

        payload = self.encode.call_args.args[1]
        self.assertEqual(payload["sub"], "user@example.com")

    def test_burst_refreshes_once(self) -> None:
        manager = self._manager()

        tokens = [manager.get_token() for _ in range(5)]
        self.clock.now += 3000  # 600s left, above the 300s margin
        tokens.append(manager.get_token())

        self.assertEqual(set(tokens), {"tok-1"})
        self.assertEqual(self.session.post.call_count, 1)

    def test_refresh_inside_safety_margin(self) -> None:
        manager = self._manager()
        manager.get_token()

        self.clock.now += 3301  # 299s left
        self.assertEqual(manager.get_token(), "tok-2")
        self.assertEqual(self.session.post.call_count, 2)

    def test_expire_forces_refresh(self) -> None:
        manager = self._manager()
        manager.get_token()

        manager.expire()

        self.assertEqual(manager.get_token(), "tok-2")
        self.assertEqual(manager.get_token(), "tok-2")
        self.assertEqual(self.session.post.call_count, 2)

    def test_expire_before_first_token_is_noop(self) -> None:
        manager = self._manager()
        manager.expire()
        self.assertEqual(manager.get_token(), "tok-1")

    def test_authorization_header(self) -> None:
        self.assertEqual(
            self._manager().authorization_header(),
            {"Authorization": "Bearer tok-1"},
        )

    def test_rejected_exchange_raises_auth_error(self) -> None:
        self.session.post.side_effect = None
        self.session.post.return_value = _response(400, text='{"error": "invalid_grant"}')
        manager = self._manager()

        with self.assertRaises(AuthError) as ctx:
            manager.get_token()

        self.assertEqual(ctx.exception.details["status_code"], 400)
        self.assertEqual(self.session.post.call_count, 1)

    def test_transport_error_raises_auth_error(self) -> None:
        self.session.post.side_effect = requests.ConnectionError("boom")

        with self.assertRaises(AuthError):
            self._manager().get_token()

    def test_missing_access_token_raises_auth_error(self) -> None:
        self.session.post.side_effect = None
        self.session.post.return_value = _response(200, {"expires_in": 3600})

        with self.assertRaises(AuthError):
            self._manager().get_token()

    def test_concurrent_callers_share_one_refresh(self) -> None:
        manager = self._manager()
        results: list[str] = []

        def worker() -> None:
            results.append(manager.get_token())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(results, ["tok-1"] * 8)
        self.assertEqual(self.session.post.call_count, 1)


if __name__ == "__main__":
    unittest.main()
