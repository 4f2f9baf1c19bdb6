import unittest
from unittest.mock import Mock

from gdrivecache.auth import AuthenticationGate, AuthInfo
from gdrivecache.errors import AuthError


class TestAuthenticationGate(unittest.TestCase):
    def test_without_credentials_fails_and_stays_unauthenticated(self) -> None:
        gate = AuthenticationGate()

        with self.assertRaisesRegex(AuthError, "Could not perform google drive authentication"):
            gate.ensure_authenticated()
        self.assertFalse(gate.is_authenticated)

    def test_authenticates_once(self) -> None:
        service = Mock()
        factory = Mock(return_value=service)
        gate = AuthenticationGate(service_factory=factory)
        gate.configure(AuthInfo.service_account("/tmp/key.json"))

        self.assertIs(gate.ensure_authenticated(), service)
        self.assertIs(gate.ensure_authenticated(), service)

        factory.assert_called_once()
        self.assertTrue(gate.is_authenticated)

    def test_failure_is_retried_on_next_call(self) -> None:
        service = Mock()
        factory = Mock(side_effect=[RuntimeError("token endpoint down"), service])
        gate = AuthenticationGate(service_factory=factory)
        gate.configure(AuthInfo.service_account("/tmp/key.json"))

        with self.assertRaises(AuthError) as ctx:
            gate.ensure_authenticated()
        self.assertIsInstance(ctx.exception.cause, RuntimeError)
        self.assertFalse(gate.is_authenticated)

        self.assertIs(gate.ensure_authenticated(), service)
        self.assertEqual(factory.call_count, 2)

    def test_auth_errors_pass_through_unchanged(self) -> None:
        original = AuthError("bad key", details={"credentials_file": "k"})
        gate = AuthenticationGate(service_factory=Mock(side_effect=original))
        gate.configure(AuthInfo.service_account("/tmp/key.json"))

        with self.assertRaises(AuthError) as ctx:
            gate.ensure_authenticated()
        self.assertIs(ctx.exception, original)

    def test_default_factory_reports_missing_key_file(self) -> None:
        gate = AuthenticationGate()
        gate.configure(AuthInfo.service_account("/nonexistent/key.json"))

        with self.assertRaises(AuthError):
            gate.ensure_authenticated()
        self.assertFalse(gate.is_authenticated)


if __name__ == "__main__":
    unittest.main()
