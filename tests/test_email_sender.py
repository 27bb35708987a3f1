"""
Tests for EmailSender - SendGrid notification delivery.
"""

from unittest.mock import MagicMock, patch

import requests

from autopush.notifier.email_sender import EmailSender, parse_recipients


def make_sender(recipients="a@x.com, b@y.com"):
    return EmailSender(
        api_key="SG.key",
        sender="bot@example.com",
        recipients=recipients,
        subject="Site updated",
        url="https://sendgrid.test/v3/mail/send",
        timeout=7,
    )


class TestParseRecipients:
    def test_splits_and_trims(self):
        assert parse_recipients("a@x.com, b@y.com") == ["a@x.com", "b@y.com"]

    def test_drops_empty_entries(self):
        assert parse_recipients(" a@x.com ,, ") == ["a@x.com"]

    def test_empty_string(self):
        assert parse_recipients("") == []


class TestEmailSender:
    """Test suite for EmailSender"""

    def test_payload_structure(self):
        payload = make_sender().build_payload("body text")

        assert payload == {
            "personalizations": [{"to": [{"email": "a@x.com"}, {"email": "b@y.com"}]}],
            "from": {"email": "bot@example.com"},
            "subject": "Site updated",
            "content": [{"type": "text/plain", "value": "body text"}],
        }

    def test_send_posts_with_bearer_token(self):
        with patch("autopush.notifier.email_sender.requests.post") as mock_post:
            mock_post.return_value = MagicMock(status_code=202, text="")

            assert make_sender().send("body text") is True

            mock_post.assert_called_once()
            args, kwargs = mock_post.call_args
            assert args[0] == "https://sendgrid.test/v3/mail/send"
            assert kwargs["headers"]["Authorization"] == "Bearer SG.key"
            assert kwargs["timeout"] == 7
            assert kwargs["json"]["content"][0]["value"] == "body text"

    def test_send_fails_on_non_2xx(self):
        with patch("autopush.notifier.email_sender.requests.post") as mock_post:
            mock_post.return_value = MagicMock(status_code=401, text='{"errors": ["unauthorized"]}')

            assert make_sender().send("body") is False

    def test_send_fails_on_request_exception(self):
        with patch("autopush.notifier.email_sender.requests.post") as mock_post:
            mock_post.side_effect = requests.exceptions.ConnectionError("unreachable")

            assert make_sender().send("body") is False

    def test_send_fails_on_timeout(self):
        with patch("autopush.notifier.email_sender.requests.post") as mock_post:
            mock_post.side_effect = requests.exceptions.Timeout()

            assert make_sender().send("body") is False

    def test_send_skips_without_recipients(self):
        with patch("autopush.notifier.email_sender.requests.post") as mock_post:
            assert make_sender(recipients=" , ").send("body") is False

            mock_post.assert_not_called()
