# tests/test_services/test_email_service.py
import unittest
from unittest.mock import patch

from core.config_loader import settings
from notifications import email_service
from notifications.templates import render_booking_redirect_notification
from outofoffice.schema import BookingRedirectNotification


def make_notification(**overrides):
    data = dict(
        language="en",
        from_email="alice@example.com",
        to_email="bob@example.com",
        to_name="alice",
        dates="02/01/2030 - 02/05/2030",
    )
    data.update(overrides)
    return BookingRedirectNotification(**data)


class RedirectTemplateTests(unittest.TestCase):
    def test_render_includes_name_and_dates(self):
        rendered = render_booking_redirect_notification(language="en", to_name="alice", dates="02/01/2030 - 02/05/2030")
        self.assertEqual(rendered.subject, "Booking redirect from alice")
        self.assertIn("02/01/2030 - 02/05/2030", rendered.body_text)
        self.assertIn("<p>", rendered.body_html)

    def test_unknown_language_falls_back_to_english(self):
        rendered = render_booking_redirect_notification(language="xx-YY", to_name="", dates="d")
        self.assertEqual(rendered.subject, "Booking redirect from A teammate")

    def test_html_is_escaped(self):
        rendered = render_booking_redirect_notification(language="en", to_name="<b>eve</b>", dates="d")
        self.assertNotIn("<b>eve</b>", rendered.body_html)
        self.assertIn("&lt;b&gt;eve&lt;/b&gt;", rendered.body_html)


class EmailServiceTests(unittest.TestCase):
    def test_without_smtp_host_only_logs(self):
        with patch.object(settings, "SMTP_HOST", None), \
                patch("notifications.email_service.smtplib.SMTP") as mock_smtp, \
                self.assertLogs("notifications.email_service", level="INFO"):
            sent = email_service.send_booking_redirect_notification(make_notification())
        self.assertFalse(sent)
        mock_smtp.assert_not_called()

    def test_sends_through_smtp_relay(self):
        with patch.object(settings, "SMTP_HOST", "smtp.example.com"), \
                patch.object(settings, "SMTP_USERNAME", "mailer"), \
                patch.object(settings, "SMTP_PASSWORD", "secret"), \
                patch.object(settings, "SMTP_USE_TLS", True), \
                patch("notifications.email_service.smtplib.SMTP") as mock_smtp:
            sent = email_service.send_booking_redirect_notification(make_notification())

        self.assertTrue(sent)
        server = mock_smtp.return_value.__enter__.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "secret")
        msg = server.send_message.call_args.args[0]
        self.assertEqual(msg["To"], "bob@example.com")
        self.assertEqual(msg["Reply-To"], "alice@example.com")
        self.assertEqual(msg["Subject"], "Booking redirect from alice")

    def test_smtp_errors_propagate(self):
        with patch.object(settings, "SMTP_HOST", "smtp.example.com"), \
                patch("notifications.email_service.smtplib.SMTP", side_effect=OSError("refused")):
            with self.assertRaises(OSError):
                email_service.send_booking_redirect_notification(make_notification())


if __name__ == "__main__":
    unittest.main()
