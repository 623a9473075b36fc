import pytest
pytest.importorskip("aiosmtplib")
pytest.importorskip("jinja2")

import aiosmtplib

from eventdesk.services.email_service import EmailService, EmailServiceConfig


@pytest.fixture(autouse=True)
def _smtp_env(monkeypatch):
    for k in ["SMTP_USERNAME", "SMTP_PASSWORD", "SMTP_USE_SSL", "SMTP_USE_TLS", "REPLY_TO_EMAIL", "EMAIL_TEMPLATE_DIR"]:
        monkeypatch.delenv(k, raising=False)
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_PORT", "587")
    monkeypatch.setenv("FROM_EMAIL", "noreply@eventdesk.test")
    monkeypatch.setenv("FROM_NAME", "EventDesk")


@pytest.fixture
def fake_smtp(monkeypatch):
    class _FakeSMTP:
        instances = []
        fail_with = None

        def __init__(self, **kwargs):
            self.kwargs = kwargs
            self.login_args = None
            self.messages = []
            _FakeSMTP.instances.append(self)

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def login(self, username, password):
            self.login_args = (username, password)

        async def send_message(self, message):
            if _FakeSMTP.fail_with is not None:
                raise _FakeSMTP.fail_with
            self.messages.append(message)

    monkeypatch.setattr(aiosmtplib, "SMTP", _FakeSMTP)
    return _FakeSMTP


def test_config_validates_mutually_exclusive_ssl_tls(monkeypatch):
    monkeypatch.setenv("SMTP_USE_SSL", "true")
    monkeypatch.setenv("SMTP_USE_TLS", "true")
    errs = EmailServiceConfig().validate()
    assert any("both SSL and TLS" in e for e in errs)


def test_config_requires_host(monkeypatch):
    monkeypatch.setenv("SMTP_HOST", "")
    cfg = EmailServiceConfig()
    assert cfg.is_configured() is False
    assert "SMTP_HOST is required" in cfg.validate()


def test_build_message_headers(monkeypatch):
    monkeypatch.setenv("REPLY_TO_EMAIL", "team@eventdesk.test")
    msg = EmailService().build_message("ada@example.com", "Hello", "<p>Hi</p>", "Hi")
    assert msg["From"] == "EventDesk <noreply@eventdesk.test>"
    assert msg["To"] == "ada@example.com"
    assert msg["Reply-To"] == "team@eventdesk.test"
    assert msg["Message-ID"].endswith("@eventdesk.test>")
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


@pytest.mark.asyncio
async def test_send_email_success(fake_smtp, monkeypatch):
    monkeypatch.setenv("SMTP_USERNAME", "mailer")
    monkeypatch.setenv("SMTP_PASSWORD", "pw")
    out = await EmailService().send_email("ada@example.com", "Subject", "<b>Hi</b>", "Hi")
    assert out["success"] is True
    assert out["message_id"]
    smtp = fake_smtp.instances[-1]
    assert smtp.kwargs == {"hostname": "smtp.example.com", "port": 587, "start_tls": True}
    assert smtp.login_args == ("mailer", "pw")
    assert smtp.messages[0]["Subject"] == "Subject"


@pytest.mark.asyncio
async def test_send_email_uses_implicit_tls_for_ssl(fake_smtp, monkeypatch):
    monkeypatch.setenv("SMTP_USE_SSL", "true")
    monkeypatch.setenv("SMTP_USE_TLS", "false")
    monkeypatch.setenv("SMTP_PORT", "465")
    await EmailService().send_email("ada@example.com", "S", "<p>x</p>")
    kwargs = fake_smtp.instances[-1].kwargs
    assert kwargs["use_tls"] is True
    assert kwargs["start_tls"] is False
    assert kwargs["port"] == 465


@pytest.mark.asyncio
async def test_send_email_reports_smtp_failure(fake_smtp):
    fake_smtp.fail_with = aiosmtplib.SMTPException("relay denied")
    out = await EmailService().send_email("ada@example.com", "S", "<p>x</p>")
    assert out["success"] is False
    assert "relay denied" in out["error"]


@pytest.mark.asyncio
async def test_send_email_not_configured(monkeypatch, fake_smtp):
    monkeypatch.setenv("FROM_EMAIL", "")
    out = await EmailService().send_email("ada@example.com", "S", "<p>x</p>")
    assert out == {"success": False, "error": "Email service not configured"}
    assert fake_smtp.instances == []


def test_render_template_escapes_html_only():
    html, text = EmailService().render_template(
        "custom_notification",
        {"subject": "Update", "recipient_name": "Ada", "message": "Doors open <early>", "current_year": 2026},
    )
    assert "Doors open &lt;early&gt;" in html
    assert "Doors open <early>" in text
    assert "Dear Ada" in text


def test_render_template_falls_back_to_stripped_html(tmp_path, monkeypatch):
    (tmp_path / "only_html.html").write_text("<h1>Hello {{ name }}</h1>\n<p>See &amp; you</p>")
    monkeypatch.setenv("EMAIL_TEMPLATE_DIR", str(tmp_path))
    html, text = EmailService().render_template("only_html", {"name": "Ada"})
    assert html.startswith("<h1>Hello Ada</h1>")
    assert text == "Hello Ada See & you"


@pytest.mark.asyncio
async def test_connection_check_reports_config_errors(monkeypatch):
    monkeypatch.setenv("SMTP_USE_SSL", "true")
    monkeypatch.setenv("SMTP_USE_TLS", "true")
    out = await EmailService().test_connection()
    assert out["success"] is False
    assert "Configuration errors" in out["error"]
