import io
import logging

from eventdesk.utils.log_redaction import REDACTED, RedactingFilter, install_redaction, redact, redact_text


def test_redact_masks_nested_sensitive_keys():
    payload = {
        "email": "ada@example.com",
        "password": "hunter2",
        "nested": {"Authorization": "Bearer abc", "items": [{"api_key": "k"}]},
    }
    out = redact(payload)
    assert out["email"] == "ada@example.com"
    assert out["password"] == REDACTED
    assert out["nested"]["Authorization"] == REDACTED
    assert out["nested"]["items"][0]["api_key"] == REDACTED
    # original untouched
    assert payload["password"] == "hunter2"


def test_redact_text_key_value_and_json():
    assert redact_text("login password=hunter2 user=bob") == f"login password={REDACTED} user=bob"
    assert redact_text('{"token": "abc123", "name": "x"}') == f'{{"token": "{REDACTED}", "name": "x"}}'


def test_filter_masks_args_and_message():
    record = logging.LogRecord(
        "eventdesk.test", logging.INFO, __file__, 1, "user %s body %s", ("bob", {"password": "hunter2"}), None
    )
    assert RedactingFilter().filter(record) is True
    message = record.getMessage()
    assert "hunter2" not in message
    assert "bob" in message


def test_install_redaction_is_idempotent():
    logger = logging.getLogger("eventdesk.test.redaction")
    handler = logging.StreamHandler(io.StringIO())
    logger.addHandler(handler)
    try:
        install_redaction(logger)
        install_redaction(logger)
        assert sum(isinstance(f, RedactingFilter) for f in handler.filters) == 1
    finally:
        logger.removeHandler(handler)
