import logging

from services.redaction import mask_account_number, redact_dict, redact_text


def test_redact_text_masks_email_and_account_number():
    text = "Payout to burna@example.com account 0123456789"
    redacted = redact_text(text)
    assert "burna@example.com" not in redacted
    assert "0123456789" not in redacted
    assert "b***@example.com" in redacted
    assert "******6789" in redacted


def test_redact_text_drops_lines_with_credentials():
    assert redact_text("apikey sk_live_123 sent") == "[REDACTED]"
    assert redact_text("Authorization: Bearer abcdef") == "[REDACTED]"


def test_mask_account_number_short_values():
    assert mask_account_number("123") == "****"
    assert mask_account_number("") == "****"


def test_redact_dict_masks_sensitive_keys():
    payload = {
        "email": "burna@example.com",
        "account_number": "0123456789",
        "access_token": "abc",
        "apikey": "def",
        "nested": {"to": "ada@example.com"},
        "amount": "100.00",
    }
    redacted = redact_dict(payload)
    assert redacted["email"] == "b***@example.com"
    assert redacted["account_number"] == "******6789"
    assert redacted["access_token"] == "[REDACTED]"
    assert redacted["apikey"] == "[REDACTED]"
    assert redacted["nested"]["to"] == "a***@example.com"
    assert redacted["amount"] == "100.00"


def test_log_line_uses_redaction_helper(caplog):
    logger = logging.getLogger("redaction-test")
    caplog.set_level(logging.INFO)
    msg = redact_text("email burna@example.com account 0123456789")
    logger.info("payload=%s", msg)
    assert "burna@example.com" not in caplog.text
    assert "0123456789" not in caplog.text
