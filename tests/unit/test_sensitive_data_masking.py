import pytest

from config.settings import mask_sensitive_data

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_phone_number_key_masked(self):
        event_dict = {"event": "test", "phone_number": "0612345678"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["phone_number"] == "***MASKED***"

    def test_phone_number_in_text_masked(self):
        event_dict = {"event": "test", "note": "call back on +212612345678 tonight"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "612345678" not in result["note"]
        assert "***MASKED***" in result["note"]

    def test_password_masked_in_log_output(self):
        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked_in_log_output(self):
        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]

    def test_uuid_is_not_masked(self):
        order_id = "0192f0c4-7c1e-7abc-8def-123456789012"
        event_dict = {"event": "order.created", "order_id": order_id}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["order_id"] == order_id

    def test_short_numbers_are_kept(self):
        event_dict = {"event": "order.bulk_deleted", "detail": "count=42"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["detail"] == "count=42"

    def test_non_string_values_untouched(self):
        event_dict = {"event": "test", "count": 3, "items": ["a"]}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["count"] == 3
        assert result["items"] == ["a"]
