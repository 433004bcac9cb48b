from saferoads.utils.exceptions import mask_secrets
from saferoads.utils.response import error_response


def test_error_response():
    assert error_response("AI Scan Failed") == {"error": "AI Scan Failed"}


def test_mask_secrets_gemini_key():
    masked = mask_secrets("401 for key=AIzaSyA-abc_123 rejected")
    assert "AIza" not in masked
    assert "***" in masked


def test_mask_secrets_openweather_appid():
    masked = mask_secrets("GET /air_pollution?lat=1&lon=2&appid=49f924494afdba3e failed")
    assert "49f924494afdba3e" not in masked


def test_mask_secrets_leaves_plain_text():
    assert mask_secrets("Connection refused") == "Connection refused"
