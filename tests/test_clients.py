"""
Tests for the HTTP query executor.
"""

from unittest.mock import Mock

import pytest
import requests

from octopus_lookup.clients import APIClient, get
from octopus_lookup.common import RequestFailed
from tests.conftest import make_response

HEADER = {"X-Octopus-ApiKey": "API-TESTKEY"}


class TestGet:
    def test_returns_decoded_array(self, session: Mock):
        session.request.return_value = make_response([{"Id": "Environments-1"}])
        result = get("https://octopus.test", "/api/environments/all", HEADER, session)
        assert result == [{"Id": "Environments-1"}]

    def test_returns_decoded_object(self, session: Mock):
        session.request.return_value = make_response({"Items": []})
        assert get("https://o", "/api/projects?name=x", HEADER, session) == {
            "Items": []
        }

    def test_url_is_base_plus_path_verbatim(self, session: Mock):
        get("https://octopus.test/", "/api/machines/all", HEADER, session)
        method, url = session.request.call_args.args
        assert method == "GET"
        assert url == "https://octopus.test//api/machines/all"

    def test_sends_api_key_header(self, session: Mock):
        get("https://o", "/api/machines/all", HEADER, session)
        headers = session.request.call_args.kwargs["headers"]
        assert headers["X-Octopus-ApiKey"] == "API-TESTKEY"
        assert headers["Accept"] == "application/json"

    def test_issues_exactly_one_request(self, session: Mock):
        get("https://o", "/api/machines/all", HEADER, session)
        assert session.request.call_count == 1

    def test_injected_session_is_not_closed(self, session: Mock):
        get("https://o", "/api/machines/all", HEADER, session)
        session.close.assert_not_called()

    def test_owned_session_is_closed(self, monkeypatch: pytest.MonkeyPatch):
        fake = Mock(spec=requests.Session)
        fake.request.return_value = make_response([])
        monkeypatch.setattr("octopus_lookup.clients.requests.Session", lambda: fake)
        get("https://o", "/api/machines/all", HEADER)
        fake.close.assert_called_once()


class TestRequestFailures:
    def test_transport_error(self, session: Mock):
        session.request.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(RequestFailed) as exc_info:
            get("https://o", "/api/machines/all", HEADER, session)
        assert exc_info.value.status_code is None
        assert exc_info.value.url == "https://o/api/machines/all"

    @pytest.mark.parametrize("status", [401, 404, 500])
    def test_non_success_status(self, session: Mock, status: int):
        session.request.return_value = make_response(
            {"ErrorMessage": "nope"}, status_code=status
        )
        with pytest.raises(RequestFailed) as exc_info:
            get("https://o", "/api/machines/all", HEADER, session)
        assert exc_info.value.status_code == status

    def test_malformed_json(self, session: Mock):
        session.request.return_value = make_response(body="<html>login</html>")
        with pytest.raises(RequestFailed, match="invalid JSON"):
            get("https://o", "/api/machines/all", HEADER, session)

    def test_no_retry_after_failure(self, session: Mock):
        session.request.return_value = make_response({}, status_code=503)
        with pytest.raises(RequestFailed):
            get("https://o", "/api/machines/all", HEADER, session)
        assert session.request.call_count == 1


class TestAPIClient:
    def test_header_is_copied(self, session: Mock):
        header = dict(HEADER)
        client = APIClient("https://o", header, session=session)
        header["X-Octopus-ApiKey"] = "changed"
        client.get("/api/machines/all")
        sent = session.request.call_args.kwargs["headers"]
        assert sent["X-Octopus-ApiKey"] == "API-TESTKEY"

    def test_api_key_is_not_logged(self, session: Mock, caplog):
        caplog.set_level("DEBUG", logger="octopus_lookup")
        APIClient("https://o", HEADER, session=session).get("/api/machines/all")
        assert "API-TESTKEY" not in caplog.text
