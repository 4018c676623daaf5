import pytest
import requests
from unittest.mock import Mock

from mlcc.config.system import EngineSettings
from mlcc.metadata import HuggingFaceClient

pytestmark = pytest.mark.unit


def make_response(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.json.return_value = payload
    return response


class TestHuggingFaceClient:
    """Test Hub lookups against a mocked session."""

    def setup_method(self):
        self.session = Mock()
        self.client = HuggingFaceClient(base_url="https://hub.test/", timeout=2.0, session=self.session)

    def test_metadata_request(self):
        self.session.get.return_value = make_response(payload={"id": "acme/model"})

        metadata = self.client.fetch_model_metadata("acme/model")

        assert metadata == {"id": "acme/model"}
        self.session.get.assert_called_once_with("https://hub.test/api/models/acme/model", timeout=2.0)

    @pytest.mark.parametrize("status_code", [404, 429, 500])
    def test_non_success_status_gives_none(self, status_code):
        self.session.get.return_value = make_response(status_code)

        assert self.client.fetch_tokenizer_config("acme/model") is None

    def test_offline_makes_no_request(self):
        client = HuggingFaceClient(offline=True, session=self.session)

        assert client.fetch("acme/model") is None
        self.session.get.assert_not_called()

    def test_fetch_combines_documents(self):
        responses = {
            "https://hub.test/api/models/acme/model": make_response(payload={"id": "acme/model"}),
            "https://hub.test/acme/model/resolve/main/tokenizer_config.json":
                make_response(payload={"chat_template": "{{ messages }}"}),
            "https://hub.test/acme/model/resolve/main/config.json": make_response(404),
        }
        self.session.get.side_effect = lambda url, timeout: responses[url]

        result = self.client.fetch("acme/model")

        assert result == {
            "metadata": {"id": "acme/model"},
            "tokenizer_config": {"chat_template": "{{ messages }}"},
            "model_config": None,
            "chat_template": "{{ messages }}",
        }

    def test_fetch_returns_none_when_nothing_found(self):
        self.session.get.return_value = make_response(404)

        assert self.client("acme/missing") is None
        assert self.session.get.call_count == 3

    def test_network_errors_propagate(self):
        self.session.get.side_effect = requests.ConnectionError("unreachable")

        with pytest.raises(requests.RequestException):
            self.client.fetch("acme/model")

    def test_from_settings(self):
        client = HuggingFaceClient.from_settings(EngineSettings(offline=True, metadata_timeout=1.5))

        assert client.offline is True
        assert client.timeout == 1.5
