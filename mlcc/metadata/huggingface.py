"""
HuggingFace Hub client.

Fetches model metadata, tokenizer config and model config for a model id.
A missing document, a rate limit or any other non-success status gives None.
Network failures raise ``requests.RequestException``; callers that must not
fail on them wrap the call.
"""

from typing import Any, Dict, Optional

import requests

from mlcc.logger import get_mlcc_logger

HUGGINGFACE_URL = 'https://huggingface.co'


class HuggingFaceClient:
    """
    Minimal HuggingFace Hub API client.

    Parameters
    ----------
    base_url : str, optional
        Hub base URL
    timeout : float, optional
        Per-request timeout in seconds
    offline : bool, optional
        When set, no request is made and every fetch returns None
    session : requests.Session, optional
        Session to issue requests with
    """

    def __init__(self, base_url: str = HUGGINGFACE_URL, timeout: float = 5.0,
                 offline: bool = False, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.offline = offline
        self.session = session or requests.Session()
        self.logger = get_mlcc_logger().bind(component="HuggingFaceClient")

    @classmethod
    def from_settings(cls, settings) -> 'HuggingFaceClient':
        return cls(timeout=settings.metadata_timeout, offline=settings.offline)

    def _get_json(self, path: str) -> Optional[Dict[str, Any]]:
        if self.offline:
            return None

        url = f"{self.base_url}/{path}"
        response = self.session.get(url, timeout=self.timeout)

        if response.status_code == 429:
            self.logger.warning("HuggingFace API rate limit reached", url=url)
            return None
        if response.status_code == 404:
            self.logger.debug("HuggingFace document not found", url=url)
            return None
        if not response.ok:
            self.logger.debug("HuggingFace request failed", url=url, status=response.status_code)
            return None

        return response.json()

    def fetch_model_metadata(self, model_id: str) -> Optional[Dict[str, Any]]:
        """Model card metadata from ``/api/models/{model_id}``."""
        return self._get_json(f"api/models/{model_id}")

    def fetch_tokenizer_config(self, model_id: str) -> Optional[Dict[str, Any]]:
        """``tokenizer_config.json`` of the main revision; carries the chat template."""
        return self._get_json(f"{model_id}/resolve/main/tokenizer_config.json")

    def fetch_model_config(self, model_id: str) -> Optional[Dict[str, Any]]:
        return self._get_json(f"{model_id}/resolve/main/config.json")

    def fetch(self, model_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch everything known about a model.

        Returns
        -------
        dict or None
            ``metadata``, ``tokenizer_config``, ``model_config`` and
            ``chat_template``; None when no document was found
        """
        metadata = self.fetch_model_metadata(model_id)
        tokenizer_config = self.fetch_tokenizer_config(model_id)
        model_config = self.fetch_model_config(model_id)

        if not metadata and not tokenizer_config and not model_config:
            return None

        return {
            'metadata': metadata,
            'tokenizer_config': tokenizer_config,
            'model_config': model_config,
            'chat_template': (tokenizer_config or {}).get('chat_template'),
        }

    __call__ = fetch
