"""
Shared fixtures: a MagicMock standing in for requests.Session that answers
per (method, path), so tests can script the gateway without a network.
"""
from typing import Callable, Dict, List, Tuple, Union
from unittest.mock import MagicMock
from urllib.parse import urlsplit

import pytest
import requests

Result = Union[MagicMock, Exception]


def _make_response(status_code: int = 200, json_data=None, text: str = "", json_error: bool = False) -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.text = text
    if json_error:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    return _make_response


@pytest.fixture
def stub_session() -> Callable[[Dict[Tuple[str, str], List[Result]]], MagicMock]:
    """
    Build a session mock from {(method, path): [result, ...]}.

    Results are consumed in order; the last one keeps answering. An exception
    instance is raised instead of returned. Unknown routes raise
    ConnectionError, like an unreachable gateway.
    """

    def factory(routes: Dict[Tuple[str, str], List[Result]]) -> MagicMock:
        queues = {key: list(results) for key, results in routes.items()}

        def request(method, url, **kwargs):
            queue = queues.get((method, urlsplit(url).path))
            if not queue:
                raise requests.exceptions.ConnectionError(f"connection refused: {url}")
            result = queue.pop(0) if len(queue) > 1 else queue[0]
            if isinstance(result, Exception):
                raise result
            return result

        session = MagicMock(spec=requests.Session)
        session.request.side_effect = request
        return session

    return factory
