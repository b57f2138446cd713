"""Shared HTTP session for talking to the todo API."""

import requests
from requests.adapters import HTTPAdapter

_session: requests.Session | None = None


def get_session() -> requests.Session:
    """Return a shared requests.Session.

    Every request is sent exactly once: a failed call is reported to the
    caller and never retried.
    """
    global _session
    if _session is None:
        _session = requests.Session()
        adapter = HTTPAdapter(max_retries=0)
        _session.mount("http://", adapter)
        _session.mount("https://", adapter)
        _session.headers["Accept"] = "application/json"
    return _session
