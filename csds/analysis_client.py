"""Client for the coordinated sharing analysis service."""

import logging
from typing import Any, Dict, Optional

import requests
from pydantic import BaseModel, Field
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import load_settings
from .exceptions import AnalysisServiceError

logger = logging.getLogger(__name__)


class AnalysisParameters(BaseModel):
    """Parameters forwarded to the analysis service with the canonical CSV."""

    min_participation: int = Field(2, ge=1, description="Minimum co-shares for an account to be included")
    time_window: int = Field(60, ge=1, description="Co-share interval in seconds")
    subgraph: int = Field(1, ge=0)
    edge_weight: float = Field(0.5, ge=0.0, le=1.0)

    def form_fields(self) -> Dict[str, str]:
        return {name: str(value) for name, value in self.model_dump().items()}


def create_robust_session() -> requests.Session:
    session = requests.Session()
    # A plain 500 carries the analysis script's own error and is not retried.
    retry = Retry(
        total=3,
        backoff_factor=1,
        status_forcelist=[429, 502, 503, 504],
        allowed_methods=frozenset({"POST"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _error_details(payload: Any) -> Dict[str, Optional[str]]:
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict):
            return {"stage": error.get("stage"), "message": error.get("message")}
        if isinstance(error, str):
            return {"stage": None, "message": error}
        if payload.get("message"):
            return {"stage": None, "message": str(payload["message"])}
    return {"stage": None, "message": None}


def submit_for_analysis(
    csv_bytes: bytes,
    params: Optional[AnalysisParameters] = None,
    *,
    url: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
    filename: str = "input.csv",
) -> Dict[str, Any]:
    """Post a canonical CSV to the analysis service and return its JSON result.

    Raises AnalysisServiceError when the service cannot be reached, answers
    with an error status, or returns something other than a JSON object.
    """
    settings = load_settings()
    params = params or AnalysisParameters()
    url = url or settings.analysis_url
    timeout = timeout if timeout is not None else settings.analysis_timeout
    session = session or create_robust_session()

    logger.info(
        f"[analysis] submitting {len(csv_bytes)} bytes to {url} with {params.form_fields()}"
    )
    try:
        response = session.post(
            url,
            files={"input": (filename, csv_bytes, "text/csv")},
            data=params.form_fields(),
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.error(f"[analysis] request to {url} failed: {e}")
        raise AnalysisServiceError(f"Analysis service unreachable: {e}", stage="connection") from e

    try:
        payload = response.json()
    except ValueError:
        payload = None

    if not response.ok:
        details = _error_details(payload)
        message = details["message"] or f"HTTP error! Status: {response.status_code}"
        logger.error(f"[analysis] service returned {response.status_code}: {message}")
        raise AnalysisServiceError(message, stage=details["stage"], status_code=response.status_code)

    if not isinstance(payload, dict):
        raise AnalysisServiceError(
            "Analysis service returned a non-JSON response", stage="response", status_code=response.status_code
        )
    if payload.get("status") == "error":
        details = _error_details(payload)
        raise AnalysisServiceError(
            details["message"] or "Analysis failed", stage=details["stage"], status_code=response.status_code
        )

    logger.info(f"[analysis] received result with keys {sorted(payload.keys())}")
    return payload
