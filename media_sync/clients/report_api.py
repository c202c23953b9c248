"""
HTTP client for reporting mirror failures and sync results to a monitoring endpoint.

Handles HTTP communication with retry logic and error handling for:
- reportFailure: A single suppressed storage failure (degraded mirror)
- reportResults: Summary of a full sync run
"""

import json
import logging
from datetime import datetime
from typing import Dict, Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


class ReportAPIError(Exception):
    """Custom exception for report API errors."""
    pass


class SyncReportAPI:
    """
    HTTP client for the sync monitoring endpoint.

    An instance's report_failure method can be passed to SyncEngine as its
    failure hook so that suppressed storage failures are still visible.
    """

    def __init__(self, base_url: str, timeout: int = 10, max_retries: int = 3):
        """
        Initialize report API client with base URL and configuration.

        Args:
            base_url: Base URL for the monitoring endpoint
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.logger = logging.getLogger(__name__)

        self.session = requests.Session()

        retry_strategy = Retry(
            total=max_retries,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "POST"],
            backoff_factor=1
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make HTTP request with error handling and logging.

        Raises:
            ReportAPIError: If request fails after retries
        """
        url = f"{self.base_url}{endpoint}"

        try:
            self.logger.debug(f"Making {method} request to {url}")
            response = self.session.request(
                method=method,
                url=url,
                timeout=self.timeout,
                **kwargs
            )
            self.logger.debug(f"Response status: {response.status_code}")
            response.raise_for_status()
            return response

        except requests.exceptions.RequestException as e:
            error_msg = f"Report API request failed: {method} {url} - {str(e)}"
            self.logger.error(error_msg)
            raise ReportAPIError(error_msg) from e

    def report_failure(self, operation: str, key: str, error: Exception) -> Dict[str, Any]:
        """
        Report a storage failure that was logged and suppressed.

        Args:
            operation: Name of the engine operation (save_file, delete_file, ...)
            key: Object key the operation targeted
            error: The suppressed exception

        Returns:
            Dictionary containing acknowledgment response

        Raises:
            ReportAPIError: If the API call fails
        """
        payload = {
            'operation': operation,
            'key': key,
            'error_type': type(error).__name__,
            'error': str(error),
            'timestamp': datetime.now().isoformat()
        }

        self.logger.info(f"Reporting suppressed {operation} failure for {key}")
        response = self._make_request(
            method="POST",
            endpoint="/reportFailure",
            json=payload,
            headers={"Content-Type": "application/json"}
        )
        return response.json()

    def report_results(self, results: Dict[str, Any]) -> Dict[str, Any]:
        """
        Report sync run results to the monitoring endpoint.

        Raises:
            ValueError: If results is empty
            ReportAPIError: If the API call fails
        """
        if not results:
            raise ValueError("results cannot be empty")

        self.logger.info("Reporting sync results")
        self.logger.debug(f"Results data: {json.dumps(results, indent=2, default=str)}")

        response = self._make_request(
            method="POST",
            endpoint="/reportResults",
            data=json.dumps(results, default=str),
            headers={"Content-Type": "application/json"}
        )
        self.logger.info("Sync results reported successfully")
        return response.json()

    def health_check(self) -> bool:
        """
        Check if the monitoring endpoint is reachable.

        Returns:
            True if server is healthy, False otherwise
        """
        try:
            response = self._make_request(method="GET", endpoint="/")
            return response.status_code == 200
        except ReportAPIError as e:
            self.logger.warning(f"Report API health check failed: {str(e)}")
            return False
