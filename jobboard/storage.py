"""
Object storage client for profile files.

Talks to a Supabase-style storage REST API: objects live in named buckets
and are served publicly from
{base_url}/storage/v1/object/public/{bucket}/{object_name}.
"""

import mimetypes
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import quote

import requests

from .errors import StorageError
from .logger import get_logger
from .normalize import file_extension, sanitize_name
from .retry import RetryError, TransientHTTPError, exponential_backoff, should_retry_http_status

logger = get_logger()

RESUMES_BUCKET = "resumes"
EXPERIENCE_LOGOS_BUCKET = "experience-logos"
PORTFOLIOS_BUCKET = "portfolios"
CERTIFICATIONS_BUCKET = "certifications"
PROFILE_PICTURES_BUCKET = "profile-pictures"

BUCKETS = (
    RESUMES_BUCKET,
    EXPERIENCE_LOGOS_BUCKET,
    PORTFOLIOS_BUCKET,
    CERTIFICATIONS_BUCKET,
    PROFILE_PICTURES_BUCKET,
)

RANDOM_SUFFIX_BOUND = 90000
MAX_PROFILE_PICTURE_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class UploadFile:
    """File contents plus the client-side file name."""
    name: str
    content: bytes
    content_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path) -> "UploadFile":
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(name=path.name, content=path.read_bytes(), content_type=content_type)


def _default_random_suffix() -> int:
    return random.randrange(RANDOM_SUFFIX_BOUND)


class ObjectStorage:
    """
    Upload and delete objects in the storage service.

    Transient failures are retried with exponential backoff; anything that
    still fails surfaces as StorageError.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 20.0,
        max_retries: int = 3,
        base_delay: float = 1.0,
        random_suffix: Optional[Callable[[], int]] = None,
    ):
        """
        Args:
            base_url: Storage service root, e.g. https://project.supabase.co
            api_key: Service key sent as bearer token and apikey header
            timeout: Per-request timeout in seconds
            max_retries: Retries for transient failures
            base_delay: Initial backoff delay in seconds
            random_suffix: Source of the random number embedded in object names
        """
        if not base_url:
            raise ValueError("Missing storage base URL. Set STORAGE_URL.")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.random_suffix = random_suffix or _default_random_suffix
        self._send = exponential_backoff(
            max_retries=max_retries,
            base_delay=base_delay,
            exceptions=(
                requests.exceptions.Timeout,
                requests.exceptions.ConnectionError,
                TransientHTTPError,
            ),
            on_retry=self._log_retry,
        )(self._send_once)

    @staticmethod
    def _log_retry(attempt: int, error: Exception, delay: float):
        logger.warning("Storage request failed, retrying", attempt=attempt, delay=delay, error=str(error))

    def _headers(self, content_type: Optional[str] = None) -> dict:
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def _send_once(self, method: str, url: str, **kwargs) -> requests.Response:
        resp = requests.request(method, url, timeout=self.timeout, **kwargs)
        if should_retry_http_status(resp.status_code):
            raise TransientHTTPError(resp.status_code, f"{method} {url} returned {resp.status_code}")
        resp.raise_for_status()
        return resp

    def object_url(self, bucket: str, object_name: str) -> str:
        return f"{self.base_url}/storage/v1/object/{bucket}/{quote(object_name)}"

    def public_url(self, bucket: str, object_name: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{object_name}"

    def upload(
        self,
        bucket: str,
        object_name: str,
        file: UploadFile,
        upsert: bool = False,
        label: str = "file",
    ) -> str:
        """
        Upload an object and return its public URL.

        Raises:
            StorageError: "Error uploading {label}" on any request failure
        """
        logger.record_upload_attempt(bucket)
        try:
            self._send(
                "POST",
                self.object_url(bucket, object_name),
                data=file.content,
                headers={**self._headers(file.content_type), "x-upsert": "true" if upsert else "false"},
            )
        except (RetryError, requests.exceptions.RequestException) as e:
            cause = e.__cause__ if isinstance(e, RetryError) and e.__cause__ else e
            logger.record_upload_failure(bucket, type(cause).__name__)
            logger.error(f"Error uploading {label}", bucket=bucket, object=object_name, error=str(e))
            raise StorageError(f"Error uploading {label}") from e

        logger.info("Uploaded object", bucket=bucket, object=object_name)
        return self.public_url(bucket, object_name)

    def upload_resume(self, user_id: str, file: UploadFile) -> str:
        name = f"resume-{self.random_suffix()}-{user_id}-{file.name}"
        return self.upload(RESUMES_BUCKET, name, file, label="resume")

    def upload_experience_logo(self, company_name: str, file: UploadFile) -> str:
        name = f"exp-logo-{self.random_suffix()}-{company_name}"
        return self.upload(EXPERIENCE_LOGOS_BUCKET, name, file, label="company logo")

    def upload_portfolio_item(self, user_id: str, title: str, file: UploadFile) -> str:
        name = f"portfolio-{self.random_suffix()}-{user_id}-{sanitize_name(title)}-{file.name}"
        return self.upload(PORTFOLIOS_BUCKET, name, file, label="portfolio item")

    def upload_certification(self, user_id: str, cert_name: str, file: UploadFile) -> str:
        name = f"cert-{self.random_suffix()}-{user_id}-{sanitize_name(cert_name)}-{file.name}"
        return self.upload(CERTIFICATIONS_BUCKET, name, file, label="certification")

    def upload_profile_picture(self, user_id: str, file: UploadFile) -> str:
        """
        Upload (or replace) a profile picture.

        Raises:
            ValueError: If the file is not an image or is larger than 5MB
            StorageError: If the upload fails
        """
        if not (file.content_type or "").startswith("image/"):
            raise ValueError("Please select an image file")
        if len(file.content) > MAX_PROFILE_PICTURE_BYTES:
            raise ValueError("Image size must be less than 5MB")
        name = f"profile-pic-{self.random_suffix()}-{user_id}.{file_extension(file.name)}"
        return self.upload(PROFILE_PICTURES_BUCKET, name, file, upsert=True, label="profile picture")

    def delete_file(self, bucket: str, file_path: str) -> bool:
        """
        Delete an object. file_path may be the public URL; only its last
        path segment is used as the object name.

        Raises:
            StorageError: If the delete request fails
        """
        object_name = file_path.split("/")[-1]
        try:
            self._send(
                "DELETE",
                f"{self.base_url}/storage/v1/object/{bucket}",
                json={"prefixes": [object_name]},
                headers=self._headers(),
            )
        except (RetryError, requests.exceptions.RequestException) as e:
            logger.error("Error deleting file", bucket=bucket, object=object_name, error=str(e))
            raise StorageError("Error deleting file") from e

        logger.info("Deleted object", bucket=bucket, object=object_name)
        return True
