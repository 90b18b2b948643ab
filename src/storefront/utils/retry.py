from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from storefront.core.exceptions import StorageError


def storage_retry(attempts: int = 3):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
        retry=retry_if_exception_type(StorageError),
    )
