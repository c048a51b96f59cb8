import logging
from collections.abc import Iterator
from typing import Protocol

from obsctl.core.errors import RemoteApiError
from obsctl.core.models import ListingPage, ObjectEntry

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


class PageSource(Protocol):
    def list_objects_page(
        self,
        bucket_name: str,
        prefix: str | None = None,
        marker: str | None = None,
        max_keys: int = DEFAULT_PAGE_SIZE,
    ) -> ListingPage: ...


class PaginatedLister:
    """
    Walks a bucket listing page by page, following the service's markers.

    Listings are lazy: nothing is fetched until the caller iterates, and a
    failing page call raises out of the iteration. Entries already yielded
    stay with the caller.
    """

    def __init__(self, client: PageSource, page_size: int = DEFAULT_PAGE_SIZE):
        self.client = client
        self.page_size = page_size

    def pages(
        self,
        bucket_name: str,
        prefix: str | None = None,
        start_marker: str | None = None,
    ) -> Iterator[ListingPage]:
        marker = start_marker
        page_number = 0

        while True:
            page_number += 1
            logger.debug(
                "Fetching page %d of %s (prefix=%r, marker=%r)",
                page_number,
                bucket_name,
                prefix,
                marker,
            )
            page = self.client.list_objects_page(
                bucket_name, prefix=prefix, marker=marker, max_keys=self.page_size
            )
            yield page

            if not page.next_marker:
                return
            if page.next_marker == marker:
                raise RemoteApiError(
                    "ListObjects",
                    "MarkerNotAdvanced",
                    f"Service returned the same marker twice: {marker}",
                )
            marker = page.next_marker

    def list(
        self,
        bucket_name: str,
        prefix: str | None = None,
        start_marker: str | None = None,
    ) -> Iterator[ObjectEntry]:
        for page in self.pages(bucket_name, prefix=prefix, start_marker=start_marker):
            yield from page.entries
