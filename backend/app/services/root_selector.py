"""Root selection for the hierarchy view.

Validates the request parameters and returns one ordered page of root-level
folders and files, together with the filtered root total and the unfiltered
system-wide folder/file counts.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import List, Optional, Union

from ..exceptions import InvalidPaginationError, InvalidSortError, ValidationError
from ..models import FileRecord, Folder
from ..repositories import FileRepository, FolderRepository, HierarchyRepository
from ..repositories.hierarchy_repository import SORTABLE_COLUMNS

logger = logging.getLogger(__name__)

MAX_PAGE_LIMIT = 100
DEFAULT_PAGE_LIMIT = 10
SORT_ORDERS = ("asc", "desc")

RootItem = Union[Folder, FileRecord]


@dataclass(frozen=True)
class HierarchyParams:
    """Validated filters, ordering and pagination for a hierarchy request."""

    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT
    name: Optional[str] = None
    description: Optional[str] = None
    date_filter: Optional[date] = None
    sort_by: str = "name"
    sort_order: str = "asc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def updated_since(self) -> Optional[datetime]:
        """Start of ``date_filter`` in UTC, or None when no date filter is set."""
        if self.date_filter is None:
            return None
        return datetime.combine(self.date_filter, time.min, tzinfo=timezone.utc)


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_hierarchy_params(
    page: int = 1,
    limit: int = DEFAULT_PAGE_LIMIT,
    name: Optional[str] = None,
    description: Optional[str] = None,
    date_filter: Union[str, date, None] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> HierarchyParams:
    """Validate raw request values. Raises before any storage call is made."""
    if page < 1:
        raise InvalidPaginationError("page must be greater than or equal to 1", field="page")
    if limit < 1 or limit > MAX_PAGE_LIMIT:
        raise InvalidPaginationError(f"limit must be between 1 and {MAX_PAGE_LIMIT}", field="limit")

    sort_by = sort_by or "name"
    if sort_by not in SORTABLE_COLUMNS:
        raise InvalidSortError(
            f"sort_by must be one of: {', '.join(SORTABLE_COLUMNS)}", field="sort_by"
        )
    sort_order = (sort_order or "asc").lower()
    if sort_order not in SORT_ORDERS:
        raise InvalidSortError("sort_order must be 'asc' or 'desc'", field="sort_order")

    parsed_date = None
    if isinstance(date_filter, date):
        parsed_date = date_filter
    elif date_filter:
        try:
            parsed_date = date.fromisoformat(date_filter.strip())
        except ValueError:
            raise ValidationError("date must be formatted as YYYY-MM-DD", field="date")

    return HierarchyParams(
        page=page,
        limit=limit,
        name=_clean_text(name),
        description=_clean_text(description),
        date_filter=parsed_date,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@dataclass
class RootPage:
    """One page of root items in final display order."""

    items: List[RootItem] = field(default_factory=list)
    total: int = 0
    total_folders: int = 0
    total_files: int = 0

    @property
    def folders(self) -> List[Folder]:
        return [item for item in self.items if isinstance(item, Folder)]


def select_root_page(
    params: HierarchyParams,
    hierarchy_repo: HierarchyRepository,
    folder_repo: FolderRepository,
    file_repo: FileRepository,
) -> RootPage:
    """Run the paginated root query and load the selected rows in page order.

    A row deleted between the two queries is skipped rather than reported.
    """
    refs, total = hierarchy_repo.select_roots(
        sort_by=params.sort_by,
        sort_order=params.sort_order,
        offset=params.offset,
        limit=params.limit,
        name=params.name,
        description=params.description,
        updated_since=params.updated_since,
    )

    folders = {f.id: f for f in folder_repo.get_many([i for t, i in refs if t == "folder"])}
    files = {f.id: f for f in file_repo.get_many([i for t, i in refs if t == "file"])}

    items: List[RootItem] = []
    for item_type, item_id in refs:
        item = folders.get(item_id) if item_type == "folder" else files.get(item_id)
        if item is not None:
            items.append(item)

    if len(items) != len(refs):
        logger.debug("Root rows vanished during selection", extra={"missing": len(refs) - len(items)})

    return RootPage(
        items=items,
        total=total,
        total_folders=folder_repo.count_all(),
        total_files=file_repo.count_all(),
    )
