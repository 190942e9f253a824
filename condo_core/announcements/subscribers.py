# condo_core/announcements/subscribers.py
import logging

from condo_core.announcements.services import AnnouncementService
from condo_core.common.events import ASSEMBLY_CREATED, subscribe

logger = logging.getLogger(__name__)


@subscribe(ASSEMBLY_CREATED)
def announce_assembly(payload):
    announcement = AnnouncementService.create_from_assembly(
        tenant_id=payload["tenant_id"],
        assembly_id=payload["assembly_id"],
        title=payload["title"],
        scheduled_at=payload["scheduled_at"],
        description=payload.get("description"),
        created_by_id=payload.get("created_by_id"),
    )
    logger.info("Assembly announcement %s created for assembly=%s", announcement.id, payload["assembly_id"])
