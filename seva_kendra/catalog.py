import logging
from typing import List

from .exceptions import NotFoundError, ValidationError
from .models import utcnow
from .schemas import ServiceCreate, ServiceOut, ServiceUpdate
from .store import SERVICES, Store

logger = logging.getLogger(__name__)

DEFAULT_ICON = "📄"
DEFAULT_COLOR = "#2196F3"

DEFAULT_SERVICES = [
    ("PAN Card", "Apply for new PAN card"),
    ("Aadhar Card", "Aadhar card services"),
    ("Passport", "Passport services"),
    ("Voter ID", "Voter ID services"),
    ("Driving License", "Driving license services"),
]


class Catalog:
    """Offerable services.  Deleting only flips ``is_active`` off."""

    def __init__(self, store: Store):
        self.store = store

    def list_active(self) -> List[ServiceOut]:
        rows = self.store.find(SERVICES, order_by="created_at", descending=True, is_active=True)
        return [ServiceOut.model_validate(row) for row in rows]

    def get(self, service_id: int) -> ServiceOut:
        row = self.store.get(SERVICES, service_id)
        if row is None:
            raise NotFoundError("Service not found")
        return ServiceOut.model_validate(row)

    def create(self, data: ServiceCreate) -> ServiceOut:
        if not (data.name or "").strip() or not (data.description or "").strip():
            raise ValidationError("Please provide name and description")
        row = self.store.insert(
            SERVICES,
            {
                "name": data.name.strip(),
                "description": data.description.strip(),
                "icon": data.icon or DEFAULT_ICON,
                "color": data.color or DEFAULT_COLOR,
                "is_active": True,
                "created_at": utcnow(),
            },
        )
        logger.info("Service %s created: %s", row["id"], row["name"])
        return ServiceOut.model_validate(row)

    def update(self, service_id: int, data: ServiceUpdate) -> ServiceOut:
        changes = data.model_dump(exclude_none=True)
        for field in ("name", "description"):
            if field in changes:
                if not changes[field].strip():
                    raise ValidationError(f"Service {field} cannot be empty")
                changes[field] = changes[field].strip()

        row = self.store.update(SERVICES, service_id, changes) if changes else self.store.get(SERVICES, service_id)
        if row is None:
            raise NotFoundError("Service not found")
        logger.info("Service %s updated (%s)", service_id, ", ".join(sorted(changes)) or "no changes")
        return ServiceOut.model_validate(row)

    def deactivate(self, service_id: int) -> None:
        row = self.store.update(SERVICES, service_id, {"is_active": False})
        if row is None:
            raise NotFoundError("Service not found")
        logger.info("Service %s deactivated", service_id)

    def seed_defaults(self) -> int:
        if self.store.count(SERVICES) > 0:
            return 0
        for name, description in DEFAULT_SERVICES:
            self.create(ServiceCreate(name=name, description=description))
        logger.info("Seeded %d default services", len(DEFAULT_SERVICES))
        return len(DEFAULT_SERVICES)
