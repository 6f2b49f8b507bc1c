# seva_kendra/lifecycle.py

"""Citizen applications: submission, tracking and status changes.

Every application starts out ``pending``.  Any of the four statuses may
follow any other; the only rule on a status change is membership in
:class:`RequestStatus`.
"""

import logging
from datetime import datetime
from typing import Callable, List

from .exceptions import ConflictError, NotFoundError, ValidationError
from .models import utcnow
from .schemas import RequestCreate, RequestOut, RequestStatus
from .store import REQUESTS, Store
from .utils import generate_registration_no

logger = logging.getLogger(__name__)

MAX_AADHAR_LENGTH = 12
# Fresh draws allowed when a generated registration number is already taken
REGISTRATION_NO_ATTEMPTS = 5


class RequestLifecycle:
    def __init__(
        self,
        store: Store,
        clock: Callable[[], datetime] = utcnow,
        registration_no_factory: Callable[[], str] = generate_registration_no,
    ):
        self.store = store
        self.clock = clock
        self.registration_no_factory = registration_no_factory

    def submit(self, data: RequestCreate) -> RequestOut:
        required = (data.user_name, data.user_phone, data.service_name, data.service_id)
        if any(not str(value or "").strip() for value in required):
            raise ValidationError("Please provide all required fields")
        if data.aadhar_number and len(data.aadhar_number) > MAX_AADHAR_LENGTH:
            raise ValidationError("Aadhar number cannot exceed 12 characters")

        now = self.clock()
        record = {
            "user_name": data.user_name.strip(),
            "user_phone": data.user_phone.strip(),
            "service_name": data.service_name.strip(),
            "service_id": str(data.service_id).strip(),
            "aadhar_number": data.aadhar_number or None,
            "address": data.address or None,
            "status": RequestStatus.pending.value,
            "submitted_at": now,
            "updated_at": now,
        }

        supplied = (data.registration_no or "").strip()
        if supplied:
            try:
                row = self.store.insert(REQUESTS, {**record, "registration_no": supplied})
            except ConflictError:
                raise ConflictError("Registration number already exists", field="registration_no")
        else:
            row = self._insert_generated(record)

        logger.info("Request %s submitted for %s (%s)", row["registration_no"], row["service_name"], row["user_phone"])
        return RequestOut.model_validate(row)

    def _insert_generated(self, record: dict) -> dict:
        for attempt in range(1, REGISTRATION_NO_ATTEMPTS + 1):
            registration_no = self.registration_no_factory()
            try:
                return self.store.insert(REQUESTS, {**record, "registration_no": registration_no})
            except ConflictError as exc:
                if exc.field != "registration_no":
                    raise
                logger.warning("Registration number %s taken (attempt %d)", registration_no, attempt)
        raise ConflictError("Could not allocate a unique registration number", field="registration_no")

    def list_all(self) -> List[RequestOut]:
        rows = self.store.find(REQUESTS, order_by="submitted_at", descending=True)
        return [RequestOut.model_validate(row) for row in rows]

    def list_by_phone(self, phone: str) -> List[RequestOut]:
        rows = self.store.find(REQUESTS, order_by="submitted_at", descending=True, user_phone=phone.strip())
        return [RequestOut.model_validate(row) for row in rows]

    def track(self, registration_no: str) -> RequestOut:
        row = self.store.find_one(REQUESTS, registration_no=registration_no.strip())
        if row is None:
            raise NotFoundError("Request not found")
        return RequestOut.model_validate(row)

    def update_status(self, request_id: int, status: str) -> RequestOut:
        try:
            new_status = RequestStatus(status)
        except ValueError:
            raise ValidationError("Invalid status")

        row = self.store.update(REQUESTS, request_id, {"status": new_status.value, "updated_at": self.clock()})
        if row is None:
            raise NotFoundError("Request not found")
        logger.info("Request %s status -> %s", row["registration_no"], new_status.value)
        return RequestOut.model_validate(row)
