# seva_kendra/routers/requests.py

from fastapi import APIRouter, Depends, status

from ..dependencies import RecordId, get_lifecycle, requests_read_gate, requests_status_gate
from ..lifecycle import RequestLifecycle
from ..schemas import RequestCreate, RequestListResponse, RequestResponse, StatusUpdate

router = APIRouter(prefix="/requests", tags=["Requests"])


@router.post("", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
def create_request(req: RequestCreate, lifecycle: RequestLifecycle = Depends(get_lifecycle)):
    return RequestResponse(message="Application submitted successfully", request=lifecycle.submit(req))


@router.get("", response_model=RequestListResponse, dependencies=[Depends(requests_read_gate)])
def get_requests(lifecycle: RequestLifecycle = Depends(get_lifecycle)):
    return RequestListResponse(requests=lifecycle.list_all())


@router.get("/user/{phone}", response_model=RequestListResponse, dependencies=[Depends(requests_read_gate)])
def get_user_requests(phone: str, lifecycle: RequestLifecycle = Depends(get_lifecycle)):
    return RequestListResponse(requests=lifecycle.list_by_phone(phone))


@router.get("/track/{registration_no}", response_model=RequestResponse)
def track_request(registration_no: str, lifecycle: RequestLifecycle = Depends(get_lifecycle)):
    return RequestResponse(request=lifecycle.track(registration_no))


@router.put("/{request_id}/status", response_model=RequestResponse, dependencies=[Depends(requests_status_gate)])
def update_status(request_id: RecordId, req: StatusUpdate, lifecycle: RequestLifecycle = Depends(get_lifecycle)):
    return RequestResponse(message="Status updated successfully", request=lifecycle.update_status(request_id, req.status))
