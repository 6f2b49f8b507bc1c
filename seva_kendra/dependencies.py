# seva_kendra/dependencies.py

from typing import Annotated, Optional

from fastapi import Depends, Path, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .catalog import Catalog
from .config import Settings, get_settings
from .identity import Identity
from .lifecycle import RequestLifecycle
from .schemas import TokenClaims
from .store import Store

bearer_scheme = HTTPBearer(auto_error=False)

# Store ids are signed 64-bit integers
MAX_RECORD_ID = 2**63 - 1
RecordId = Annotated[int, Path(ge=1, le=MAX_RECORD_ID)]


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_identity(store: Store = Depends(get_store), settings: Settings = Depends(get_settings)) -> Identity:
    return Identity(store, settings)


def get_catalog(store: Store = Depends(get_store)) -> Catalog:
    return Catalog(store)


def get_lifecycle(store: Store = Depends(get_store)) -> RequestLifecycle:
    return RequestLifecycle(store)


def _token(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    return credentials.credentials if credentials else None


def require_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: Identity = Depends(get_identity),
) -> TokenClaims:
    return identity.verify_token(_token(credentials))


def _gated(flag: str):
    def dependency(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        identity: Identity = Depends(get_identity),
        settings: Settings = Depends(get_settings),
    ) -> Optional[TokenClaims]:
        if not getattr(settings, flag):
            return None
        return identity.verify_token(_token(credentials))

    return dependency


# Public by default, see REQUESTS_READ_REQUIRES_AUTH / REQUESTS_STATUS_REQUIRES_AUTH
requests_read_gate = _gated("requests_read_requires_auth")
requests_status_gate = _gated("requests_status_requires_auth")
