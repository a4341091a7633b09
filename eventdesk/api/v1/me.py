from fastapi import APIRouter

from eventdesk.api.v1.schemas import UserOut
from eventdesk.auth.deps import CurrentUser

router = APIRouter(prefix="/me", tags=["me"])


@router.get("", response_model=UserOut)
def me(user: CurrentUser):
    return UserOut(id=user.id, name=user.name, email=user.email)
