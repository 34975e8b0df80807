from fastapi import HTTPException, Request, status

from storefront.core.security import check_admin_password


def login_admin(request: Request, password: str) -> bool:
    if not check_admin_password(password):
        return False
    request.session["is_admin"] = True
    return True


def logout_admin(request: Request) -> None:
    request.session.pop("is_admin", None)


def require_admin(request: Request) -> None:
    if not request.session.get("is_admin"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
