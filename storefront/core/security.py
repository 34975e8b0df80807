import hmac

from storefront.core.config import ADMIN_PASSWORD


def check_admin_password(password: str) -> bool:
    return hmac.compare_digest(
        password.encode("utf-8"), ADMIN_PASSWORD.encode("utf-8")
    )
