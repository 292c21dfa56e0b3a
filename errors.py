"""
Typed failures raised by the services.

Each error knows its HTTP status and how to render itself; main.py only
translates, it never decides.
"""
from typing import Any, Dict, List, Optional


class ServiceError(Exception):
    status_code = 500

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg

    def body(self) -> Dict[str, Any]:
        return {"msg": self.msg}


class ValidationError(ServiceError):
    status_code = 422

    def __init__(self, msg: str, param: Optional[str] = None):
        super().__init__(msg)
        self.param = param

    def body(self) -> Dict[str, Any]:
        err = {"msg": self.msg}
        if self.param:
            err["param"] = self.param
        return {"errors": [err]}


class BadReferenceError(ServiceError):
    """An id that cannot be an ObjectId at all."""

    status_code = 400


class AuthError(ServiceError):
    status_code = 401


class InvalidCredentialsError(ServiceError):
    status_code = 400

    def __init__(self):
        super().__init__("Invalid credentials")

    def body(self) -> Dict[str, Any]:
        return {"errors": [{"msg": self.msg}]}


class AuthorizationError(ServiceError):
    status_code = 403

    def __init__(self, msg: str = "Not authorized"):
        super().__init__(msg)


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409

    def body(self) -> Dict[str, Any]:
        return {"errors": [{"msg": self.msg}]}


class StoreError(ServiceError):
    status_code = 500

    def __init__(self, msg: str = "Server error"):
        super().__init__(msg)


class CascadeError(StoreError):
    """Some steps of a multi-document delete failed; `failed` names them."""

    def __init__(self, what: str, failed: List[str]):
        super().__init__(f"Could not fully delete {what}")
        self.failed = failed

    def body(self) -> Dict[str, Any]:
        return {"msg": self.msg, "failed": self.failed}
