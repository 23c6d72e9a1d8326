import contextvars

_caller_id: contextvars.ContextVar[str] = contextvars.ContextVar("caller_id", default="-")
_request_id: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")


def set_caller_id(caller_id: str) -> None:
    _caller_id.set(caller_id)


def get_caller_id() -> str:
    return _caller_id.get()


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def get_request_id() -> str:
    return _request_id.get()


def clear_context() -> None:
    _caller_id.set("-")
    _request_id.set("-")
