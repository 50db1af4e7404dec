import socket
from uuid import uuid4


def generate_name() -> str:
    return f"level-{uuid4().hex[:8]}"


def generate_id() -> str:
    return uuid4().hex


def available_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind(("", 0))
        except OSError as exc:
            raise RuntimeError("cannot acquire a tcp port") from exc
        return int(sock.getsockname()[1])
