# app/logging_config.py
# 루트 로거 설정. main.create_app()에서 한 번 호출한다.
import logging

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-8s %(name)s %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """
    루트 로깅 설정 (여러 번 호출해도 핸들러는 하나만 붙는다)
    - uvicorn/pytest가 이미 핸들러를 붙였으면 레벨만 맞춘다
    """
    lvl = logging.getLevelName((level or "INFO").strip().upper())
    if not isinstance(lvl, int):
        lvl = logging.INFO

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(lvl)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    root.setLevel(lvl)
    root.addHandler(handler)
