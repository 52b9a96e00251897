"""표준화된 로거 모듈.

TravelBook 서버와 클라이언트 라이브러리 전체에서 일관된 로깅 형식을 제공합니다.
"""

import logging
import sys

from app.core.logging_config import resolve_log_level

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """표준화된 로거를 반환합니다.

    핸들러가 없는 로거에만 stdout 핸들러를 붙이므로 여러 번 호출해도 로그가
    중복 출력되지 않습니다. 레벨은 `LOG_LEVEL` 환경변수를 따릅니다.

    Args:
        name: 로거 이름 (일반적으로 __name__ 사용).

    Returns:
        설정된 로거 인스턴스.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        level = resolve_log_level()
        logger.setLevel(level)

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(handler)

    return logger
