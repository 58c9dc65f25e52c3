import logging
import sys

from config.settings import settings


def setup_logging(level: str = None):
    """루트 로거를 한 번만 구성한다. 이미 핸들러가 있으면 레벨만 맞춘다."""
    level = level or settings.LOG_LEVEL
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler(sys.stdout)],
        )
    root.setLevel(level)

    # 드라이버 디버그 로그 비활성화
    logging.getLogger("pymongo").setLevel(logging.WARNING)
