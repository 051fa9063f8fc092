"""
임풋 마켓플레이스 - 메인 애플리케이션
- 자동 라우터 등록 및 생명주기 관리
- 환경별 설정 지원
"""

import logging
import os

# 설정 관리자를 가장 먼저 초기화
from impoot.config_manager import config_manager
from impoot.app_factory import create_application

logger = logging.getLogger(__name__)

def main():
    """메인 애플리케이션 진입점"""

    environment = os.getenv('ENVIRONMENT', 'development').lower()

    app = create_application(environment)

    logger.info(f"🚀 임풋 마켓플레이스 시작 - 환경: {environment}")
    logger.info(f"📊 설정 요약:")

    config_summary = config_manager.get_config_summary()
    for key, value in config_summary.items():
        logger.info(f"   {key}: {value}")

    return app

# FastAPI 애플리케이션 인스턴스 생성
app = main()

# 개발 서버 실행을 위한 진입점
if __name__ == "__main__":
    import uvicorn

    if config_manager.is_production():
        uvicorn.run(
            "main:app",
            host=config_manager.webserver.host,
            port=config_manager.webserver.port,
            workers=config_manager.webserver.workers,
            reload=False,
            log_level="info",
            access_log=True
        )
    else:
        uvicorn.run(
            "main:app",
            host=config_manager.webserver.host,
            port=config_manager.webserver.port,
            reload=config_manager.webserver.reload,
            log_level="debug" if config_manager.system.debug else "info",
            access_log=True
        )
