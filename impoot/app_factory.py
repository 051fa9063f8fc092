"""
FastAPI 애플리케이션 팩토리
- 애플리케이션 생성 및 설정을 모듈화
- 환경별 다른 설정 적용 가능
- 테스트 용이성 향상
"""

import logging
from logging.handlers import RotatingFileHandler
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config_manager import config_manager
from .errors import MarketplaceError
from .router_registry import router_registry
from .app_lifecycle import lifespan_manager

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"

def setup_logging():
    """로깅 설정"""
    handlers = []

    # 파일 핸들러
    if config_manager.logging.file_path:
        file_handler = RotatingFileHandler(
            config_manager.logging.file_path,
            maxBytes=config_manager.logging.max_bytes,
            backupCount=config_manager.logging.backup_count,
            encoding="utf-8"
        )
        handlers.append(file_handler)

    # 콘솔 핸들러
    if config_manager.logging.console_enabled:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=getattr(logging, config_manager.logging.level),
        format=config_manager.logging.format,
        handlers=handlers,
        force=True  # 기존 설정 덮어쓰기
    )

def setup_cors_middleware(app: FastAPI):
    """CORS 미들웨어 설정"""
    if not config_manager.webserver.cors_enabled:
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config_manager.webserver.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    logger.info(f"✅ CORS 미들웨어 설정 완료 - Origins: {len(config_manager.webserver.cors_origins)}개")

def setup_exception_handlers(app: FastAPI):
    """예외 처리기 설정"""

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError):
        logger.warning(f"⚠️ 요청 거부 [{exc.status_code}] {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message}
        )

    @app.exception_handler(500)
    async def internal_server_error_handler(request: Request, exc: Exception):
        logger.error(f"Internal server error: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: Exception):
        return JSONResponse(
            status_code=404,
            content={"detail": getattr(exc, "detail", None) or "Resource not found"}
        )

def add_custom_endpoints(app: FastAPI):
    """커스텀 엔드포인트 추가"""

    @app.get("/health")
    async def health_check():
        """헬스 체크 엔드포인트"""
        return {
            "status": "healthy",
            "environment": config_manager.system.environment,
            "version": APP_VERSION
        }

    @app.get("/config")
    async def get_config_summary():
        """설정 요약 정보"""
        return config_manager.get_config_summary()

    @app.post("/config/validate")
    async def validate_config():
        """설정 유효성 검증"""
        return config_manager.validate_config()

def create_application(environment: str = None) -> FastAPI:
    """
    FastAPI 애플리케이션 생성 팩토리

    Args:
        environment: 환경 설정 (development, production, testing)

    Returns:
        FastAPI: 구성된 FastAPI 애플리케이션 인스턴스
    """

    # 환경별 설정 오버라이드
    if environment:
        config_manager.system.environment = environment
        config_manager.system.debug = environment in ["development", "testing"]

    setup_logging()

    logger.info(f"🚀 애플리케이션 생성 시작 - 환경: {config_manager.system.environment}")

    # 설정 검증
    validation_result = config_manager.validate_config()
    if not validation_result["valid"]:
        logger.error(f"❌ 설정 검증 실패: {validation_result['issues']}")
        raise ValueError(f"Invalid configuration: {validation_result['issues']}")

    if validation_result["warnings"]:
        logger.warning(f"⚠️ 설정 경고: {validation_result['warnings']}")

    app = FastAPI(
        title="Impoot Community Marketplace",
        description="임풋 - 부동산 커뮤니티 모임/강의/리포트 마켓플레이스",
        version=APP_VERSION,
        debug=config_manager.system.debug,
        lifespan=lifespan_manager
    )

    setup_cors_middleware(app)
    setup_exception_handlers(app)

    registration_results = router_registry.register_api_routers(app)

    add_custom_endpoints(app)

    successful = sum(registration_results.values())
    logger.info(f"✅ 애플리케이션 생성 완료 - 라우터 {successful}/{len(registration_results)}")

    return app
