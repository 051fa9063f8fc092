"""
향상된 설정 관리 시스템
- 환경별 설정 관리 (개발/운영/테스트)
- 런타임 설정 변경 및 검증
- 데이터베이스 URL 조합
"""

import os
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from pathlib import Path
from dotenv import load_dotenv

from config import LOGGING_CONFIG, DEFAULT_COMMISSION_RATE, CATEGORIES

logger = logging.getLogger(__name__)

@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = LOGGING_CONFIG["level"]
    format: str = LOGGING_CONFIG["format"]
    file_path: str = LOGGING_CONFIG["file"]
    max_bytes: int = LOGGING_CONFIG["max_bytes"]
    backup_count: int = LOGGING_CONFIG["backup_count"]
    console_enabled: bool = True

@dataclass
class DatabaseConfig:
    """데이터베이스 설정"""
    url_override: str = ""  # DATABASE_URL (테스트용 sqlite 등)
    mysql_host: str = "localhost"
    mysql_port: int = 3306
    mysql_database: str = "impoot"
    mysql_user: str = "root"
    mysql_password: str = ""
    pool_size: int = 20
    max_overflow: int = 30
    echo: bool = False

    @property
    def url(self) -> str:
        if self.url_override:
            return self.url_override
        return (
            f"mysql+aiomysql://{self.mysql_user}:{self.mysql_password}"
            f"@{self.mysql_host}:{self.mysql_port}/{self.mysql_database}?charset=utf8mb4"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

@dataclass
class AuthConfig:
    """인증 설정"""
    jwt_secret_key: str = "your-super-secret-jwt-key-change-this"
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24
    remember_me_hours: int = 7 * 24
    admin_email: str = ""
    admin_password: str = ""

@dataclass
class MarketplaceConfig:
    """마켓플레이스 설정"""
    categories: list = field(default_factory=lambda: list(CATEGORIES))
    default_commission_rate: int = DEFAULT_COMMISSION_RATE
    review_edit_window_hours: int = 24

@dataclass
class AIConfig:
    """AI 브리핑 설정"""
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    request_timeout: int = 30

@dataclass
class WebServerConfig:
    """웹 서버 설정"""
    host: str = "0.0.0.0"
    port: int = 8001
    reload: bool = False
    workers: int = 1
    cors_enabled: bool = True
    cors_origins: list = field(default_factory=lambda: [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ])

@dataclass
class SystemConfig:
    """시스템 설정"""
    environment: str = "development"  # development, production, testing
    debug: bool = True

class ConfigManager:
    """설정 관리자"""

    def __init__(self, env_file: Optional[str] = None):
        self._env_file = env_file or '.env'
        self._load_environment()
        self._initialize_configs()

    def _load_environment(self):
        """환경 변수 로드"""
        if Path(self._env_file).exists():
            load_dotenv(self._env_file)
            logger.info(f"✅ 환경 설정 로드 완료: {self._env_file}")
        else:
            logger.warning(f"⚠️ 환경 파일 없음: {self._env_file} (기본값 사용)")

    def _initialize_configs(self):
        """설정 초기화"""
        environment = os.getenv('ENVIRONMENT', 'development').lower()

        self.logging = LoggingConfig(
            level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            file_path=os.getenv('LOG_FILE', LOGGING_CONFIG["file"]),
            console_enabled=os.getenv('LOG_CONSOLE', 'true').lower() == 'true'
        )

        self.database = DatabaseConfig(
            url_override=os.getenv('DATABASE_URL', ''),
            mysql_host=os.getenv('MYSQL_HOST', 'localhost'),
            mysql_port=int(os.getenv('MYSQL_PORT', '3306')),
            mysql_database=os.getenv('MYSQL_DATABASE', 'impoot'),
            mysql_user=os.getenv('MYSQL_USERNAME', 'root'),
            mysql_password=os.getenv('MYSQL_PASSWORD', ''),
            echo=os.getenv('SQL_ECHO', 'false').lower() == 'true'
        )

        self.auth = AuthConfig(
            jwt_secret_key=os.getenv('JWT_SECRET_KEY', 'your-super-secret-jwt-key-change-this'),
            jwt_expire_hours=int(os.getenv('JWT_EXPIRE_HOURS', '24')),
            admin_email=os.getenv('ADMIN_EMAIL', ''),
            admin_password=os.getenv('ADMIN_PASSWORD', '')
        )

        self.marketplace = MarketplaceConfig(
            default_commission_rate=int(os.getenv('DEFAULT_COMMISSION_RATE', str(DEFAULT_COMMISSION_RATE)))
        )

        self.ai = AIConfig(
            gemini_api_key=os.getenv('GEMINI_API_KEY', ''),
            gemini_model=os.getenv('GEMINI_MODEL', 'gemini-1.5-flash'),
            request_timeout=int(os.getenv('AI_TIMEOUT', '30'))
        )

        self.webserver = WebServerConfig(
            host=os.getenv('HOST', '0.0.0.0'),
            port=int(os.getenv('PORT', '8001')),
            reload=os.getenv('RELOAD', 'false').lower() == 'true',
            workers=int(os.getenv('WORKERS', '1'))
        )
        cors_origins = os.getenv('CORS_ORIGINS')
        if cors_origins:
            self.webserver.cors_origins = [origin.strip() for origin in cors_origins.split(',') if origin.strip()]

        self.system = SystemConfig(
            environment=environment,
            debug=os.getenv('DEBUG', 'true').lower() == 'true'
        )

        logger.info(f"⚙️ 설정 초기화 완료 - 환경: {environment}, 카테고리: {len(self.marketplace.categories)}개")

    def get_config_summary(self) -> Dict[str, Any]:
        """설정 요약 정보 반환"""
        return {
            "environment": self.system.environment,
            "debug": self.system.debug,
            "webserver_port": self.webserver.port,
            "categories": self.marketplace.categories,
            "marketplace": {
                "default_commission_rate": self.marketplace.default_commission_rate,
                "review_edit_window_hours": self.marketplace.review_edit_window_hours
            },
            "database": {
                "driver": self.database.url.split("://")[0],
                "sqlite": self.database.is_sqlite
            },
            "ai_briefing_enabled": bool(self.ai.gemini_api_key)
        }

    def validate_config(self) -> Dict[str, Any]:
        """설정 유효성 검증"""
        issues = []
        warnings = []

        if not 0 <= self.marketplace.default_commission_rate <= 100:
            issues.append(f"수수료율이 유효하지 않음: {self.marketplace.default_commission_rate}")

        if self.auth.jwt_expire_hours <= 0:
            issues.append(f"토큰 만료 시간이 유효하지 않음: {self.auth.jwt_expire_hours}")

        if self.system.environment == 'production' and self.system.debug:
            warnings.append("운영 환경에서 디버그 모드가 활성화됨")

        if self.system.environment == 'production' and self.auth.jwt_secret_key == AuthConfig.jwt_secret_key:
            warnings.append("운영 환경에서 기본 JWT 시크릿 키 사용 중")

        if not self.auth.admin_email:
            warnings.append("ADMIN_EMAIL 미설정 - 최고 관리자 자동 생성 건너뜀")

        if not self.ai.gemini_api_key:
            warnings.append("GEMINI_API_KEY 미설정 - AI 브리핑 생성 불가")

        return {
            "valid": len(issues) == 0,
            "issues": issues,
            "warnings": warnings
        }

    def update_runtime_config(self, section: str, key: str, value: Any) -> bool:
        """런타임 설정 업데이트"""
        if not hasattr(self, section):
            logger.error(f"❌ 알 수 없는 설정 섹션: {section}")
            return False

        section_obj = getattr(self, section)
        if not hasattr(section_obj, key):
            logger.error(f"❌ 알 수 없는 설정 키: {section}.{key}")
            return False

        old_value = getattr(section_obj, key)
        setattr(section_obj, key, value)
        logger.info(f"🔄 런타임 설정 업데이트: {section}.{key} = {value} (이전: {old_value})")
        return True

    def is_production(self) -> bool:
        """운영 환경 여부 확인"""
        return self.system.environment == 'production'

    def is_development(self) -> bool:
        """개발 환경 여부 확인"""
        return self.system.environment == 'development'

    def is_testing(self) -> bool:
        """테스트 환경 여부 확인"""
        return self.system.environment == 'testing'

# 전역 설정 관리자 인스턴스
config_manager = ConfigManager()
