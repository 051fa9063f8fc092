"""
라우터 자동 등록 시스템
- impoot.api 하위 라우터를 설정 목록 기준으로 불러와 등록
"""

import importlib
import logging
from typing import Dict, List, Tuple, Optional
from fastapi import FastAPI
from fastapi.routing import APIRouter

logger = logging.getLogger(__name__)

class RouterConfig:
    """라우터 설정 정보"""

    def __init__(self, module_path: str, router_name: str = "router",
                 prefix: str = "", tags: Optional[List[str]] = None):
        self.module_path = module_path
        self.router_name = router_name
        self.prefix = prefix
        self.tags = tags or []

class RouterRegistry:
    """라우터 자동 등록 관리"""

    def __init__(self):
        self.api_routers: Dict[str, RouterConfig] = {}
        self._setup_default_routers()

    def _setup_default_routers(self):
        """기본 라우터 설정"""
        api_configs = [
            ("auth", RouterConfig("impoot.api.auth", "router", "", ["Authentication"])),
            ("home", RouterConfig("impoot.api.home", "router", "", ["Home"])),
            ("items", RouterConfig("impoot.api.items", "router", "", ["Items"])),
            ("applications", RouterConfig("impoot.api.applications", "router", "", ["Applications"])),
            ("interactions", RouterConfig("impoot.api.interactions", "router", "", ["Interactions"])),
            ("reviews", RouterConfig("impoot.api.reviews", "router", "", ["Reviews"])),
            ("mypage", RouterConfig("impoot.api.mypage", "router", "", ["My Page"])),
            ("admin", RouterConfig("impoot.api.admin", "router", "", ["Admin"])),
        ]

        for name, config in api_configs:
            self.api_routers[name] = config

    def _load_router(self, config: RouterConfig) -> Tuple[Optional[APIRouter], str]:
        """라우터 동적 로드"""
        try:
            module = importlib.import_module(config.module_path)
            router = getattr(module, config.router_name, None)

            if router is None:
                return None, f"Router '{config.router_name}' not found in {config.module_path}"

            if not isinstance(router, APIRouter):
                return None, f"'{config.router_name}' is not an APIRouter instance in {config.module_path}"

            return router, ""

        except ImportError as e:
            return None, f"Failed to import {config.module_path}: {str(e)}"

    def register_api_routers(self, app: FastAPI) -> Dict[str, bool]:
        """API 라우터들을 FastAPI 앱에 등록"""
        results = {}

        logger.info(f"🔄 API 라우터 등록 시작 ({len(self.api_routers)}개)")

        for name, config in self.api_routers.items():
            router, error = self._load_router(config)

            if router:
                app.include_router(router, prefix=config.prefix, tags=config.tags)
                logger.info(f"✅ API 라우터 등록 완료: {name} ({config.prefix or '/'})")
                results[name] = True
            else:
                logger.warning(f"⚠️ API 라우터 로드 실패: {name} - {error}")
                results[name] = False

        success_count = sum(results.values())
        logger.info(f"🎯 API 라우터 등록 완료: {success_count}/{len(self.api_routers)}개 성공")

        return results

# 전역 라우터 레지스트리 인스턴스
router_registry = RouterRegistry()
