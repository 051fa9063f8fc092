"""
권한 검증 미들웨어
- JWT 토큰 검증 (Authorization 헤더 또는 auth_token 쿠키)
- 역할 기반 접근 제어 (super_admin / {category}_manager)
"""

import logging
from typing import Optional, Dict, Any
from fastapi import Request, HTTPException, status

from .auth_service import AuthService
from .role_system import is_super_admin, is_partner

logger = logging.getLogger(__name__)

def extract_token(request: Request) -> Optional[str]:
    """요청에서 토큰 추출"""
    authorization = request.headers.get("Authorization")
    if authorization:
        if authorization.startswith("Bearer "):
            return authorization[7:]
        return None
    return request.cookies.get("auth_token")

class AuthMiddleware:
    """인증 미들웨어"""

    async def get_current_user(self, request: Request) -> Optional[Dict[str, Any]]:
        """현재 로그인한 사용자 정보 조회"""
        token = extract_token(request)
        if not token:
            return None

        try:
            success, message, user_data = await AuthService.verify_session(token)
        except Exception as e:
            logger.error(f"사용자 인증 처리 오류: {str(e)}")
            return None

        if success and user_data:
            request.state.current_user = user_data
            return user_data

        logger.warning(f"토큰 검증 실패: {message}")
        return None

    async def require_auth(self, request: Request) -> Dict[str, Any]:
        """인증이 필요한 엔드포인트용 - 인증되지 않으면 401 오류"""
        user = await self.get_current_user(request)

        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="인증이 필요합니다",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return user

    async def require_super_admin(self, request: Request) -> Dict[str, Any]:
        """최고 관리자 권한 필수"""
        user = await self.require_auth(request)

        if not is_super_admin(user):
            raise HTTPException(status_code=403, detail="관리자 권한이 필요합니다")
        return user

    async def require_partner(self, request: Request) -> Dict[str, Any]:
        """파트너(카테고리 매니저 또는 최고 관리자) 권한 필수"""
        user = await self.require_auth(request)

        if not is_partner(user):
            raise HTTPException(status_code=403, detail="파트너 권한이 필요합니다")
        return user

# 전역 인스턴스
auth_middleware = AuthMiddleware()

# FastAPI Depends용 함수들
async def get_current_user(request: Request) -> Optional[Dict[str, Any]]:
    """현재 사용자 정보 조회 (의존성 주입용, 비로그인 시 None)"""
    return await auth_middleware.get_current_user(request)

async def require_auth(request: Request) -> Dict[str, Any]:
    """인증 필수 (의존성 주입용)"""
    return await auth_middleware.require_auth(request)

async def require_super_admin(request: Request) -> Dict[str, Any]:
    """최고 관리자 권한 필수"""
    return await auth_middleware.require_super_admin(request)

async def require_partner(request: Request) -> Dict[str, Any]:
    """파트너 권한 필수"""
    return await auth_middleware.require_partner(request)
