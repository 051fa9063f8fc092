"""인증 관련 API 라우터"""

import logging
from datetime import datetime
from typing import Dict, Any
from fastapi import APIRouter, Request, Depends
from pydantic import BaseModel, EmailStr, Field

from ..auth.auth_service import AuthService
from ..auth.middleware import require_auth, extract_token
from config import SERVER_START_TIME

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str
    name: str = Field(..., min_length=1, max_length=50)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    remember_me: bool = False

class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str

@router.post("/api/auth/register")
async def register_user(request: RegisterRequest):
    """사용자 등록 API"""
    try:
        if request.password != request.confirm_password:
            return {"success": False, "message": "비밀번호가 일치하지 않습니다"}

        success, message, user_data = await AuthService.register_user(
            email=request.email,
            password=request.password,
            name=request.name
        )

        if success:
            return {"success": True, "message": message, "user": user_data}
        return {"success": False, "message": message}

    except Exception as e:
        logger.error(f"회원가입 API 오류: {str(e)}")
        return {"success": False, "message": "회원가입 중 오류가 발생했습니다"}

@router.post("/api/auth/login")
async def login_user(request: LoginRequest):
    """사용자 로그인 API"""
    try:
        success, message, user_data = await AuthService.authenticate_user(
            email=request.email,
            password=request.password
        )

        if not success or not user_data:
            return {"success": False, "message": message}

        token = AuthService.create_session(user_data['id'], remember_me=request.remember_me)
        return {
            "success": True,
            "message": "로그인 성공",
            "token": token,
            "user": user_data,
            "remember_me": request.remember_me  # 프론트엔드에서 쿠키 설정에 사용
        }

    except Exception as e:
        logger.error(f"로그인 API 오류: {str(e)}")
        return {"success": False, "message": "로그인 중 오류가 발생했습니다"}

@router.post("/api/auth/logout")
async def logout_user(current_user: Dict[str, Any] = Depends(require_auth)):
    """사용자 로그아웃 API - JWT 는 stateless 이므로 클라이언트 토큰 삭제로 처리"""
    logger.info(f"👋 로그아웃: user_id={current_user.get('id')}")
    return {"success": True, "message": "로그아웃 완료"}

@router.post("/api/auth/refresh-token")
async def refresh_token(request: Request):
    """토큰 갱신 API - 자동 토큰 갱신용"""
    try:
        current_token = extract_token(request)
        if not current_token:
            return {"success": False, "message": "유효하지 않은 인증 헤더입니다"}

        success, message, new_token, remember_me = await AuthService.refresh_token(current_token)

        if success and new_token:
            return {
                "success": True,
                "message": message,
                "token": new_token,
                "remember_me": remember_me
            }
        return {"success": False, "message": message}

    except Exception as e:
        logger.error(f"토큰 갱신 API 오류: {str(e)}")
        return {"success": False, "message": "토큰 갱신 중 오류가 발생했습니다"}

@router.get("/api/auth/server-status")
async def get_server_status():
    """서버 상태 조회 API - 서버 재시작 감지용"""
    now = datetime.utcnow().timestamp()
    return {
        "success": True,
        "server_start_time": SERVER_START_TIME,
        "current_time": now,
        "uptime_seconds": now - SERVER_START_TIME
    }

@router.get("/api/auth/me")
async def get_current_user_info(current_user: Dict[str, Any] = Depends(require_auth)):
    """현재 사용자 정보 조회 API"""
    return {"success": True, "user": current_user}

@router.post("/api/auth/change-password")
async def change_password(
    request: ChangePasswordRequest,
    current_user: Dict[str, Any] = Depends(require_auth)
):
    """비밀번호 변경 API"""
    try:
        success, message = await AuthService.change_password(
            user_id=current_user["id"],
            current_password=request.current_password,
            new_password=request.new_password
        )
        return {"success": success, "message": message}

    except Exception as e:
        logger.error(f"비밀번호 변경 API 오류: {str(e)}")
        return {"success": False, "message": "비밀번호 변경 중 오류가 발생했습니다"}
