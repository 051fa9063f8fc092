"""
인증 서비스
- 사용자 등록 및 로그인 (이메일 + 비밀번호)
- JWT 토큰 기반 세션 관리
- 패스워드 검증
"""

import re
import jwt
import bcrypt
import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple, Dict
from sqlalchemy import select

from .models import User, default_avatar
from ..database.connection import get_session
from ..config_manager import config_manager
from config import SERVER_START_TIME

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"^010(-\d{4}-\d{4}|\d{8})$")

def is_valid_phone(phone: Optional[str]) -> bool:
    """휴대폰 번호 형식 검증 (010-XXXX-XXXX 또는 010XXXXXXXX)"""
    if not phone:
        return False
    return bool(PHONE_PATTERN.match(phone.strip()))

class AuthService:
    """인증 관련 서비스"""

    JWT_ALGORITHM = "HS256"

    @classmethod
    def _secret(cls) -> str:
        return config_manager.auth.jwt_secret_key

    @classmethod
    def validate_password_strength(cls, password: str) -> Tuple[bool, str]:
        """비밀번호 강도 검증"""
        if len(password) < 8:
            return False, "비밀번호는 8자 이상이어야 합니다"

        if not any(c.isalpha() for c in password):
            return False, "비밀번호에 영문자가 포함되어야 합니다"

        if not any(c.isdigit() for c in password):
            return False, "비밀번호에 숫자가 포함되어야 합니다"

        return True, "유효한 비밀번호입니다"

    @classmethod
    def hash_password(cls, password: str) -> str:
        """비밀번호 해싱"""
        salt = bcrypt.gensalt(rounds=12)
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    @classmethod
    def verify_password(cls, password: str, hashed_password: str) -> bool:
        """비밀번호 검증"""
        return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))

    @classmethod
    async def register_user(cls, email: str, password: str, name: str) -> Tuple[bool, str, Optional[Dict]]:
        """
        사용자 등록
        Returns: (success, message, user_data)
        """
        try:
            is_valid, msg = cls.validate_password_strength(password)
            if not is_valid:
                return False, msg, None

            async with get_session() as session:
                existing_user = await session.execute(select(User).where(User.email == email))
                if existing_user.scalar_one_or_none():
                    return False, "이미 가입된 이메일입니다", None

                new_user = User(
                    email=email,
                    password_hash=cls.hash_password(password),
                    name=name,
                    avatar=default_avatar(email),
                    interests=[],
                    roles=[],
                    is_profile_complete=False,
                )
                session.add(new_user)
                await session.flush()

                logger.info(f"✅ 사용자 등록 완료: {email}")
                return True, "회원가입이 완료되었습니다", new_user.to_dict()

        except Exception as e:
            logger.error(f"❌ 사용자 등록 실패: {str(e)}")
            return False, f"회원가입 중 오류가 발생했습니다: {str(e)}", None

    @classmethod
    async def authenticate_user(cls, email: str, password: str) -> Tuple[bool, str, Optional[Dict]]:
        """
        사용자 인증
        Returns: (success, message, user_data)
        """
        try:
            async with get_session() as session:
                result = await session.execute(
                    select(User).where(User.email == email).where(User.is_active == True)  # noqa: E712
                )

                user = result.scalar_one_or_none()
                if not user:
                    return False, "존재하지 않는 사용자입니다", None

                if not cls.verify_password(password, user.password_hash):
                    return False, "비밀번호가 틀렸습니다", None

                user.last_login = datetime.utcnow()

                logger.info(f"✅ 사용자 인증 성공: {user.email}")
                return True, "로그인 성공", user.to_dict()

        except Exception as e:
            logger.error(f"❌ 사용자 인증 실패: {str(e)}")
            return False, f"로그인 중 오류가 발생했습니다: {str(e)}", None

    @classmethod
    def create_session(cls, user_id: int, remember_me: bool = False) -> str:
        """
        JWT 세션 토큰 생성
        Args:
            user_id: 사용자 ID
            remember_me: 로그인 유지 옵션 (True시 7일, False시 기본 만료 시간)
        """
        if remember_me:
            expire_hours = config_manager.auth.remember_me_hours
        else:
            expire_hours = config_manager.auth.jwt_expire_hours

        now = datetime.utcnow()
        payload = {
            'user_id': user_id,
            'exp': now + timedelta(hours=expire_hours),
            'iat': now,
            'remember_me': remember_me,
            'server_start_time': SERVER_START_TIME  # 🚀 서버 재시작 감지용
        }

        token = jwt.encode(payload, cls._secret(), algorithm=cls.JWT_ALGORITHM)
        logger.info(f"🔒 JWT 토큰 생성 완료: user_id={user_id}, 만료시간={expire_hours}시간")
        return token

    @classmethod
    async def verify_session(cls, token: str) -> Tuple[bool, str, Optional[Dict]]:
        """
        세션 검증
        Returns: (success, message, user_data)
        """
        try:
            payload = jwt.decode(token, cls._secret(), algorithms=[cls.JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            return False, "세션이 만료되었습니다", None
        except jwt.InvalidTokenError:
            return False, "유효하지 않은 토큰입니다", None

        user_id = payload.get('user_id')
        if not user_id:
            return False, "유효하지 않은 토큰입니다", None

        # 🚀 서버 재시작 시 모든 토큰 무효화
        token_server_start_time = payload.get('server_start_time')
        if token_server_start_time and token_server_start_time != SERVER_START_TIME:
            logger.warning(f"⚠️ 서버 재시작으로 인한 토큰 무효화: user_id={user_id}")
            return False, "서버가 재시작되어 다시 로그인해주세요", None

        async with get_session() as session:
            result = await session.execute(
                select(User).where(User.id == user_id).where(User.is_active == True)  # noqa: E712
            )
            user = result.scalar_one_or_none()
            if not user:
                return False, "존재하지 않는 사용자입니다", None

            return True, "유효한 세션입니다", user.to_dict()

    @classmethod
    async def refresh_token(cls, current_token: str) -> Tuple[bool, str, Optional[str], bool]:
        """
        토큰 갱신 - 기존 토큰의 remember_me 설정 유지
        Returns: (success, message, new_token, remember_me)
        """
        success, message, user_data = await cls.verify_session(current_token)
        if not success or not user_data:
            return False, message, None, False

        payload = jwt.decode(current_token, cls._secret(), algorithms=[cls.JWT_ALGORITHM])
        remember_me = bool(payload.get('remember_me', False))

        new_token = cls.create_session(user_data['id'], remember_me=remember_me)
        logger.info(f"🔄 토큰 갱신 완료: user_id={user_data['id']}, remember_me={remember_me}")
        return True, "토큰 갱신 완료", new_token, remember_me

    @classmethod
    async def change_password(cls, user_id: int, current_password: str, new_password: str) -> Tuple[bool, str]:
        """
        비밀번호 변경
        Returns: (success, message)
        """
        async with get_session() as session:
            user = await session.get(User, user_id)
            if not user:
                return False, "사용자를 찾을 수 없습니다"

            if not cls.verify_password(current_password, user.password_hash):
                return False, "현재 비밀번호가 올바르지 않습니다"

            is_strong, message = cls.validate_password_strength(new_password)
            if not is_strong:
                return False, message

            if cls.verify_password(new_password, user.password_hash):
                return False, "새 비밀번호는 현재 비밀번호와 달라야 합니다"

            user.password_hash = cls.hash_password(new_password)
            user.updated_at = datetime.utcnow()

            logger.info(f"✅ 비밀번호 변경 완료: user_id={user_id}")
            return True, "비밀번호가 성공적으로 변경되었습니다"
