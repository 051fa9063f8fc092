"""
사용자 인증 관련 SQLAlchemy 모델
- User: 기본 정보 + 프로필 + 역할 목록
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON

from ..database.connection import Base
from config import DEFAULT_AVATAR_URL

SUPER_ADMIN = "super_admin"

def default_avatar(seed: str) -> str:
    """이메일 기반 기본 아바타 URL"""
    return DEFAULT_AVATAR_URL.format(seed=seed)

class User(Base):
    """사용자 모델"""
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(50), nullable=False)
    avatar = Column(String(500), nullable=True)
    phone = Column(String(20), nullable=True)
    birthdate = Column(String(10), nullable=True)  # YYYY-MM-DD
    interests = Column(JSON, default=list)
    roles = Column(JSON, default=list)  # super_admin, {category}_manager
    is_profile_complete = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', email='{self.email}')>"

    def to_dict(self):
        """딕셔너리로 변환 (민감한 정보 제외)"""
        roles = list(self.roles or [])
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'avatar': self.avatar or default_avatar(self.email),
            'phone': self.phone,
            'birthdate': self.birthdate,
            'interests': list(self.interests or []),
            'roles': roles,
            'isProfileComplete': bool(self.is_profile_complete),
            'isPartner': any('manager' in role for role in roles) or SUPER_ADMIN in roles,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'last_login': self.last_login.isoformat() if self.last_login else None,
            'is_active': self.is_active
        }
