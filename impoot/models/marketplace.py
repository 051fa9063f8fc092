"""
마켓플레이스 SQLAlchemy 모델
- Item: 카테고리별 컬럼을 한 테이블에 보관 (networking / minddate / crew / lecture)
- Application, UserLike, UserUnlock, Review, UserNotification
- 홈 화면 디자인: Slide, Notice, Briefing, CategoryHeader, CategoryDetailImage
- Setting: key/value 설정 저장소
"""

from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, JSON, ForeignKey, UniqueConstraint
)

from ..database.connection import Base

class Item(Base):
    """콘텐츠(모임/강의/임장) 모델"""
    __tablename__ = 'items'

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_type = Column(String(20), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    img = Column(String(500), nullable=True)
    author = Column(String(50), nullable=True)
    author_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    views = Column(Integer, default=0)
    comments = Column(Integer, default=0)
    description = Column(Text, nullable=True)
    event_date = Column(String(50), nullable=True)
    price = Column(String(50), nullable=True)  # "30,000원"
    location = Column(String(200), nullable=True)
    status = Column(String(20), default='open', index=True)  # open, closed, ended
    settlement_status = Column(String(20), default='pending')  # pending, completed
    host_bank_info = Column(String(200), nullable=True)
    kakao_chat_url = Column(String(500), nullable=True)
    host_description = Column(Text, nullable=True)
    host_intro_image = Column(String(500), nullable=True)

    # networking
    networking_type = Column(String(20), nullable=True)
    current_participants = Column(Integer, default=0)
    max_participants = Column(Integer, nullable=True)
    group_photo = Column(String(500), nullable=True)

    # networking / lecture
    curriculum = Column(JSON, nullable=True)

    # minddate
    minddate_type = Column(String(20), nullable=True)
    target_audience = Column(String(200), nullable=True)
    gender_ratio_male = Column(Integer, nullable=True)
    gender_ratio_female = Column(Integer, nullable=True)
    matched_couples = Column(Integer, nullable=True)
    bank_info = Column(String(200), nullable=True)
    refund_policy = Column(Text, nullable=True)

    # crew
    crew_type = Column(String(20), nullable=True)  # recruit, report
    leader = Column(String(50), nullable=True)
    leader_profile = Column(String(500), nullable=True)
    crew_level = Column(String(10), nullable=True)  # 입문, 중급, 실전
    course = Column(JSON, nullable=True)
    gallery = Column(JSON, nullable=True)
    report_content = Column(Text, nullable=True)
    related_recruit_title = Column(String(200), nullable=True)
    purchase_count = Column(Integer, default=0)

    # lecture
    lecture_format = Column(String(20), nullable=True)  # VOD, 오프라인
    teacher = Column(String(50), nullable=True)
    teacher_profile = Column(String(500), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Item(id={self.id}, category='{self.category_type}', title='{self.title}')>"

class Application(Base):
    """참여 신청 모델"""
    __tablename__ = 'applications'
    __table_args__ = (UniqueConstraint('user_id', 'item_id', name='uq_application_user_item'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey('items.id', ondelete='CASCADE'), nullable=False, index=True)
    status = Column(String(20), nullable=False, default='applied')
    refund_account = Column(String(200), nullable=True)
    refund_reason = Column(Text, nullable=True)
    user_name = Column(String(50), nullable=True)
    user_phone = Column(String(20), nullable=True)
    seat_held = Column(Boolean, default=False)  # current_participants 반영 여부
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'itemId': self.item_id,
            'status': self.status,
            'appliedAt': self.created_at.isoformat() if self.created_at else None,
            'refundAccount': self.refund_account,
            'refundReason': self.refund_reason,
            'userName': self.user_name,
            'userPhone': self.user_phone,
        }

class UserLike(Base):
    """찜 모델"""
    __tablename__ = 'user_likes'
    __table_args__ = (UniqueConstraint('user_id', 'item_id', name='uq_like_user_item'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey('items.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

class UserUnlock(Base):
    """임장 리포트 열람권 모델"""
    __tablename__ = 'user_unlocks'
    __table_args__ = (UniqueConstraint('user_id', 'item_id', name='uq_unlock_user_item'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey('items.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

class Review(Base):
    """후기 모델"""
    __tablename__ = 'reviews'
    __table_args__ = (UniqueConstraint('user_id', 'item_id', name='uq_review_user_item'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(Integer, ForeignKey('items.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    user = Column(String(50), nullable=True)  # 작성자 표시 이름
    avatar = Column(String(500), nullable=True)
    text = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False, default=5)
    date = Column(String(20), nullable=True)  # 표시용 작성일
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'itemId': self.item_id,
            'userId': self.user_id,
            'user': self.user,
            'text': self.text,
            'rating': int(self.rating or 0),
            'date': self.date,
            'avatar': self.avatar,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

class UserNotification(Base):
    """사용자 알림 모델"""
    __tablename__ = 'user_notifications'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'title': self.title,
            'message': self.message,
            'isRead': bool(self.is_read),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

class Slide(Base):
    """메인 슬라이드 모델"""
    __tablename__ = 'slides'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    img = Column(String(500), nullable=True)
    sort_order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'desc': self.description,
            'img': self.img,
            'sortOrder': self.sort_order,
            'isActive': bool(self.is_active),
        }

class Notice(Base):
    """공지 배너 모델"""
    __tablename__ = 'notices'

    id = Column(Integer, primary_key=True, autoincrement=True)
    message = Column(Text, nullable=False)
    link_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'message': self.message,
            'linkUrl': self.link_url,
            'isActive': bool(self.is_active),
            'sortOrder': self.sort_order,
        }

class Briefing(Base):
    """데일리 브리핑 모델"""
    __tablename__ = 'briefings'

    id = Column(Integer, primary_key=True, autoincrement=True)
    highlight = Column(String(100), nullable=False)
    text = Column(Text, nullable=False)
    sort_order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'highlight': self.highlight,
            'text': self.text,
            'sortOrder': self.sort_order,
        }

class CategoryHeader(Base):
    """카테고리 상단 문구 모델"""
    __tablename__ = 'category_headers'

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_type = Column(String(20), unique=True, nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class CategoryDetailImage(Base):
    """카테고리 상세 이미지 모델"""
    __tablename__ = 'category_detail_images'

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_type = Column(String(20), unique=True, nullable=False)
    image_url = Column(String(500), nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class Setting(Base):
    """key/value 설정 모델"""
    __tablename__ = 'settings'

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
