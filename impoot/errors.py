"""도메인 예외 정의 - 라우터 예외 처리기에서 HTTP 응답으로 변환"""

class MarketplaceError(Exception):
    """마켓플레이스 비즈니스 규칙 위반 기본 예외"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class InvalidRequestError(MarketplaceError):
    status_code = 400

class NotFoundError(MarketplaceError):
    status_code = 404

class PermissionDeniedError(MarketplaceError):
    status_code = 403

class ConflictError(MarketplaceError):
    status_code = 409

class ApplicationStatusError(MarketplaceError):
    """허용되지 않은 신청 상태 전이"""
    status_code = 400

class ReviewPolicyError(MarketplaceError):
    """리뷰 작성/수정 정책 위반"""
    status_code = 403

class SettlementBlockedError(MarketplaceError):
    """미납 수수료로 인한 콘텐츠 개설 차단"""
    status_code = 403

class ExternalServiceError(MarketplaceError):
    """외부 API 호출 실패"""
    status_code = 502
