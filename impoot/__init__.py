"""임풋 - 부동산 커뮤니티 모임/강의/리포트 마켓플레이스 백엔드"""

__version__ = "1.0.0"
