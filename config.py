"""시스템 설정 및 상수 정의"""

import os
from datetime import datetime
from dotenv import load_dotenv

# 환경 변수 로드
load_dotenv()

# 🚀 서버 시작 시간 (토큰 무효화용)
SERVER_START_TIME = datetime.utcnow().timestamp()

# 카테고리 설정
CATEGORIES = ["networking", "minddate", "crew", "lecture"]

CATEGORY_LABELS = {
    "networking": "네트워킹",
    "minddate": "마인드데이트",
    "crew": "임장크루",
    "lecture": "강의",
}

# 정산 설정
DEFAULT_COMMISSION_RATE = int(os.getenv("DEFAULT_COMMISSION_RATE", "15"))  # %

# 화면 기본값
DEFAULT_TAGLINE = "나와 같은 방향을 걷는 사람들을 만나는 곳, 임풋"
DEFAULT_MYPAGE_BANNER = "https://images.unsplash.com/photo-1560518883-ce09059eeffa?auto=format&fit=crop&w=1200&q=80"
DEFAULT_ITEM_IMAGE = "https://images.unsplash.com/photo-1517245386807-bb43f82c33c4?auto=format&fit=crop&w=800&q=80"
DEFAULT_AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"

# 기본 설정값 (settings 테이블 시드)
DEFAULT_SETTINGS = {
    "commission_rate": str(DEFAULT_COMMISSION_RATE),
    "tagline": DEFAULT_TAGLINE,
    "mypage_banner": DEFAULT_MYPAGE_BANNER,
}

# AI 브리핑 설정
BRIEFING_PROMPT = "대한민국 부동산 최신 뉴스 3개를 '키워드: 내용' 형식으로 한줄 요약해줘."
BRIEFING_MAX_ITEMS = 3
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# 로깅 설정
LOGGING_CONFIG = {
    "level": "INFO",
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "file": "impoot.log",
    "max_bytes": 10485760,  # 10MB
    "backup_count": 5,
}
