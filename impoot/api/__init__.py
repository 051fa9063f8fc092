"""API 라우터 모듈 - router_registry 에서 자동 등록"""
