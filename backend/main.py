import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    # 生产模式不使用 reload
    is_dev = not settings.is_production

    uvicorn.run(
        "app.main:app",
        host="127.0.0.1",  # 只监听本地
        port=8000,
        reload=is_dev,
        log_level=settings.LOG_LEVEL.lower(),
    )
