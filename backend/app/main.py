"""
GuestFolio 主应用入口
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.config import settings
from app.database import init_db
from app.routers import guests

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    """Setup logging configuration"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    setup_logging(settings.LOG_LEVEL)
    init_db()

    from core.domain.relationships import relationship_registry
    from app.hotel.domain.relationships import register_hotel_relationships
    relationship_registry.clear()
    register_hotel_relationships(relationship_registry)
    logger.info(
        f"{settings.APP_NAME} started, Guest links: "
        f"{', '.join(link.attribute for link in relationship_registry.get_relationships('Guest'))}"
    )

    yield


# 创建应用
app = FastAPI(
    title=settings.APP_NAME,
    description="Guest 聚合根及其房间、餐饮、价格策略、账夹",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan
)

# 注册路由
app.include_router(guests.router)


@app.get("/")
def root():
    """根路径"""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
    }


@app.get("/health")
def health_check():
    """健康检查"""
    return {"status": "healthy"}
