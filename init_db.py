from sqlalchemy import create_engine
from finboard.backend.src.core.config import get_settings
from finboard.backend.src.models import *  # noqa
from finboard.backend.src.models.base import Base

def init_db():
    engine = create_engine(get_settings().database_url, future=True)
    print(f"🚀 Creating dashboard tables on {engine.url.render_as_string(hide_password=True)}")
    Base.metadata.create_all(bind=engine)
    print("✅ customers, invoices and revenue tables ready")

if __name__ == "__main__":
    init_db()
