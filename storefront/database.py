from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
import dotenv
import os
dotenv.load_dotenv()

# Falls back to a local SQLite file for development
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")


def is_sqlite_database(url):
    return url is not None and url.startswith("sqlite")


connect_args = {"check_same_thread": False} if is_sqlite_database(DATABASE_URL) else {}

engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
