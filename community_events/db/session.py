from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from community_events.core.config import settings

# The tables are owned by the hosted platform; this engine only reads them
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
