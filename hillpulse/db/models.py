from sqlalchemy import Column, DateTime, Integer, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Summary(Base):
    __tablename__ = "summaries"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    summary_text = Column(Text, nullable=False)
    tweet_author = Column(Text, nullable=True)
    tweet_url = Column(Text, unique=True, nullable=True)  # natural key, NULL when unknown
