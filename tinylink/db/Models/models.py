from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class LinkItem(Base):
    __tablename__ = "links"

    # Short code is the primary key; the unique constraint is what makes
    # create a conditional insert
    code = Column(String(8), primary_key=True)
    url = Column(String, nullable=False)
    clicks = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_clicked_at = Column(DateTime(timezone=True), nullable=True)
