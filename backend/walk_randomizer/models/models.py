from sqlalchemy import CheckConstraint, Column, Integer, String, Text, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from walk_randomizer.core.database import Base

class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

class CourseReview(Base):
    __tablename__ = "course_reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_course_reviews_rating"),
    )

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, index=True, nullable=False)
    course_name = Column(String, nullable=False) # snapshot of the catalog name at posting time
    rating = Column(Integer, nullable=False) # 1-5
    content = Column(Text, nullable=False)
    nickname = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

class SessionStateEntry(Base):
    __tablename__ = "session_state_entries"
    __table_args__ = (
        UniqueConstraint("namespace", "key", name="uq_session_state_namespace_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    namespace = Column(String, index=True, nullable=False) # device id
    key = Column(String, nullable=False)
    value = Column(Text, nullable=False)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
