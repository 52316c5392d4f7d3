from sqlalchemy import func
from sqlalchemy.orm import Session as DBSession
from walk_randomizer.catalog.courses import COURSES, get_course
from walk_randomizer.core.config import settings
from walk_randomizer.core.errors import ValidationFailure
from walk_randomizer.models import models
from typing import List, Optional

MIN_RATING = 1
MAX_RATING = 5

# --- Posts ---
def list_posts(db: DBSession, limit: int = 100) -> List[models.Post]:
    return db.query(models.Post).order_by(
        models.Post.created_at.desc(),
        models.Post.id.desc()
    ).limit(limit).all()

def create_post(db: DBSession, content: str) -> models.Post:
    text = (content or "").strip()
    if not text:
        raise ValidationFailure("Post content must not be empty")
    db_post = models.Post(content=text)
    db.add(db_post)
    db.commit()
    db.refresh(db_post)
    return db_post

# --- Course Reviews ---
def list_reviews(db: DBSession, course_id: Optional[int] = None, limit: int = 100) -> List[models.CourseReview]:
    query = db.query(models.CourseReview)
    if course_id is not None:
        query = query.filter(models.CourseReview.course_id == course_id)
    return query.order_by(
        models.CourseReview.created_at.desc(),
        models.CourseReview.id.desc()
    ).limit(limit).all()

def create_review(
    db: DBSession,
    course_id: int,
    rating: int,
    content: str,
    nickname: Optional[str] = None,
    catalog=COURSES,
) -> models.CourseReview:
    course = get_course(course_id, catalog)
    if course is None:
        raise ValidationFailure(f"Unknown course id {course_id}")
    if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationFailure(f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}")
    text = (content or "").strip()
    if not text:
        raise ValidationFailure("Review content must not be empty")

    db_review = models.CourseReview(
        course_id=course.id,
        course_name=course.name,
        rating=rating,
        content=text,
        nickname=(nickname or "").strip() or settings.REVIEW_DEFAULT_NICKNAME,
    )
    db.add(db_review)
    db.commit()
    db.refresh(db_review)
    return db_review

def get_rating_summary(db: DBSession, course_id: int) -> tuple[int, Optional[float]]:
    count, average = db.query(
        func.count(models.CourseReview.id),
        func.avg(models.CourseReview.rating)
    ).filter(models.CourseReview.course_id == course_id).one()
    if not count:
        return 0, None
    return int(count), round(float(average), 1)
