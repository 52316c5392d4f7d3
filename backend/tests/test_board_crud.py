from __future__ import annotations

import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from walk_randomizer.core.database import init_db
from walk_randomizer.core.errors import ValidationFailure
from walk_randomizer.crud import crud


class TestBoardCrud(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        init_db(bind=self.engine)
        self.db = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_posts_are_listed_newest_first(self):
        first = crud.create_post(self.db, "  おはよう  ")
        second = crud.create_post(self.db, "今日は上野へ")

        self.assertEqual(first.content, "おはよう")
        posts = crud.list_posts(self.db)
        self.assertEqual([p.id for p in posts], [second.id, first.id])
        self.assertEqual(len(crud.list_posts(self.db, limit=1)), 1)

    def test_blank_post_is_rejected(self):
        with self.assertRaises(ValidationFailure):
            crud.create_post(self.db, "   ")
        self.assertEqual(crud.list_posts(self.db), [])

    def test_review_snapshots_course_name_and_defaults_nickname(self):
        review = crud.create_review(self.db, course_id=1, rating=4, content="桜がきれい", nickname="  ")
        self.assertEqual(review.course_name, "目黒川の桜道")
        self.assertEqual(review.nickname, crud.settings.REVIEW_DEFAULT_NICKNAME)

        named = crud.create_review(self.db, course_id=1, rating=5, content="また行きたい", nickname=" たろう ")
        self.assertEqual(named.nickname, "たろう")

    def test_review_validation(self):
        with self.assertRaises(ValidationFailure):
            crud.create_review(self.db, course_id=9999, rating=3, content="?")
        with self.assertRaises(ValidationFailure):
            crud.create_review(self.db, course_id=1, rating=6, content="too good")
        with self.assertRaises(ValidationFailure):
            crud.create_review(self.db, course_id=1, rating=0, content="too bad")
        with self.assertRaises(ValidationFailure):
            crud.create_review(self.db, course_id=1, rating=True, content="bool")
        with self.assertRaises(ValidationFailure):
            crud.create_review(self.db, course_id=1, rating=3, content="   ")
        self.assertEqual(crud.list_reviews(self.db), [])

    def test_rating_summary_rounds_average_to_one_decimal(self):
        self.assertEqual(crud.get_rating_summary(self.db, 2), (0, None))

        for rating in (5, 4, 4):
            crud.create_review(self.db, course_id=2, rating=rating, content="good")
        crud.create_review(self.db, course_id=3, rating=1, content="crowded")

        self.assertEqual(crud.get_rating_summary(self.db, 2), (3, 4.3))
        self.assertEqual(len(crud.list_reviews(self.db, course_id=2)), 3)
        self.assertEqual(len(crud.list_reviews(self.db)), 4)


if __name__ == "__main__":
    unittest.main()
