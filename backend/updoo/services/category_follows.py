from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from updoo.errors import NotFound
from updoo.models.engagement import CategoryFollow
from updoo.models.reference import Category
from updoo.models.user import User


class CategoryFollowService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def follow(self, user_id: int, category_id: int) -> CategoryFollow:
        if self.db.get(Category, category_id) is None:
            raise NotFound("Category not found")
        existing = self._find(user_id, category_id)
        if existing:
            return existing
        follow = CategoryFollow(user_id=user_id, category_id=category_id)
        self.db.add(follow)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return self._find(user_id, category_id)
        self.db.refresh(follow)
        return follow

    def unfollow(self, user_id: int, category_id: int) -> int:
        deleted = (
            self.db.query(CategoryFollow)
            .filter(CategoryFollow.user_id == user_id, CategoryFollow.category_id == category_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return int(deleted)

    def followed_categories(self, user_id: int) -> list[Category]:
        return (
            self.db.query(Category)
            .join(CategoryFollow, CategoryFollow.category_id == Category.id)
            .filter(CategoryFollow.user_id == user_id)
            .order_by(Category.id)
            .all()
        )

    def followers_of(self, category_id: int, exclude_user_id: int | None = None) -> list[User]:
        query = (
            self.db.query(User)
            .join(CategoryFollow, CategoryFollow.user_id == User.id)
            .filter(CategoryFollow.category_id == category_id, User.is_active == True)  # noqa: E712
        )
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        return query.order_by(User.id).all()

    def _find(self, user_id: int, category_id: int) -> CategoryFollow | None:
        return (
            self.db.query(CategoryFollow)
            .filter(CategoryFollow.user_id == user_id, CategoryFollow.category_id == category_id)
            .first()
        )
