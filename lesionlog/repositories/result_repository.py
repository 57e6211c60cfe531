# lesionlog/repositories/result_repository.py
from datetime import datetime
from sqlalchemy import func
from ..core.database import Result, User
from .. import db
from ..utils.logger import setup_logger

class ResultRepository:
    def __init__(self):
        self.logger = setup_logger()

    @staticmethod
    def _within(query, start=None, end=None):
        if start is not None:
            query = query.filter(Result.created_at >= start)
        if end is not None:
            query = query.filter(Result.created_at <= end)
        return query

    @staticmethod
    def _newest_first(query):
        return query.order_by(Result.created_at.desc(), Result.id.desc())

    def create_result(self, confidence, prediction, user_id, created_at=None):
        """Repository: Insert a prediction result"""
        try:
            result = Result(
                confidence=confidence,
                prediction=prediction,
                user_id=user_id,
                created_at=created_at or datetime.utcnow()
            )
            db.session.add(result)
            db.session.commit()
            self.logger.info(f"Repository: Stored result {result.id} for user ID {user_id}")
            return result
        except Exception as e:
            db.session.rollback()
            self.logger.error(f"Repository: Failed to store result for user ID {user_id}: {str(e)}")
            raise

    def paginate(self, page, page_size, user_id=None, prediction_contains=None, start=None, end=None):
        """Repository: One page of results, newest first"""
        try:
            query = self._within(Result.query, start, end)
            if user_id is not None:
                query = query.filter(Result.user_id == user_id)
            if prediction_contains:
                query = query.filter(
                    func.lower(Result.prediction).contains(prediction_contains.lower(), autoescape=True)
                )
            return self._newest_first(query).paginate(page=page, per_page=page_size, error_out=False)
        except Exception as e:
            self.logger.error(f"Repository: Failed to paginate results: {str(e)}")
            raise

    def list_results(self, user_id=None, start=None, end=None, limit=None):
        """Repository: All matching results, newest first"""
        try:
            query = self._within(Result.query, start, end)
            if user_id is not None:
                query = query.filter(Result.user_id == user_id)
            query = self._newest_first(query)
            if limit is not None:
                query = query.limit(limit)
            return query.all()
        except Exception as e:
            self.logger.error(f"Repository: Failed to list results: {str(e)}")
            raise

    def count(self, start=None, end=None, min_confidence_exclusive=None, created_since=None):
        try:
            query = self._within(db.session.query(func.count(Result.id)), start, end)
            if min_confidence_exclusive is not None:
                query = query.filter(Result.confidence > min_confidence_exclusive)
            if created_since is not None:
                query = query.filter(Result.created_at >= created_since)
            return query.scalar() or 0
        except Exception as e:
            self.logger.error(f"Repository: Failed to count results: {str(e)}")
            raise

    def confidence_summary(self, start=None, end=None):
        """Repository: (count, avg, min, max) of confidence"""
        try:
            query = db.session.query(
                func.count(Result.id),
                func.avg(Result.confidence),
                func.min(Result.confidence),
                func.max(Result.confidence)
            )
            return self._within(query, start, end).one()
        except Exception as e:
            self.logger.error(f"Repository: Failed to summarize confidence: {str(e)}")
            raise

    def group_by_prediction(self, start=None, end=None):
        """Repository: Per-label aggregates, most frequent label first"""
        try:
            result_count = func.count(Result.id).label('result_count')
            query = db.session.query(
                Result.prediction,
                result_count,
                func.avg(Result.confidence).label('avg_confidence'),
                func.min(Result.confidence).label('min_confidence'),
                func.max(Result.confidence).label('max_confidence'),
                func.count(func.distinct(Result.user_id)).label('unique_users')
            )
            query = self._within(query, start, end)
            return query.group_by(Result.prediction).order_by(result_count.desc()).all()
        except Exception as e:
            self.logger.error(f"Repository: Failed to group results by prediction: {str(e)}")
            raise

    def top_users(self, limit, start=None, end=None):
        """Repository: Owners with the most results, joined to their profile"""
        try:
            result_count = func.count(Result.id).label('result_count')
            query = db.session.query(
                User.id,
                User.username,
                User.email,
                User.role,
                result_count,
                func.avg(Result.confidence).label('avg_confidence')
            ).select_from(Result).join(User, Result.user_id == User.id)
            query = self._within(query, start, end)
            return (
                query.group_by(User.id, User.username, User.email, User.role)
                .order_by(result_count.desc())
                .limit(limit)
                .all()
            )
        except Exception as e:
            self.logger.error(f"Repository: Failed to rank users by result count: {str(e)}")
            raise

    def rows_since(self, since):
        """Repository: Raw (created_at, confidence, user_id, prediction) rows for trend bucketing"""
        try:
            return (
                db.session.query(Result.created_at, Result.confidence, Result.user_id, Result.prediction)
                .filter(Result.created_at >= since)
                .order_by(Result.created_at.asc(), Result.id.asc())
                .all()
            )
        except Exception as e:
            self.logger.error(f"Repository: Failed to load results since {since}: {str(e)}")
            raise
